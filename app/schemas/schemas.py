"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from datetime import datetime
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.base import Level

T = TypeVar("T")


# ============================================================
# ENUMS
# ============================================================

class SortDirection(str, Enum):
    asc = "ASC"
    desc = "DESC"

    @classmethod
    def parse(cls, value: str) -> "SortDirection":
        """Case-insensitive lookup ('asc', 'DESC', ...)."""
        return cls(value.strip().upper())


# ============================================================
# RESPONSE ENVELOPE
# Every JSON body is wrapped as {success, message, data}
# ============================================================

class ApiResponse(BaseModel, Generic[T]):
    success: bool
    message: str
    data: Optional[T] = None

    @classmethod
    def ok(cls, data: T = None, message: str = "Success") -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def error(cls, message: str) -> "ApiResponse[T]":
        return cls(success=False, message=message, data=None)


# ============================================================
# AUTH SCHEMAS
# ============================================================

def _strip_username(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Username is required")
    return v


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    # Same normalisation as registration, so the stored name matches
    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return _strip_username(v)


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8)

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return _strip_username(v)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    username: str


# ============================================================
# STUDENT SCHEMAS
# ============================================================

class StudentRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    level: Level

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return _strip_username(v)


class StudentResponse(BaseModel):
    """Wire names are camelCase: createdAt, updatedAt."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    username: str
    level: Level
    created_at: datetime
    updated_at: datetime


class StudentPage(BaseModel):
    content: List[StudentResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int


class ImportSummary(BaseModel):
    imported: int
    skipped: int
