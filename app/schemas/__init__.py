"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: SQLAlchemy tables
- Schemas: API contract (what client sends/receives)
"""

from app.schemas.schemas import (
    ApiResponse,
    ImportSummary,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    SortDirection,
    StudentPage,
    StudentRequest,
    StudentResponse,
)

__all__ = [
    "ApiResponse",
    "ImportSummary",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "SortDirection",
    "StudentPage",
    "StudentRequest",
    "StudentResponse",
]
