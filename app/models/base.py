from datetime import datetime, timezone
from enum import Enum

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class Level(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (what the DateTime columns hold)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
