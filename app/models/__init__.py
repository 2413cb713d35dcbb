"""
Models module - SQLAlchemy ORM tables.

- Administrator: accounts allowed to log in and manage the roster
- Student: roster entries
"""

from app.models.base import Base, Level
from app.models.admin import Administrator
from app.models.student import Student

__all__ = ["Base", "Level", "Administrator", "Student"]
