"""
Database module - relational store connection.
"""
from app.db.postgres import Database, is_unique_violation, mask_url

__all__ = [
    "Database",
    "is_unique_violation",
    "mask_url",
]
