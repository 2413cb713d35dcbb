"""
Student Roster Admin API
Administrators authenticate with a bearer token and manage a student roster.

Architecture:
- Relational store (PostgreSQL by default): administrators and students
- JWT tokens: stateless, signed, time-limited
- CSV: bulk import and full export of the roster
"""

__version__ = "1.0.0"
