"""
Student roster - record store and the operations behind /api/students.

StudentStore talks to the database; StudentService holds the rules
(not-found, username uniqueness, CSV import/export).
"""

import logging
import math
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Union

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import (
    MalformedInput,
    RosterError,
    StudentNotFound,
    UsernameConflict,
    ValidationError,
)
from app.db.postgres import Database, is_unique_violation
from app.models import Level, Student
from app.models.base import utcnow
from app.schemas.schemas import ImportSummary, SortDirection
from app.services.csv_service import split_fields, split_lines, students_to_csv

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT = "id"

# Accepted sortBy values, both API (camelCase) and column names
SORTABLE_FIELDS = {
    "id": Student.id,
    "username": Student.username,
    "level": Student.level,
    "createdAt": Student.created_at,
    "created_at": Student.created_at,
    "updatedAt": Student.updated_at,
    "updated_at": Student.updated_at,
}


@dataclass
class Page:
    """A slice of an ordered result set plus total-count metadata."""

    content: List[Student]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0


# ============================================================
# RECORD STORE
# ============================================================

class StudentStore:
    """
    CRUD over the students table.

    Every method opens its own session, so one instance is shared by all
    requests.
    """

    def __init__(self, database: Database):
        self.database = database

    def find_page(
        self,
        page: int = DEFAULT_PAGE,
        size: int = DEFAULT_PAGE_SIZE,
        sort_by: str = DEFAULT_SORT,
        direction: SortDirection = SortDirection.asc,
        search: Optional[str] = None,
        level: Optional[Level] = None,
    ) -> Page:
        """
        Fetch one page of students.

        search matches a case-insensitive substring of the username or a
        substring of the id; level is an exact match. Both given means both
        must hold.
        """
        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise ValueError(f"No property '{sort_by}' found for type 'Student'")
        order = column.desc() if direction == SortDirection.desc else column.asc()

        filters = []
        if search:
            filters.append(or_(
                func.lower(Student.username).like(f"%{search.lower()}%"),
                cast(Student.id, String).like(f"%{search}%"),
            ))
        if level is not None:
            filters.append(Student.level == level)

        count_stmt = select(func.count()).select_from(Student)
        rows_stmt = select(Student)
        for clause in filters:
            count_stmt = count_stmt.where(clause)
            rows_stmt = rows_stmt.where(clause)
        rows_stmt = rows_stmt.order_by(order, Student.id.asc()).offset(page * size).limit(size)

        with self.database.session() as db:
            total = db.scalar(count_stmt)
            rows = list(db.scalars(rows_stmt))
        return Page(content=rows, page=page, size=size, total_elements=total)

    def get(self, student_id: int) -> Optional[Student]:
        with self.database.session() as db:
            return db.get(Student, student_id)

    def exists_by_username(self, username: str) -> bool:
        with self.database.session() as db:
            found = db.scalar(
                select(Student.id).where(Student.username == username).limit(1)
            )
        return found is not None

    def insert(self, username: str, level: Level) -> Student:
        now = utcnow()
        student = Student(username=username, level=level, created_at=now, updated_at=now)
        try:
            with self.database.session() as db:
                db.add(student)
                db.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise UsernameConflict() from e
            raise
        return student

    def update(self, student_id: int, username: str, level: Level) -> Optional[Student]:
        """Overwrite username/level and bump updated_at. None if the id is unknown."""
        try:
            with self.database.session() as db:
                student = db.get(Student, student_id)
                if student is None:
                    return None
                now = utcnow()
                if now <= student.updated_at:
                    now = student.updated_at + timedelta(microseconds=1)
                student.username = username
                student.level = level
                student.updated_at = now
                db.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise UsernameConflict() from e
            raise
        return student

    def delete(self, student_id: int) -> bool:
        with self.database.session() as db:
            student = db.get(Student, student_id)
            if student is None:
                return False
            db.delete(student)
        return True

    def list_all_ordered(self) -> List[Student]:
        """Every student, ascending by id, unpaginated."""
        with self.database.session() as db:
            return list(db.scalars(select(Student).order_by(Student.id.asc())))


# ============================================================
# STUDENT OPERATIONS
# ============================================================

def _coerce_level(level: Union[Level, str]) -> Level:
    if isinstance(level, Level):
        return level
    try:
        return Level(str(level).strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid level: {level}") from None


def _require_username(username: Optional[str]) -> str:
    username = (username or "").strip()
    if not username:
        raise ValidationError("Username is required")
    return username


class StudentService:
    """
    Rules on top of StudentStore.

    Username checks before insert/update are advisory: two concurrent requests
    may both pass them, and the unique constraint then rejects one of them with
    the same UsernameConflict.
    """

    def __init__(self, store: StudentStore):
        self.store = store

    def list_students(
        self,
        page: int = DEFAULT_PAGE,
        size: int = DEFAULT_PAGE_SIZE,
        sort_by: str = DEFAULT_SORT,
        direction: SortDirection = SortDirection.asc,
        search: Optional[str] = None,
        level: Optional[Level] = None,
    ) -> Page:
        return self.store.find_page(
            page=page,
            size=size,
            sort_by=sort_by,
            direction=direction,
            search=search or None,
            level=level,
        )

    def get_student(self, student_id: int) -> Student:
        student = self.store.get(student_id)
        if student is None:
            raise StudentNotFound(student_id)
        return student

    def create_student(self, username: str, level: Union[Level, str]) -> Student:
        username = _require_username(username)
        level = _coerce_level(level)
        if self.store.exists_by_username(username):
            raise UsernameConflict()

        student = self.store.insert(username, level)
        logger.info("Created student %s (id=%s)", student.username, student.id)
        return student

    def update_student(self, student_id: int, username: str, level: Union[Level, str]) -> Student:
        username = _require_username(username)
        level = _coerce_level(level)
        current = self.get_student(student_id)
        if current.username != username and self.store.exists_by_username(username):
            raise UsernameConflict()

        student = self.store.update(student_id, username, level)
        if student is None:
            # Deleted between the lookup and the write
            raise StudentNotFound(student_id)
        logger.info("Updated student id=%s", student_id)
        return student

    def delete_student(self, student_id: int) -> None:
        if not self.store.delete(student_id):
            raise StudentNotFound(student_id)
        logger.info("Deleted student id=%s", student_id)

    def export_csv(self) -> str:
        return students_to_csv(self.store.list_all_ordered())

    def import_csv(self, content: str) -> ImportSummary:
        """
        Create one student per data row; the first line is a header.

        Rows with fewer than two fields are ignored. Duplicates and rows
        that fail for any other reason are counted as skipped; a bad row
        never stops the import.

        Raises:
            MalformedInput: content is empty or has no data rows
        """
        if not content:
            raise MalformedInput("File is empty")
        lines = split_lines(content)
        if len(lines) < 2:
            raise MalformedInput("Invalid CSV format")

        imported = 0
        skipped = 0
        for line_no, raw in enumerate(lines[1:], start=2):
            line = raw.strip()
            if not line:
                continue
            fields = split_fields(line)
            if len(fields) < 2:
                continue

            try:
                self.create_student(fields[0].strip(), fields[1].strip().upper())
                imported += 1
            except UsernameConflict:
                logger.debug("Import line %d: username %r already exists", line_no, fields[0])
                skipped += 1
            except (RosterError, SQLAlchemyError) as e:
                logger.debug("Import line %d skipped: %s", line_no, e)
                skipped += 1

        logger.info("CSV import finished: %d imported, %d skipped", imported, skipped)
        return ImportSummary(imported=imported, skipped=skipped)
