"""
CSV helpers for student export/import.

Fields are joined/split on bare commas with no quoting, so a username
containing a comma does not survive a round trip.
"""

from typing import Iterable, List

from app.models import Student

EXPORT_HEADER = "ID,Username,Level,Created At,Updated At"


def _drop_trailing_empty(parts: List[str]) -> List[str]:
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def students_to_csv(students: Iterable[Student]) -> str:
    """Header line, then one line per student, each terminated by a newline."""
    lines = [EXPORT_HEADER]
    for student in students:
        lines.append(",".join([
            str(student.id),
            student.username,
            student.level.value,
            student.created_at.isoformat(),
            student.updated_at.isoformat(),
        ]))
    return "\n".join(lines) + "\n"


def split_lines(content: str) -> List[str]:
    """Split an upload into lines; trailing blank lines do not count."""
    return _drop_trailing_empty(content.split("\n"))


def split_fields(line: str) -> List[str]:
    """Split one row on commas; trailing empty fields are dropped."""
    return _drop_trailing_empty(line.split(","))
