import pytest

from app.core.exceptions import MalformedInput
from app.models import Level
from app.services.csv_service import EXPORT_HEADER, split_fields, split_lines


def test_import_counts_duplicates_as_skipped(student_service) -> None:
    content = "Username,Level\nbob,beginner\nalice,ADVANCED\nbob,intermediate"

    summary = student_service.import_csv(content)

    assert (summary.imported, summary.skipped) == (2, 1)
    students = student_service.store.list_all_ordered()
    bobs = [s for s in students if s.username == "bob"]
    assert len(bobs) == 1
    assert bobs[0].level == Level.BEGINNER


def test_import_skips_bad_rows_and_keeps_going(student_service) -> None:
    content = "\n".join([
        "Username,Level",
        "alice,EXPERT",
        "",
        "   ",
        "lonely",
        " ,BEGINNER",
        "  carol ,  advanced  ",
        "dave,beginner,extra",
    ])

    summary = student_service.import_csv(content)

    # bad level and blank username are skipped; "lonely" has one field and is ignored
    assert (summary.imported, summary.skipped) == (2, 2)
    names = {s.username: s.level for s in student_service.store.list_all_ordered()}
    assert names == {"carol": Level.ADVANCED, "dave": Level.BEGINNER}


def test_import_handles_crlf(student_service) -> None:
    summary = student_service.import_csv("Username,Level\r\nerin,Beginner\r\n")

    assert (summary.imported, summary.skipped) == (1, 0)
    assert student_service.store.list_all_ordered()[0].username == "erin"


def test_import_trailing_empty_field_is_ignored(student_service) -> None:
    summary = student_service.import_csv("Username,Level\nfrank,\n")

    assert (summary.imported, summary.skipped) == (0, 0)


@pytest.mark.parametrize(
    "content, message",
    [
        ("", "File is empty"),
        ("Username,Level", "Invalid CSV format"),
        ("Username,Level\n", "Invalid CSV format"),
        ("Username,Level\n\n\n", "Invalid CSV format"),
    ],
)
def test_import_rejects_structurally_bad_files(student_service, content, message) -> None:
    with pytest.raises(MalformedInput) as exc:
        student_service.import_csv(content)

    assert exc.value.message == message


def test_export_without_students_is_header_only(student_service) -> None:
    assert student_service.export_csv() == EXPORT_HEADER + "\n"


def test_export_lists_students_by_ascending_id(student_service) -> None:
    zed = student_service.create_student("zed", Level.ADVANCED)
    amy = student_service.create_student("amy", Level.BEGINNER)

    lines = student_service.export_csv().splitlines()

    assert lines[0] == "ID,Username,Level,Created At,Updated At"
    assert lines[1] == ",".join([
        str(zed.id), "zed", "ADVANCED", zed.created_at.isoformat(), zed.updated_at.isoformat(),
    ])
    assert lines[2].startswith(f"{amy.id},amy,BEGINNER,")
    assert len(lines) == 3


def test_export_does_not_escape_commas(student_service) -> None:
    student_service.create_student("last, first", Level.BEGINNER)

    row = student_service.export_csv().splitlines()[1]

    assert len(row.split(",")) == 6


def test_split_helpers() -> None:
    assert split_lines("a\nb\n\n") == ["a", "b"]
    assert split_fields("x,y,,") == ["x", "y"]
    assert split_fields(",y") == ["", "y"]
