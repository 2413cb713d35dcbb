import pytest

from app.core.exceptions import StudentNotFound, UsernameConflict, ValidationError
from app.models import Level
from app.schemas.schemas import SortDirection


def _usernames(page) -> list:
    return [s.username for s in page.content]


def test_create_then_get_has_equal_timestamps(student_service) -> None:
    created = student_service.create_student("alice", Level.BEGINNER)

    fetched = student_service.get_student(created.id)

    assert fetched.id == created.id
    assert fetched.username == "alice"
    assert fetched.level == Level.BEGINNER
    assert fetched.created_at == fetched.updated_at


def test_update_strictly_increases_updated_at(student_service) -> None:
    created = student_service.create_student("alice", Level.BEGINNER)

    updated = student_service.update_student(created.id, "alice", Level.ADVANCED)
    again = student_service.update_student(created.id, "alice2", Level.ADVANCED)

    assert updated.updated_at > created.updated_at
    assert again.updated_at > updated.updated_at
    assert again.created_at == created.created_at
    assert student_service.get_student(created.id).username == "alice2"


def test_create_duplicate_username_conflicts(student_service) -> None:
    student_service.create_student("alice", Level.BEGINNER)

    with pytest.raises(UsernameConflict):
        student_service.create_student("alice", Level.ADVANCED)


def test_update_to_another_students_username_conflicts(student_service) -> None:
    student_service.create_student("alice", Level.BEGINNER)
    bob = student_service.create_student("bob", Level.BEGINNER)

    with pytest.raises(UsernameConflict):
        student_service.update_student(bob.id, "alice", Level.BEGINNER)

    assert student_service.get_student(bob.id).username == "bob"


def test_store_constraint_is_the_final_word(student_service) -> None:
    # Bypass the advisory check, as a concurrent request would
    student_service.store.insert("alice", Level.BEGINNER)

    with pytest.raises(UsernameConflict):
        student_service.store.insert("alice", Level.INTERMEDIATE)


def test_store_update_constraint_is_the_final_word(student_service) -> None:
    student_service.store.insert("alice", Level.BEGINNER)
    bob = student_service.store.insert("bob", Level.BEGINNER)

    with pytest.raises(UsernameConflict):
        student_service.store.update(bob.id, "alice", Level.BEGINNER)


def test_uniqueness_survives_mixed_operations(student_service) -> None:
    a = student_service.create_student("a", Level.BEGINNER)
    b = student_service.create_student("b", Level.BEGINNER)
    for attempt in [
        lambda: student_service.create_student("a", Level.ADVANCED),
        lambda: student_service.update_student(b.id, "a", Level.ADVANCED),
        lambda: student_service.update_student(a.id, "b", Level.ADVANCED),
    ]:
        with pytest.raises(UsernameConflict):
            attempt()
    student_service.update_student(a.id, "c", Level.BEGINNER)
    student_service.update_student(b.id, "a", Level.BEGINNER)

    names = [s.username for s in student_service.store.list_all_ordered()]
    assert sorted(names) == ["a", "c"]


def test_get_unknown_id_is_not_found(student_service) -> None:
    with pytest.raises(StudentNotFound) as exc:
        student_service.get_student(999)

    assert str(exc.value) == "Student not found with id: 999"


def test_update_unknown_id_is_not_found(student_service) -> None:
    with pytest.raises(StudentNotFound):
        student_service.update_student(999, "ghost", Level.BEGINNER)


def test_delete_then_get_is_not_found(student_service) -> None:
    created = student_service.create_student("alice", Level.BEGINNER)

    student_service.delete_student(created.id)

    with pytest.raises(StudentNotFound):
        student_service.get_student(created.id)
    with pytest.raises(StudentNotFound):
        student_service.delete_student(created.id)


@pytest.mark.parametrize("username", ["", "   ", None])
def test_create_requires_username(student_service, username) -> None:
    with pytest.raises(ValidationError):
        student_service.create_student(username, Level.BEGINNER)


def test_create_rejects_unknown_level(student_service) -> None:
    with pytest.raises(ValidationError):
        student_service.create_student("alice", "EXPERT")


def test_create_accepts_level_name_in_any_case(student_service) -> None:
    created = student_service.create_student("alice", "intermediate")

    assert created.level == Level.INTERMEDIATE


# ============================================================
# LISTING
# ============================================================

def test_first_page_of_25(student_service) -> None:
    for i in range(25):
        student_service.create_student(f"student{i:02d}", Level.BEGINNER)

    page = student_service.list_students(page=0, size=10)

    assert len(page.content) == 10
    assert page.total_elements == 25
    assert page.total_pages == 3
    assert [s.id for s in page.content] == sorted(s.id for s in page.content)


def test_last_and_out_of_range_pages(student_service) -> None:
    for i in range(25):
        student_service.create_student(f"student{i:02d}", Level.BEGINNER)

    last = student_service.list_students(page=2, size=10)
    beyond = student_service.list_students(page=7, size=10)

    assert len(last.content) == 5
    assert beyond.content == []
    assert beyond.total_elements == 25


def test_search_and_level_filter_are_combined(student_service) -> None:
    student_service.create_student("alice", Level.BEGINNER)
    student_service.create_student("alicia", Level.ADVANCED)
    student_service.create_student("bob", Level.BEGINNER)

    page = student_service.list_students(search="ali", level=Level.BEGINNER)

    assert _usernames(page) == ["alice"]
    assert page.total_elements == 1


def test_search_alone(student_service) -> None:
    student_service.create_student("alice", Level.BEGINNER)
    student_service.create_student("ALICIA", Level.ADVANCED)
    student_service.create_student("bob", Level.BEGINNER)

    page = student_service.list_students(search="Ali")

    assert _usernames(page) == ["alice", "ALICIA"]


def test_level_filter_alone(student_service) -> None:
    student_service.create_student("alice", Level.BEGINNER)
    student_service.create_student("alicia", Level.ADVANCED)
    student_service.create_student("bob", Level.BEGINNER)

    page = student_service.list_students(level=Level.BEGINNER)

    assert _usernames(page) == ["alice", "bob"]


def test_search_matches_id(student_service) -> None:
    created = [student_service.create_student(f"s{i}", Level.BEGINNER) for i in range(12)]
    target = created[11]

    page = student_service.list_students(search=str(target.id))

    assert target.id in [s.id for s in page.content]
    assert all(str(target.id) in str(s.id) or str(target.id) in s.username for s in page.content)


def test_empty_search_is_ignored(student_service) -> None:
    student_service.create_student("alice", Level.BEGINNER)
    student_service.create_student("bob", Level.ADVANCED)

    page = student_service.list_students(search="")

    assert page.total_elements == 2


def test_sort_by_username_descending(student_service) -> None:
    for name in ["carol", "alice", "bob"]:
        student_service.create_student(name, Level.BEGINNER)

    page = student_service.list_students(sort_by="username", direction=SortDirection.desc)

    assert _usernames(page) == ["carol", "bob", "alice"]


def test_sort_by_unknown_field_fails(student_service) -> None:
    with pytest.raises(ValueError):
        student_service.list_students(sort_by="password")
