# tests/test_repository.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from home_chores.database import Database
from home_chores.errors import StorageError, TaskValidationError
from home_chores.models import Outcome, Task
from home_chores.repository import TaskRepository
from home_chores.timeutils import to_epoch_millis

from .conftest import insert_raw


def test_insert_then_get_by_id_returns_equal_task(repo: TaskRepository, make_task) -> None:
    task = make_task()
    new_id = repo.insert(task)

    assert new_id > 0
    assert repo.get_by_id(new_id) == task.with_id(new_id)


def test_insert_keeps_absent_deadline_absent(repo: TaskRepository, make_task) -> None:
    new_id = repo.insert(make_task(deadline=None, category=None, description=None))
    stored = repo.get_by_id(new_id)
    assert stored.deadline is None
    assert stored.category is None
    assert stored.description is None


def test_insert_assigns_created_at_when_unset(repo: TaskRepository) -> None:
    before = datetime.now().replace(microsecond=0)
    new_id = repo.insert(Task(name="Feed cat"))
    after = datetime.now()

    created_at = repo.get_by_id(new_id).created_at
    assert before <= created_at <= after


@pytest.mark.parametrize("name", ["", "   ", None])
def test_insert_rejects_blank_name(repo: TaskRepository, name) -> None:
    with pytest.raises(TaskValidationError):
        repo.insert(Task(name=name))
    assert repo.count() == 0


def test_insert_rejects_persisted_task(repo: TaskRepository, make_task) -> None:
    with pytest.raises(TaskValidationError):
        repo.insert(make_task(id=5))


def test_ids_are_unique_and_increasing(repo: TaskRepository) -> None:
    ids = [repo.insert(Task(name=f"Chore {i}")) for i in range(3)]
    assert ids == sorted(set(ids))
    assert all(i > 0 for i in ids)


def test_update_rewrites_mutable_fields_only(repo: TaskRepository, make_task) -> None:
    original = make_task()
    saved = original.with_id(repo.insert(original))

    changed = replace(
        saved,
        name="Buy oat milk",
        category="Shopping",
        description=None,
        completed=True,
        deadline=None,
        created_at=datetime(2000, 1, 1),
    )
    assert repo.update(changed) is Outcome.SUCCESS

    stored = repo.get_by_id(saved.id)
    assert stored == replace(changed, created_at=original.created_at)


def test_update_missing_task_reports_not_found(repo: TaskRepository, make_task) -> None:
    assert repo.update(make_task(id=999)) is Outcome.NOT_FOUND
    assert repo.count() == 0


@pytest.mark.parametrize("bad_id", [None, 0, -3])
def test_update_rejects_non_positive_id(repo: TaskRepository, make_task, bad_id) -> None:
    with pytest.raises(TaskValidationError):
        repo.update(make_task(id=bad_id))


def test_update_rejects_blank_name(repo: TaskRepository, make_task) -> None:
    new_id = repo.insert(make_task())
    with pytest.raises(TaskValidationError):
        repo.update(make_task(id=new_id, name=" "))
    assert repo.get_by_id(new_id).name == "Buy milk"


def test_delete_removes_task(repo: TaskRepository, make_task) -> None:
    keep = repo.insert(make_task(name="Keep"))
    gone = repo.insert(make_task(name="Gone"))

    assert repo.delete(gone) is Outcome.SUCCESS
    assert repo.get_by_id(gone) is None
    assert repo.get_by_id(keep) is not None
    assert repo.count() == 1


def test_delete_missing_task_reports_not_found(repo: TaskRepository, make_task) -> None:
    repo.insert(make_task())
    assert repo.delete(12345) is Outcome.NOT_FOUND
    assert repo.count() == 1


@pytest.mark.parametrize("bad_id", [0, -1])
def test_delete_rejects_non_positive_id(repo: TaskRepository, bad_id) -> None:
    with pytest.raises(TaskValidationError):
        repo.delete(bad_id)


def test_get_by_id_absent_and_invalid(repo: TaskRepository) -> None:
    assert repo.get_by_id(1) is None
    assert repo.get_by_id(0) is None
    assert repo.get_by_id(-4) is None


def test_get_all_is_newest_first(repo: TaskRepository, make_task) -> None:
    repo.insert(make_task(name="Oldest", created_at=datetime(2026, 1, 1, 8, 0)))
    repo.insert(make_task(name="Newest", created_at=datetime(2026, 3, 1, 8, 0)))
    repo.insert(make_task(name="Middle", created_at=datetime(2026, 2, 1, 8, 0)))

    assert [t.name for t in repo.get_all()] == ["Newest", "Middle", "Oldest"]


def test_get_all_skips_invalid_rows(repo: TaskRepository, database: Database, make_task) -> None:
    repo.insert(make_task(name="Real"))
    millis = to_epoch_millis(datetime(2026, 1, 1))
    insert_raw(database, "INSERT INTO tasks (id, task_name, created_at) VALUES (-5, 'Negative', ?)", (millis,))
    insert_raw(database, "INSERT INTO tasks (id, task_name, created_at) VALUES (0, 'Zero', ?)", (millis,))
    insert_raw(database, "INSERT INTO tasks (task_name, created_at) VALUES ('', ?)", (millis,))
    insert_raw(database, "INSERT INTO tasks (task_name, created_at) VALUES ('   ', ?)", (millis,))

    tasks = repo.get_all()
    assert [t.name for t in tasks] == ["Real"]
    assert all(t.is_valid for t in tasks)
    assert repo.search("") == tasks
    assert repo.get_by_id(0) is None


def test_purge_invalid_removes_bad_rows(repo: TaskRepository, database: Database) -> None:
    repo.insert(Task(name="Real"))
    insert_raw(database, "INSERT INTO tasks (id, task_name) VALUES (-5, 'Negative')")
    insert_raw(database, "INSERT INTO tasks (task_name) VALUES ('')")

    assert repo.purge_invalid() == 2
    assert repo.purge_invalid() == 0
    with database.cursor() as cursor:
        cursor.execute("SELECT COUNT(*) FROM tasks")
        assert cursor.fetchone()[0] == 1


def test_opening_repository_purges_invalid_rows(database: Database) -> None:
    TaskRepository(database)
    insert_raw(database, "INSERT INTO tasks (id, task_name) VALUES (0, 'Zero')")

    TaskRepository(database)

    with database.cursor() as cursor:
        cursor.execute("SELECT COUNT(*) FROM tasks")
        assert cursor.fetchone()[0] == 0


def test_search_matches_name_or_description_case_insensitively(repo: TaskRepository) -> None:
    in_name = repo.insert(Task(name="Buy ABC batteries", created_at=datetime(2026, 10, 1, 8, 0)))
    in_description = repo.insert(
        Task(
            name="Shopping",
            description="remember the xabcx brand",
            created_at=datetime(2026, 10, 2, 8, 0),
        )
    )
    repo.insert(Task(name="Walk dog", description="around the block"))
    repo.insert(Task(name="Ab c", description="a b c"))

    assert [t.id for t in repo.search("abc")] == [in_description, in_name]
    assert [t.id for t in repo.search("ABC")] == [in_description, in_name]


def test_search_orders_results_like_get_all(repo: TaskRepository) -> None:
    older = repo.insert(Task(name="Dust shelves", created_at=datetime(2026, 9, 1, 9, 0)))
    newer = repo.insert(Task(name="Dust lamps", created_at=datetime(2026, 10, 1, 9, 0)))
    oldest = repo.insert(Task(name="Dust blinds", created_at=datetime(2026, 8, 1, 9, 0)))

    expected = [newer, older, oldest]
    assert [t.id for t in repo.get_all()] == expected
    assert [t.id for t in repo.search("dust")] == expected
    assert [t.id for t in repo.search("")] == expected


def test_rows_with_unreadable_timestamps_are_skipped(
    repo: TaskRepository, database: Database
) -> None:
    kept = repo.insert(Task(name="Readable"))
    insert_raw(
        database,
        "INSERT INTO tasks (task_name, created_at) VALUES ('Garbled', 'next tuesday')",
    )

    assert [t.id for t in repo.get_all()] == [kept]
    assert [t.name for t in repo.search("e")] == ["Readable"]
    assert repo.get_by_id(kept + 1) is None
    assert repo.count() == 2


def test_search_uses_unicode_case_folding(repo: TaskRepository) -> None:
    street = repo.insert(Task(name="Sweep Hauptstraße"))
    assert [t.id for t in repo.search("STRASSE")] == [street]


def test_search_treats_wildcards_literally(repo: TaskRepository) -> None:
    repo.insert(Task(name="Clean oven"))
    percent = repo.insert(Task(name="Use 50% less soap"))
    assert [t.id for t in repo.search("%")] == [percent]
    assert repo.search("_") == []


def test_mark_completed_and_incomplete(repo: TaskRepository) -> None:
    task_id = repo.insert(Task(name="Hoover"))

    assert repo.mark_completed(task_id) is Outcome.SUCCESS
    assert repo.get_by_id(task_id).completed is True
    assert repo.mark_incomplete(task_id) is Outcome.SUCCESS
    assert repo.get_by_id(task_id).completed is False


def test_mark_missing_task_reports_not_found(repo: TaskRepository) -> None:
    assert repo.mark_completed(42) is Outcome.NOT_FOUND
    assert repo.mark_incomplete(42) is Outcome.NOT_FOUND
    with pytest.raises(TaskValidationError):
        repo.mark_completed(0)


def test_buy_milk_lifecycle(repo: TaskRepository) -> None:
    task = Task(name="Buy milk", category="Errands", completed=False, deadline=None)
    new_id = repo.insert(task)
    assert new_id == 1

    stored = repo.get_by_id(1)
    assert (stored.name, stored.category, stored.completed, stored.deadline) == (
        "Buy milk",
        "Errands",
        False,
        None,
    )

    repo.mark_completed(1)
    assert repo.get_by_id(1).completed is True

    assert repo.delete(1) is Outcome.SUCCESS
    assert repo.get_by_id(1) is None


def test_statement_failures_raise_storage_error(repo: TaskRepository) -> None:
    repo.schema.drop_table()
    with pytest.raises(StorageError):
        repo.get_all()
    with pytest.raises(StorageError):
        repo.insert(Task(name="Nowhere to go"))
