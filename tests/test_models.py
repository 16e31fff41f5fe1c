# tests/test_models.py

from __future__ import annotations

import dataclasses

import pytest

from home_chores.errors import TaskValidationError
from home_chores.models import Outcome, Task
from home_chores.timeutils import from_epoch_millis


def test_new_task_is_not_persisted() -> None:
    task = Task(name="Water plants")
    assert task.id is None
    assert not task.is_persisted
    assert not task.is_valid
    assert task.completed is False
    assert task.created_at is None
    assert task.deadline is None


def test_with_id_returns_persisted_copy() -> None:
    task = Task(name="Water plants")
    saved = task.with_id(7)
    assert saved.id == 7
    assert saved.is_persisted
    assert saved.is_valid
    assert task.id is None


@pytest.mark.parametrize("bad_id", [0, -1, None, True])
def test_with_id_rejects_non_positive_ids(bad_id) -> None:
    with pytest.raises(TaskValidationError):
        Task(name="x").with_id(bad_id)


def test_blank_name_is_not_valid() -> None:
    assert not Task(name="   ", id=3).is_valid


def test_tasks_are_immutable() -> None:
    task = Task(name="Water plants")
    with pytest.raises(dataclasses.FrozenInstanceError):
        task.name = "Other"  # type: ignore[misc]


def test_from_row_maps_columns() -> None:
    row = {
        "id": 4,
        "task_name": "Mop floor",
        "category": "Kitchen",
        "description": None,
        "completed": 1,
        "created_at": 1_700_000_000_000,
        "deadline": None,
    }
    task = Task.from_row(row)
    assert task == Task(
        id=4,
        name="Mop floor",
        category="Kitchen",
        description=None,
        completed=True,
        created_at=from_epoch_millis(1_700_000_000_000),
        deadline=None,
    )


def test_outcome_truthiness() -> None:
    assert Outcome.SUCCESS
    assert not Outcome.NOT_FOUND
