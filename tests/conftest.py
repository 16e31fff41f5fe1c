# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from home_chores.database import Database
from home_chores.models import Task
from home_chores.repository import TaskRepository
from home_chores.service import TaskService


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "tasks.db"


@pytest.fixture()
def database(db_path: Path):
    db = Database(db_path)
    yield db
    db.close()


@pytest.fixture()
def repo(database: Database) -> TaskRepository:
    return TaskRepository(database)


@pytest.fixture()
def service(db_path: Path):
    svc = TaskService.open(db_path)
    yield svc
    svc.close()


@pytest.fixture()
def make_task():
    """Factory for unsaved tasks with second-precision timestamps."""

    def _make(name: str = "Buy milk", **overrides) -> Task:
        fields = {
            "name": name,
            "category": "Errands",
            "description": "Semi-skimmed, two pints",
            "completed": False,
            "created_at": datetime(2026, 10, 1, 9, 30, 0),
            "deadline": datetime(2026, 10, 3, 18, 0, 0),
        }
        fields.update(overrides)
        return Task(**fields)

    return _make


def insert_raw(database: Database, sql: str, params: tuple = ()) -> None:
    """Write directly to the table, bypassing repository validation."""
    with database.cursor() as cursor:
        cursor.execute(sql, params)
