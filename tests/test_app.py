# tests/test_app.py

from __future__ import annotations

import asyncio
from pathlib import Path

from home_chores.app import HomeChoresApp
from home_chores.config import Config
from home_chores.models import Task
from home_chores.screens import ConfirmDialog, CreateDatabaseDialog
from home_chores.service import TaskService
from home_chores.widgets import TaskTable


def _config(db_path: Path, tmp_path: Path) -> Config:
    return Config(database_path=db_path, log_dir=tmp_path / "logs", export_dir=tmp_path)


def _seed(db_path: Path, *names: str) -> list[int]:
    svc = TaskService.open(db_path)
    try:
        return [svc.add(Task(name=name)) for name in names]
    finally:
        svc.close()


def _load(db_path: Path, task_id: int) -> Task | None:
    svc = TaskService.open(db_path)
    try:
        return svc.get_by_id(task_id)
    finally:
        svc.close()


def test_app_lists_and_toggles(db_path: Path, tmp_path: Path) -> None:
    ids = _seed(db_path, "Buy milk", "Mow lawn")

    async def scenario() -> None:
        app = HomeChoresApp(_config(db_path, tmp_path))
        async with app.run_test() as pilot:
            await pilot.pause()
            table = app.query_one(TaskTable)
            assert table.row_count == 2
            # Newest first, cursor on the first row
            assert table.selected_task.id == ids[1]
            assert [t.id for t in app.tasks] == [ids[1], ids[0]]

            table.focus()
            await pilot.press("space")
            await pilot.pause()
            assert app.service.get_by_id(ids[1]).completed is True

    asyncio.run(scenario())


def test_app_delete_with_confirmation(db_path: Path, tmp_path: Path) -> None:
    ids = _seed(db_path, "Buy milk", "Mow lawn")

    async def scenario() -> None:
        app = HomeChoresApp(_config(db_path, tmp_path))
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one(TaskTable).focus()
            await pilot.press("d")
            await pilot.pause()
            assert isinstance(app.screen, ConfirmDialog)

            await pilot.press("y")
            await pilot.pause()
            assert app.query_one(TaskTable).row_count == 1
            assert app.service.get_by_id(ids[1]) is None

    asyncio.run(scenario())
    assert _load(db_path, ids[0]) is not None


def test_app_search_filters_rows(db_path: Path, tmp_path: Path) -> None:
    _seed(db_path, "Buy milk", "Mow lawn", "Milk the goat")

    async def scenario() -> None:
        app = HomeChoresApp(_config(db_path, tmp_path))
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one(TaskTable).focus()
            await pilot.press("slash")
            await pilot.pause()
            assert app.search_mode
            await pilot.press("M", "I", "L", "K")
            await pilot.press("enter")
            await pilot.pause()
            assert not app.search_mode
            assert app.search_term == "MILK"
            assert sorted(t.name for t in app.tasks) == ["Buy milk", "Milk the goat"]

            await pilot.press("escape")
            await pilot.pause()
            assert app.search_term == ""
            assert app.query_one(TaskTable).row_count == 3

    asyncio.run(scenario())


def test_missing_database_prompts_for_creation(db_path: Path, tmp_path: Path) -> None:
    async def scenario() -> None:
        app = HomeChoresApp(_config(db_path, tmp_path))
        async with app.run_test() as pilot:
            await pilot.pause()
            assert isinstance(app.screen, CreateDatabaseDialog)
            await pilot.press("enter")
            await pilot.pause()
            assert app.service is not None
            assert app.query_one(TaskTable).row_count == 0

    asyncio.run(scenario())
    assert db_path.exists()


def test_declining_database_creation_exits(db_path: Path, tmp_path: Path) -> None:
    async def scenario() -> None:
        app = HomeChoresApp(_config(db_path, tmp_path))
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("escape")
            await pilot.pause()
        assert app.service is None

    asyncio.run(scenario())
    assert not db_path.exists()
