# tests/test_database.py

from __future__ import annotations

from pathlib import Path

import pytest

from home_chores.database import Database
from home_chores.errors import StorageError


def test_connection_commits_on_success(db_path: Path) -> None:
    with Database(db_path) as db:
        with db.cursor() as cursor:
            cursor.execute("CREATE TABLE t (v TEXT)")
            cursor.execute("INSERT INTO t VALUES ('a')")

    with Database(db_path) as db:
        with db.cursor() as cursor:
            cursor.execute("SELECT v FROM t")
            assert [row["v"] for row in cursor.fetchall()] == ["a"]


def test_connection_rolls_back_on_error(database: Database) -> None:
    with database.cursor() as cursor:
        cursor.execute("CREATE TABLE t (v TEXT)")

    with pytest.raises(RuntimeError):
        with database.cursor() as cursor:
            cursor.execute("INSERT INTO t VALUES ('a')")
            raise RuntimeError("boom")

    with database.cursor() as cursor:
        cursor.execute("SELECT COUNT(*) FROM t")
        assert cursor.fetchone()[0] == 0


def test_casefold_function_is_registered(database: Database) -> None:
    with database.cursor() as cursor:
        cursor.execute("SELECT casefold('StraSSE'), casefold(NULL)")
        row = cursor.fetchone()
    assert row[0] == "strasse"
    assert row[1] is None


def test_close_is_idempotent(database: Database) -> None:
    assert database.verify_connection()
    assert database.is_open
    database.close()
    database.close()
    assert not database.is_open


def test_unopenable_path_raises_storage_error(tmp_path: Path) -> None:
    db = Database(tmp_path / "missing-dir" / "tasks.db")
    with pytest.raises(StorageError):
        with db.cursor() as cursor:
            cursor.execute("SELECT 1")
