from __future__ import annotations

import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def sqlite_database(tmp_path: Path) -> Generator[Path, None, None]:
    """SQLite database file holding a small ``users`` table."""
    db_path = tmp_path / "database.sqlite3"
    connection = sqlite3.connect(db_path)
    try:
        connection.executescript(
            """
            create table users (id integer primary key, name text, data blob);
            insert into users (id, name) values (1, 'john');
            insert into users (id, name) values (2, 'jane');
            """
        )
        connection.commit()
    finally:
        connection.close()
    yield db_path


@pytest.fixture(autouse=True)
def clear_connection_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DBD_DRIVER", raising=False)
    monkeypatch.delenv("DBD_PARAMS", raising=False)
