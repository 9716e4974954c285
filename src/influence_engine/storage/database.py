from __future__ import annotations

import contextlib
import importlib
import pathlib
import sqlite3
import threading
from typing import Generator

from influence_engine.errors import PersistenceError


_MIGRATIONS = [
    "001_actions",
    "002_profiles",
    "003_influence",
    "004_experiments",
]


class Database:
    """SQLite manager shared by all repositories.

    One connection is shared across threads; every use goes through
    get_connection(), which holds the database lock for the duration of
    the transaction. Nested get_connection() blocks on the same thread
    join the outer transaction, which alone commits or rolls back.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._depth = 0
        pathlib.Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    def initialize(self) -> None:
        """Run migrations to create all tables, skipping already-applied ones."""
        with self._lock:
            conn = self._get_raw_connection()
            conn.execute(
                "CREATE TABLE IF NOT EXISTS schema_version "
                "(version INTEGER PRIMARY KEY)"
            )
            applied = {
                r[0] for r in conn.execute("SELECT version FROM schema_version").fetchall()
            }
            for i, name in enumerate(_MIGRATIONS, 1):
                if i not in applied:
                    mod = importlib.import_module(f"influence_engine.storage.migrations.{name}")
                    mod.upgrade(conn)
                    conn.execute("INSERT INTO schema_version VALUES (?)", (i,))
            conn.commit()

    def _get_raw_connection(self) -> sqlite3.Connection:
        """Return the shared connection, creating it if needed."""
        if self._connection is None:
            self._connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA journal_mode=WAL")
            self._connection.execute("PRAGMA foreign_keys=ON")
        return self._connection

    @contextlib.contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager that yields a database connection.

        The outermost block commits on success and rolls back on exception.
        sqlite3 errors are re-raised as PersistenceError.
        """
        with self._lock:
            try:
                conn = self._get_raw_connection()
            except sqlite3.Error as exc:
                raise PersistenceError(f"Cannot open {self.db_path}: {exc}") from exc
            self._depth += 1
            outermost = self._depth == 1
            try:
                yield conn
                if outermost:
                    conn.commit()
            except sqlite3.Error as exc:
                if outermost:
                    conn.rollback()
                raise PersistenceError(str(exc)) from exc
            except Exception:
                if outermost:
                    conn.rollback()
                raise
            finally:
                self._depth -= 1

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
