"""SQLite-backed store executor for GeoPackage files.

Usage:
    >>> from gpkg_schema.helpers.sqlite_store import SqliteStore
    >>> with SqliteStore.open("example.gpkg") as store:
    ...     store.execute("CREATE TABLE t (id INTEGER)")
    ...     store.table_exists("t")
    True
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from types import TracebackType

from gpkg_schema.core.exceptions import StoreExecutionError

_TABLE_EXISTS_SQL = (
    "SELECT COUNT(*) FROM sqlite_master "
    "WHERE type = 'table' AND tbl_name = ? COLLATE NOCASE"
)


class SqliteStore:
    """Executes statements on a ``sqlite3`` connection.

    Every statement is committed as soon as it succeeds; a failing statement
    is rolled back on its own and reported as :class:`StoreExecutionError`.
    Statements that already succeeded stay committed.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    @classmethod
    def open(cls, path: str | Path) -> SqliteStore:
        """Open (creating if needed) a GeoPackage file.

        Args:
            path: File path, or ``":memory:"`` for an in-memory database.
        """
        return cls(sqlite3.connect(str(path)))

    def execute(self, statement: str) -> None:
        try:
            self.connection.execute(statement)
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise StoreExecutionError(statement, e) from e

    def table_exists(self, name: str) -> bool:
        """Return True if a table named *name* exists, ignoring case."""
        try:
            cursor = self.connection.execute(_TABLE_EXISTS_SQL, (name,))
            try:
                row = cursor.fetchone()
            finally:
                cursor.close()
        except sqlite3.Error as e:
            raise StoreExecutionError(_TABLE_EXISTS_SQL, e) from e
        return bool(row and row[0] > 0)

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> SqliteStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
