"""Protocols for the collaborators the table creator depends on.

Provides only the interface we actually use in this project, so a SQLite
connection, a test double or any other store can be injected.
"""

from __future__ import annotations

from typing import BinaryIO, Protocol


class StoreExecutor(Protocol):
    """Executes single statements against a GeoPackage store."""

    def execute(self, statement: str) -> None:
        """Execute one statement.

        Raises:
            StoreExecutionError: If the store rejects the statement.
        """
        ...

    def table_exists(self, name: str) -> bool:
        """Return True if a table with this name exists."""
        ...


class ScriptResourceProvider(Protocol):
    """Maps a logical table key to a stream of SQL statements."""

    def resolve(self, key: str) -> BinaryIO:
        """Open the script for *key*.

        Raises:
            ResourceNotFoundError: If no script is registered for the key.
        """
        ...
