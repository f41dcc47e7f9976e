"""Shared fixtures for the gpkg-schema test suite.

Provides a recording store double (captures executed statements and
answers existence checks from a set), an in-memory SQLite store, and
helpers for building script providers.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from gpkg_schema.core.exceptions import StoreExecutionError
from gpkg_schema.helpers.script_resources import InMemoryScriptProvider
from gpkg_schema.helpers.sqlite_store import SqliteStore


class RecordingStore:
    """Store double recording every executed statement.

    Attributes:
        executed: Statements in execution order.
        existing_tables: Names reported by ``table_exists``.
        fail_on: Statements (exact text) that raise StoreExecutionError.
        exists_calls: Names passed to ``table_exists``.
    """

    def __init__(
        self,
        existing_tables: set[str] | None = None,
        fail_on: set[str] | None = None,
    ) -> None:
        self.executed: list[str] = []
        self.existing_tables = existing_tables or set()
        self.fail_on = fail_on or set()
        self.exists_calls: list[str] = []

    def execute(self, statement: str) -> None:
        if statement in self.fail_on:
            raise StoreExecutionError(statement)
        self.executed.append(statement)

    def table_exists(self, name: str) -> bool:
        self.exists_calls.append(name)
        return name in self.existing_tables


@pytest.fixture()
def recording_store() -> RecordingStore:
    """Fresh recording store with no tables."""
    return RecordingStore()


@pytest.fixture()
def sqlite_store() -> Iterator[SqliteStore]:
    """In-memory SQLite store, closed after the test."""
    store = SqliteStore.open(":memory:")
    try:
        yield store
    finally:
        store.close()


@pytest.fixture()
def store_factory() -> type[RecordingStore]:
    """The recording store class, for tests that configure tables or failures."""
    return RecordingStore


@pytest.fixture()
def make_provider() -> Callable[..., InMemoryScriptProvider]:
    """Build an in-memory provider from keyword scripts.

    Usage::

        provider = make_provider(contents="CREATE TABLE gpkg_contents (x);")
    """

    def _make(**scripts: str) -> InMemoryScriptProvider:
        return InMemoryScriptProvider(scripts)

    return _make
