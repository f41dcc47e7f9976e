"""Tests for the table_creator module.

Covers:
- System table methods resolve their logical key and return statement counts
- ResourceNotFoundError for unresolvable keys and non-UTF-8 scripts
- create_system_table / create_system_tables / create_required_tables
- Full bootstrap against SQLite with the bundled scripts
- Bootstrap performs no existence check (re-run fails at the store)
- create_table(): existence check, DuplicateTableError, single execute
- create_table(): existing table matched regardless of name case
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from gpkg_schema.core.ddl_builder import build_create_table_sql
from gpkg_schema.core.exceptions import (
    DuplicateTableError,
    ResourceNotFoundError,
    StoreExecutionError,
)
from gpkg_schema.core.table_creator import (
    REQUIRED_TABLE_KEYS,
    SYSTEM_TABLE_KEYS,
    BootstrapResult,
    TableCreator,
)
from gpkg_schema.core.user_table import Column, Table, UniqueConstraint
from gpkg_schema.helpers.script_resources import (
    DirectoryScriptProvider,
    InMemoryScriptProvider,
)

# Statement counts of the bundled scripts
_BUNDLED_COUNTS = {
    "spatial_reference_system": 3,
    "contents": 1,
    "geometry_columns": 1,
    "tile_matrix_set": 1,
    "tile_matrix": 11,
    "data_columns": 1,
    "data_column_constraints": 1,
    "metadata": 3,
    "metadata_reference": 5,
    "extensions": 1,
}

_METHODS_BY_KEY = {
    "spatial_reference_system": "create_spatial_reference_system",
    "contents": "create_contents",
    "geometry_columns": "create_geometry_columns",
    "tile_matrix_set": "create_tile_matrix_set",
    "tile_matrix": "create_tile_matrix",
    "data_columns": "create_data_columns",
    "data_column_constraints": "create_data_column_constraints",
    "metadata": "create_metadata",
    "metadata_reference": "create_metadata_reference",
    "extensions": "create_extensions",
}


def _observations() -> Table:
    code = Column("code", "TEXT", max=255, not_null=True)
    return Table(
        "observations",
        (Column("id", "INTEGER", primary_key=True), code),
        (UniqueConstraint((code,)),),
    )


# ---------------------------------------------------------------------------
# System tables with in-memory scripts
# ---------------------------------------------------------------------------


class TestSystemTableMethods:
    """Each bootstrap method runs the script registered under its key."""

    @pytest.mark.parametrize(("key", "method"), sorted(_METHODS_BY_KEY.items()))
    def test_method_resolves_its_key(
        self,
        key: str,
        method: str,
        recording_store: Any,
        make_provider: Any,
    ) -> None:
        provider = make_provider(**{key: f"CREATE TABLE {key}_a (x);\n\nCREATE TABLE {key}_b (x);"})
        creator = TableCreator(recording_store, provider)

        count = getattr(creator, method)()

        assert count == 2
        assert recording_store.executed == [
            f"CREATE TABLE {key}_a (x);",
            f"CREATE TABLE {key}_b (x);",
        ]

    def test_methods_cover_every_system_key(self) -> None:
        assert set(_METHODS_BY_KEY) == set(SYSTEM_TABLE_KEYS)

    def test_missing_script_raises(self, recording_store: Any, make_provider: Any) -> None:
        creator = TableCreator(recording_store, make_provider())
        with pytest.raises(ResourceNotFoundError) as exc_info:
            creator.create_contents()
        assert exc_info.value.key == "contents"
        assert recording_store.executed == []

    def test_empty_script_returns_zero(self, recording_store: Any, make_provider: Any) -> None:
        creator = TableCreator(recording_store, make_provider(extensions="\n\n"))
        assert creator.create_extensions() == 0
        assert recording_store.executed == []

    def test_no_existence_check(self, store_factory: Any, make_provider: Any) -> None:
        """Bootstrap never asks the store whether the table exists."""
        store = store_factory(existing_tables={"gpkg_contents"})
        creator = TableCreator(store, make_provider(contents="CREATE TABLE gpkg_contents (x);"))

        assert creator.create_contents() == 1
        assert store.exists_calls == []

    def test_script_stream_is_closed(self, recording_store: Any) -> None:
        stream = MagicMock()
        stream.__enter__.return_value = stream
        stream.read.return_value = b"SELECT 1;"
        provider = MagicMock()
        provider.resolve.return_value = stream

        TableCreator(recording_store, provider).create_metadata()

        provider.resolve.assert_called_once_with("metadata")
        stream.__exit__.assert_called_once()

    def test_non_utf8_script_raises(self, recording_store: Any) -> None:
        provider = InMemoryScriptProvider({"contents": b"CREATE TABLE \xff\xfe (x);"})
        creator = TableCreator(recording_store, provider)

        with pytest.raises(ResourceNotFoundError, match="not valid UTF-8") as exc_info:
            creator.create_contents()

        assert exc_info.value.key == "contents"
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
        assert recording_store.executed == []


class TestCreateSystemTables:
    """Test the generic and batch bootstrap operations."""

    def test_unknown_key_rejected(self, recording_store: Any, make_provider: Any) -> None:
        creator = TableCreator(recording_store, make_provider(features="SELECT 1;"))
        with pytest.raises(ResourceNotFoundError):
            creator.create_system_table("features")
        assert recording_store.executed == []

    def test_batch_counts_per_key(self, recording_store: Any, make_provider: Any) -> None:
        provider = make_provider(
            spatial_reference_system="SELECT 1;\n\nSELECT 2;",
            contents="SELECT 3;",
        )
        result = TableCreator(recording_store, provider).create_system_tables(
            ["spatial_reference_system", "contents"],
        )
        assert isinstance(result, BootstrapResult)
        assert result.statements == {"spatial_reference_system": 2, "contents": 1}
        assert result.total == 3

    def test_batch_stops_at_first_failure(self, store_factory: Any, make_provider: Any) -> None:
        store = store_factory(fail_on={"SELECT 2;"})
        provider = make_provider(
            spatial_reference_system="SELECT 1;",
            contents="SELECT 2;",
            geometry_columns="SELECT 3;",
        )
        with pytest.raises(StoreExecutionError):
            TableCreator(store, provider).create_system_tables(
                ["spatial_reference_system", "contents", "geometry_columns"],
            )
        assert store.executed == ["SELECT 1;"]

    def test_required_tables(self, recording_store: Any, make_provider: Any) -> None:
        provider = make_provider(
            spatial_reference_system="SELECT 1;\n\nSELECT 2;",
            contents="SELECT 3;",
        )
        assert TableCreator(recording_store, provider).create_required_tables() == 3
        assert REQUIRED_TABLE_KEYS == ("spatial_reference_system", "contents")


# ---------------------------------------------------------------------------
# Bundled scripts against SQLite
# ---------------------------------------------------------------------------


class TestBundledBootstrap:
    """Run the bundled GeoPackage scripts against an in-memory database."""

    def test_spatial_reference_system_fresh_store(self, sqlite_store: Any) -> None:
        creator = TableCreator(sqlite_store, DirectoryScriptProvider())
        assert creator.create_spatial_reference_system() == 3
        assert sqlite_store.table_exists("gpkg_spatial_ref_sys")

    def test_rerun_fails_at_store_not_duplicate(self, sqlite_store: Any) -> None:
        """Bootstrap has no existence check, unlike create_table.

        A second run reaches the store and fails on its first statement
        with StoreExecutionError rather than DuplicateTableError.
        """
        creator = TableCreator(sqlite_store, DirectoryScriptProvider())
        creator.create_spatial_reference_system()

        with pytest.raises(StoreExecutionError) as exc_info:
            creator.create_spatial_reference_system()

        assert not isinstance(exc_info.value, DuplicateTableError)
        assert exc_info.value.statement.startswith("CREATE TABLE gpkg_spatial_ref_sys")

    def test_all_system_tables(self, sqlite_store: Any) -> None:
        creator = TableCreator(sqlite_store, DirectoryScriptProvider())
        result = creator.create_system_tables()

        assert result.statements == _BUNDLED_COUNTS
        assert list(result.statements) == list(SYSTEM_TABLE_KEYS)
        for table in (
            "gpkg_spatial_ref_sys",
            "gpkg_contents",
            "gpkg_geometry_columns",
            "gpkg_tile_matrix_set",
            "gpkg_tile_matrix",
            "gpkg_data_columns",
            "gpkg_data_column_constraints",
            "gpkg_metadata",
            "gpkg_metadata_reference",
            "gpkg_extensions",
        ):
            assert sqlite_store.table_exists(table), table

    def test_tile_matrix_triggers_enforced(self, sqlite_store: Any) -> None:
        creator = TableCreator(sqlite_store, DirectoryScriptProvider())
        creator.create_system_tables()

        with pytest.raises(StoreExecutionError):
            sqlite_store.execute(
                "INSERT INTO gpkg_tile_matrix VALUES ('tiles', -1, 1, 1, 256, 256, 1.0, 1.0)",
            )


# ---------------------------------------------------------------------------
# User tables
# ---------------------------------------------------------------------------


class TestCreateTable:
    """Test generic user table creation."""

    def test_creates_when_absent(self, recording_store: Any, make_provider: Any) -> None:
        table = _observations()
        TableCreator(recording_store, make_provider()).create_table(table)

        assert recording_store.exists_calls == ["observations"]
        assert recording_store.executed == [build_create_table_sql(table)]

    def test_duplicate_raises_without_mutation(
        self,
        store_factory: Any,
        make_provider: Any,
    ) -> None:
        store = store_factory(existing_tables={"observations"})
        with pytest.raises(DuplicateTableError) as exc_info:
            TableCreator(store, make_provider()).create_table(_observations())

        assert exc_info.value.table_name == "observations"
        assert store.executed == []

    def test_second_call_fails(self, sqlite_store: Any, make_provider: Any) -> None:
        creator = TableCreator(sqlite_store, make_provider())
        creator.create_table(_observations())

        mock_execute = MagicMock(wraps=sqlite_store.execute)
        sqlite_store.execute = mock_execute
        with pytest.raises(DuplicateTableError):
            creator.create_table(_observations())

        mock_execute.assert_not_called()
        assert sqlite_store.table_exists("observations")

    def test_store_error_propagates(self, sqlite_store: Any, make_provider: Any) -> None:
        """AUTOINCREMENT on a non-integer key is rejected by SQLite."""
        table = Table("bad", (Column("uid", "TEXT", primary_key=True),))
        with pytest.raises(StoreExecutionError):
            TableCreator(sqlite_store, make_provider()).create_table(table)
        assert not sqlite_store.table_exists("bad")

    def test_unique_constraint_enforced(self, sqlite_store: Any, make_provider: Any) -> None:
        TableCreator(sqlite_store, make_provider()).create_table(_observations())
        sqlite_store.execute("INSERT INTO observations (code) VALUES ('a')")

        with pytest.raises(StoreExecutionError):
            sqlite_store.execute("INSERT INTO observations (code) VALUES ('a')")

    def test_duplicate_ignores_name_case(self, sqlite_store: Any, make_provider: Any) -> None:
        """SQLite treats Observations and observations as the same table."""
        creator = TableCreator(sqlite_store, make_provider())
        creator.create_table(_observations())

        renamed = Table("Observations", (Column("id", "INTEGER", primary_key=True),))
        with pytest.raises(DuplicateTableError) as exc_info:
            creator.create_table(renamed)

        assert exc_info.value.table_name == "Observations"
