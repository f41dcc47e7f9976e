"""Create GeoPackage system tables and user-defined tables.

System tables are created by running their canonical SQL scripts, resolved
by logical key through a script provider. User tables are created from a
:class:`~gpkg_schema.core.user_table.Table` definition.

The two paths differ on pre-existing tables: user table creation checks for
an existing table and raises :class:`DuplicateTableError`, while system table
scripts run unconditionally and fail at the store if the table exists.

Usage:
    >>> from gpkg_schema.helpers.script_resources import DirectoryScriptProvider
    >>> from gpkg_schema.helpers.sqlite_store import SqliteStore
    >>> creator = TableCreator(SqliteStore.open(":memory:"), DirectoryScriptProvider())
    >>> creator.create_required_tables() > 0
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gpkg_schema.core.ddl_builder import build_create_table_sql
from gpkg_schema.core.exceptions import DuplicateTableError, ResourceNotFoundError
from gpkg_schema.core.script_runner import run_script
from gpkg_schema.core.user_table import Table
from gpkg_schema.helpers.store_stub import ScriptResourceProvider, StoreExecutor

# ---------------------------------------------------------------------------
# Logical keys
# ---------------------------------------------------------------------------

SPATIAL_REFERENCE_SYSTEM = "spatial_reference_system"
CONTENTS = "contents"
GEOMETRY_COLUMNS = "geometry_columns"
TILE_MATRIX_SET = "tile_matrix_set"
TILE_MATRIX = "tile_matrix"
DATA_COLUMNS = "data_columns"
DATA_COLUMN_CONSTRAINTS = "data_column_constraints"
METADATA = "metadata"
METADATA_REFERENCE = "metadata_reference"
EXTENSIONS = "extensions"

# Dependency order: referenced tables come before tables with foreign keys
SYSTEM_TABLE_KEYS: tuple[str, ...] = (
    SPATIAL_REFERENCE_SYSTEM,
    CONTENTS,
    GEOMETRY_COLUMNS,
    TILE_MATRIX_SET,
    TILE_MATRIX,
    DATA_COLUMNS,
    DATA_COLUMN_CONSTRAINTS,
    METADATA,
    METADATA_REFERENCE,
    EXTENSIONS,
)

# Tables every GeoPackage must contain
REQUIRED_TABLE_KEYS: tuple[str, ...] = (SPATIAL_REFERENCE_SYSTEM, CONTENTS)


@dataclass
class BootstrapResult:
    """Statements executed per system table key, in execution order."""

    statements: dict[str, int] = field(default_factory=dict[str, int])

    @property
    def total(self) -> int:
        return sum(self.statements.values())


class TableCreator:
    """Creates GeoPackage tables against a store.

    Args:
        store: Store executor used for every statement and existence check.
        scripts: Provider resolving system table keys to SQL scripts.
    """

    def __init__(
        self,
        store: StoreExecutor,
        scripts: ScriptResourceProvider,
    ) -> None:
        self.store = store
        self.scripts = scripts

    # -- System tables -----------------------------------------------------

    def create_spatial_reference_system(self) -> int:
        """Create the Spatial Reference System table and views."""
        return self._run_table_script(SPATIAL_REFERENCE_SYSTEM)

    def create_contents(self) -> int:
        return self._run_table_script(CONTENTS)

    def create_geometry_columns(self) -> int:
        return self._run_table_script(GEOMETRY_COLUMNS)

    def create_tile_matrix_set(self) -> int:
        return self._run_table_script(TILE_MATRIX_SET)

    def create_tile_matrix(self) -> int:
        return self._run_table_script(TILE_MATRIX)

    def create_data_columns(self) -> int:
        return self._run_table_script(DATA_COLUMNS)

    def create_data_column_constraints(self) -> int:
        return self._run_table_script(DATA_COLUMN_CONSTRAINTS)

    def create_metadata(self) -> int:
        return self._run_table_script(METADATA)

    def create_metadata_reference(self) -> int:
        return self._run_table_script(METADATA_REFERENCE)

    def create_extensions(self) -> int:
        return self._run_table_script(EXTENSIONS)

    def create_system_table(self, key: str) -> int:
        """Create one system table by logical key.

        Raises:
            ResourceNotFoundError: If *key* is not a system table key, has no
                script, or its script is not valid UTF-8.
            StoreExecutionError: If a script statement fails.
        """
        if key not in SYSTEM_TABLE_KEYS:
            raise ResourceNotFoundError(key, "not a GeoPackage system table")
        return self._run_table_script(key)

    def create_required_tables(self) -> int:
        """Create the tables every GeoPackage must contain.

        Returns:
            Total statements executed.
        """
        return self.create_system_tables(REQUIRED_TABLE_KEYS).total

    def create_system_tables(
        self,
        keys: tuple[str, ...] | list[str] | None = None,
    ) -> BootstrapResult:
        """Create several system tables, stopping at the first failure.

        Args:
            keys: Logical keys to create (default: all, in dependency order).
        """
        result = BootstrapResult()
        for key in keys if keys is not None else SYSTEM_TABLE_KEYS:
            result.statements[key] = self.create_system_table(key)
        return result

    def _run_table_script(self, key: str) -> int:
        # No existence check; a re-run fails at the store
        stream = self.scripts.resolve(key)
        try:
            return run_script(self.store, stream)
        except UnicodeDecodeError as e:
            raise ResourceNotFoundError(key, "script is not valid UTF-8") from e

    # -- User tables -------------------------------------------------------

    def create_table(self, table: Table) -> None:
        """Create a user-defined table.

        Raises:
            DuplicateTableError: If a table with the same name exists. The
                store is not modified in that case.
            StoreExecutionError: If the store rejects the statement.
        """
        if self.store.table_exists(table.name):
            raise DuplicateTableError(table.name)

        self.store.execute(build_create_table_sql(table))
