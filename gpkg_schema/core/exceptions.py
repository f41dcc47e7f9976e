"""Error types raised while provisioning GeoPackage tables.

All errors derive from :class:`GeoPackageSchemaError` so the CLI can report
them uniformly. None are retried or swallowed by the library.
"""

from __future__ import annotations

from gpkg_schema.helpers.helpers_logging import print_error


class GeoPackageSchemaError(Exception):
    """Base error for table provisioning failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def print_error(self) -> None:
        """Print the error message using the logging helper."""
        print_error(self.message)


class ResourceNotFoundError(GeoPackageSchemaError):
    """A logical table key has no resolvable SQL script."""

    def __init__(self, key: str, detail: str | None = None) -> None:
        msg = f"No SQL script found for table key '{key}'"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
        self.key = key


class StoreExecutionError(GeoPackageSchemaError):
    """A statement failed to execute against the store."""

    def __init__(self, statement: str, cause: BaseException | None = None) -> None:
        first_line = statement.strip().splitlines()[0] if statement.strip() else ""
        msg = f"Failed to execute statement: {first_line}"
        if cause is not None:
            msg = f"{msg} ({cause})"
        super().__init__(msg)
        self.statement = statement
        self.cause = cause


class DuplicateTableError(GeoPackageSchemaError):
    """User table creation requested for a name that already exists."""

    def __init__(self, table_name: str) -> None:
        super().__init__(
            f"Table already exists and can not be created: {table_name}",
        )
        self.table_name = table_name


class MalformedTableDefinitionError(GeoPackageSchemaError):
    """A table definition is structurally invalid."""
