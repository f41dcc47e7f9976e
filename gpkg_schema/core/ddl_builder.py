"""Build CREATE TABLE statements for user-defined tables.

Rendering is deterministic: columns and unique constraints appear exactly in
declared order, nothing is reordered or deduplicated, and no validation is
performed (see :func:`gpkg_schema.core.table_loader.validate_table`).

Example:
    >>> from gpkg_schema.core.user_table import Column, Table, UniqueConstraint
    >>> code = Column("code", "TEXT", max=255, not_null=True)
    >>> table = Table(
    ...     "observations",
    ...     (Column("id", "INTEGER", primary_key=True), code),
    ...     (UniqueConstraint((code,)),),
    ... )
    >>> print(build_create_table_sql(table))
    CREATE TABLE observations (
      id INTEGER PRIMARY KEY AUTOINCREMENT,
      code TEXT(255) NOT NULL,
      UNIQUE (code)
    );
"""

from __future__ import annotations

from gpkg_schema.core.user_table import Column, Table, UniqueConstraint

_INDENT = "  "


def build_column_definition(column: Column) -> str:
    """Render a single column clause.

    Primary key columns always get AUTOINCREMENT, which SQLite only accepts
    on INTEGER columns.
    """
    parts = [f"{column.name} {column.type_name}"]
    if column.max is not None:
        parts.append(f"({column.max})")
    if column.not_null:
        parts.append(" NOT NULL")
    if column.primary_key:
        parts.append(" PRIMARY KEY AUTOINCREMENT")
    return "".join(parts)


def build_unique_constraint(constraint: UniqueConstraint) -> str:
    """Render a ``UNIQUE (a, b)`` clause."""
    return f"UNIQUE ({', '.join(constraint.column_names)})"


def build_create_table_sql(table: Table) -> str:
    """Render the CREATE TABLE statement for *table*.

    Args:
        table: Table definition.

    Returns:
        A single statement, ready to execute.
    """
    clauses = [build_column_definition(column) for column in table.columns]
    clauses.extend(
        build_unique_constraint(constraint)
        for constraint in table.unique_constraints
    )

    body = ",\n".join(f"{_INDENT}{clause}" for clause in clauses)
    return f"CREATE TABLE {table.name} (\n{body}\n);"
