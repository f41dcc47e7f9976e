"""Load user table definitions from YAML.

Definition file format:

    table: observations
    columns:
      - name: id
        type: INTEGER
        primary_key: true
      - name: code
        type: TEXT
        max: 255
        not_null: true
    unique:
      - [code]

Loaded definitions are validated with :func:`validate_table`. Tables built
directly in code are not validated unless the caller asks for it.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any, cast

from gpkg_schema.core.exceptions import MalformedTableDefinitionError
from gpkg_schema.core.user_table import Column, Table, UniqueConstraint
from gpkg_schema.helpers.yaml_loader import load_yaml_file, load_yaml_text


def validate_table(table: Table) -> None:
    """Check a table definition for structural errors.

    Raises:
        MalformedTableDefinitionError: If the table has no name or columns,
            has duplicate column names, a non-positive max, or a unique
            constraint that is empty or references a foreign column.
    """
    if not table.name:
        raise MalformedTableDefinitionError("Table name is required")

    if not table.columns:
        raise MalformedTableDefinitionError(
            f"Table '{table.name}' has no columns",
        )

    duplicates = sorted(
        name for name, n in Counter(table.column_names).items() if n > 1
    )
    if duplicates:
        raise MalformedTableDefinitionError(
            f"Table '{table.name}' has duplicate columns: {', '.join(duplicates)}",
        )

    for column in table.columns:
        if column.max is not None and column.max <= 0:
            raise MalformedTableDefinitionError(
                f"Column '{table.name}.{column.name}' max must be positive, "
                + f"got {column.max}",
            )

    for constraint in table.unique_constraints:
        if not constraint.columns:
            raise MalformedTableDefinitionError(
                f"Table '{table.name}' has an empty unique constraint",
            )
        for column in constraint.columns:
            if table.get_column(column.name) != column:
                raise MalformedTableDefinitionError(
                    f"Unique constraint on '{table.name}' references "
                    + f"unknown column '{column.name}'",
                )


def _flag_from_config(col: dict[str, Any], key: str, column_ref: str) -> bool:
    # YAML 1.2 loads unquoted no/off as strings, so only real booleans count
    value = col.get(key, False)
    if not isinstance(value, bool):
        raise MalformedTableDefinitionError(
            f"Column '{column_ref}' {key} must be true or false, got {value!r}",
        )
    return value


def _column_from_config(raw: object, table_name: str) -> Column:
    if not isinstance(raw, dict):
        raise MalformedTableDefinitionError(
            f"Column entries of '{table_name}' must be mappings",
        )
    col = cast(dict[str, Any], raw)

    name = col.get("name")
    type_name = col.get("type")
    if not name or not type_name:
        raise MalformedTableDefinitionError(
            f"Column of '{table_name}' requires 'name' and 'type'",
        )

    max_raw = col.get("max")
    if max_raw is not None and (isinstance(max_raw, bool) or not isinstance(max_raw, int)):
        raise MalformedTableDefinitionError(
            f"Column '{table_name}.{name}' max must be an integer",
        )

    return Column(
        name=str(name),
        type_name=str(type_name),
        max=max_raw,
        not_null=_flag_from_config(col, "not_null", f"{table_name}.{name}"),
        primary_key=_flag_from_config(col, "primary_key", f"{table_name}.{name}"),
    )


def _unique_from_config(
    raw: object,
    columns: tuple[Column, ...],
    table_name: str,
) -> UniqueConstraint:
    names = [raw] if isinstance(raw, str) else raw
    if not isinstance(names, list):
        raise MalformedTableDefinitionError(
            f"Unique constraints of '{table_name}' must be column lists",
        )

    by_name = {c.name: c for c in columns}
    resolved: list[Column] = []
    for col_name in cast(list[object], names):
        column = by_name.get(str(col_name))
        if column is None:
            raise MalformedTableDefinitionError(
                f"Unique constraint on '{table_name}' references "
                + f"unknown column '{col_name}'",
            )
        resolved.append(column)
    return UniqueConstraint(tuple(resolved))


def table_from_config(data: dict[str, Any]) -> Table:
    """Build and validate a :class:`Table` from a parsed definition.

    Raises:
        MalformedTableDefinitionError: If the definition is invalid.
    """
    table_name = str(data.get("table") or "")

    raw_columns = data.get("columns") or []
    if not isinstance(raw_columns, list):
        raise MalformedTableDefinitionError(
            f"'columns' of '{table_name}' must be a list",
        )
    columns = tuple(
        _column_from_config(raw, table_name)
        for raw in cast(list[object], raw_columns)
    )

    raw_unique = data.get("unique") or []
    if not isinstance(raw_unique, list):
        raise MalformedTableDefinitionError(
            f"'unique' of '{table_name}' must be a list",
        )
    unique = tuple(
        _unique_from_config(raw, columns, table_name)
        for raw in cast(list[object], raw_unique)
    )

    table = Table(table_name, columns, unique)
    validate_table(table)
    return table


def parse_table_definition(text: str) -> Table:
    """Build a table from YAML text."""
    data = load_yaml_text(text)
    if not isinstance(data, dict):
        raise MalformedTableDefinitionError(
            "Table definition must be a YAML mapping",
        )
    return table_from_config(cast(dict[str, Any], data))


def load_table_definition(path: Path) -> Table:
    """Build a table from a YAML definition file.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedTableDefinitionError: If the definition is invalid.
    """
    try:
        data = load_yaml_file(path)
    except ValueError as e:
        raise MalformedTableDefinitionError(str(e)) from e
    return table_from_config(cast(dict[str, Any], data))
