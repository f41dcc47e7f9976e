"""In-memory description of a user-defined GeoPackage table.

Tables, columns and unique constraints are immutable values built by the
caller before asking the table creator to create the table.

Example:
    >>> id_col = Column("id", "INTEGER", primary_key=True)
    >>> code = Column("code", "TEXT", max=255, not_null=True)
    >>> table = Table("observations", (id_col, code), (UniqueConstraint((code,)),))
    >>> table.column_names
    ['id', 'code']
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Column:
    """A table column.

    Subclasses may carry additional per-column metadata; DDL synthesis only
    reads the fields declared here.

    Attributes:
        name: Column name, unique within its table.
        type_name: Declared SQL type name (e.g. 'INTEGER', 'TEXT').
        max: Optional maximum length, rendered as ``TYPE(max)``.
        not_null: Whether the column is NOT NULL.
        primary_key: Whether the column is the autoincrement primary key.
    """

    name: str
    type_name: str
    max: int | None = None
    not_null: bool = False
    primary_key: bool = False


@dataclass(frozen=True)
class UniqueConstraint:
    """Uniqueness over an ordered tuple of columns of one table."""

    columns: tuple[Column, ...]

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


@dataclass(frozen=True)
class Table:
    """A user table definition.

    Attributes:
        name: Table name.
        columns: Columns in declared (rendered) order.
        unique_constraints: Unique constraints in declared order.
    """

    name: str
    columns: tuple[Column, ...]
    unique_constraints: tuple[UniqueConstraint, ...] = field(default=())

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> Column | None:
        """Return the column with *name*, or None."""
        for column in self.columns:
            if column.name == name:
                return column
        return None
