"""
GeoPackage Schema

A library for provisioning the relational schema of GeoPackage files:
GeoPackage system tables from canonical SQL scripts, and user-defined
tables from table definitions.
"""

__version__ = "0.1.0"

from gpkg_schema.core.table_creator import TableCreator
from gpkg_schema.core.user_table import Column, Table, UniqueConstraint

__all__ = [
    "Column",
    "Table",
    "TableCreator",
    "UniqueConstraint",
]
