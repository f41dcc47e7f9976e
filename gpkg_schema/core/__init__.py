"""Core table provisioning logic."""

from gpkg_schema.core.ddl_builder import build_create_table_sql
from gpkg_schema.core.script_runner import run_script, split_statements
from gpkg_schema.core.table_creator import (
    SYSTEM_TABLE_KEYS,
    BootstrapResult,
    TableCreator,
)

__all__ = [
    "SYSTEM_TABLE_KEYS",
    "BootstrapResult",
    "TableCreator",
    "build_create_table_sql",
    "run_script",
    "split_statements",
]
