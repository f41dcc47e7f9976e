#!/usr/bin/env python3
"""gpkg-schema command-line interface.

Usage:
    gpkg-schema init example.gpkg
    gpkg-schema init example.gpkg --table spatial_reference_system --table contents
    gpkg-schema create-table example.gpkg observations.yaml
    gpkg-schema ddl observations.yaml
    gpkg-schema list-scripts --scripts-dir ./my-sql

The scripts directory can also be set with ``GPKG_SCHEMA_SCRIPTS_DIR``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from gpkg_schema.core.ddl_builder import build_create_table_sql
from gpkg_schema.core.exceptions import GeoPackageSchemaError
from gpkg_schema.core.table_creator import SYSTEM_TABLE_KEYS, TableCreator
from gpkg_schema.core.table_loader import load_table_definition
from gpkg_schema.helpers.helpers_logging import (
    print_dim,
    print_error,
    print_header,
    print_info,
    print_success,
)
from gpkg_schema.helpers.script_resources import DirectoryScriptProvider
from gpkg_schema.helpers.sqlite_store import SqliteStore

_EXIT_ERROR = 1
_EXIT_ABORTED = 130

_scripts_dir_option = click.option(
    "--scripts-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    envvar="GPKG_SCHEMA_SCRIPTS_DIR",
    default=None,
    help="Directory with scripts.yaml and SQL scripts (default: bundled scripts)",
)


@click.group()
def _click_cli() -> None:
    """Provision GeoPackage system and user tables."""


@_click_cli.command(name="init", help="Create GeoPackage system tables")
@click.argument("gpkg_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--table",
    "tables",
    multiple=True,
    type=click.Choice(SYSTEM_TABLE_KEYS),
    help="System table key to create (repeatable, default: all)",
)
@_scripts_dir_option
def init_cmd(
    gpkg_file: Path,
    tables: tuple[str, ...],
    scripts_dir: Path | None,
) -> int:
    keys = tables or SYSTEM_TABLE_KEYS
    print_header(f"Creating {len(keys)} system tables in {gpkg_file}")

    with SqliteStore.open(gpkg_file) as store:
        creator = TableCreator(store, DirectoryScriptProvider(scripts_dir))
        result = creator.create_system_tables(keys)

    for key, count in result.statements.items():
        print_info(f"  {key}: {count} statements")
    print_success(f"Executed {result.total} statements")
    return 0


@_click_cli.command(name="create-table", help="Create a user table from a YAML definition")
@click.argument("gpkg_file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("definition", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def create_table_cmd(gpkg_file: Path, definition: Path) -> int:
    table = load_table_definition(definition)

    with SqliteStore.open(gpkg_file) as store:
        TableCreator(store, DirectoryScriptProvider()).create_table(table)

    print_success(f"Created table {table.name} ({len(table.columns)} columns)")
    return 0


@_click_cli.command(name="ddl", help="Print the CREATE TABLE statement for a definition")
@click.argument("definition", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def ddl_cmd(definition: Path) -> int:
    click.echo(build_create_table_sql(load_table_definition(definition)))
    return 0


@_click_cli.command(name="list-scripts", help="List system table keys and their scripts")
@_scripts_dir_option
def list_scripts_cmd(scripts_dir: Path | None) -> int:
    provider = DirectoryScriptProvider(scripts_dir)
    print_header(f"Scripts in {provider.directory}")
    for key in provider.keys:
        print_info(f"  {key}")
        print_dim(f"    {provider.script_path(key).name}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = sys.argv[1:] if argv is None else argv

    try:
        result = _click_cli.main(
            args=args,
            prog_name="gpkg-schema",
            standalone_mode=False,
        )
    except click.Abort:
        print("\n⚠️  Cancelled by user")
        return _EXIT_ABORTED
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except GeoPackageSchemaError as exc:
        exc.print_error()
        return _EXIT_ERROR
    except (FileNotFoundError, ValueError) as exc:
        print_error(str(exc))
        return _EXIT_ERROR

    return 0 if result is None else int(result)


if __name__ == "__main__":
    sys.exit(main())
