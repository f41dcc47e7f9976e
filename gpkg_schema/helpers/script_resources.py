"""Script resource providers for GeoPackage system tables.

Each system table is created from a canonical SQL script. Providers map a
logical table key (e.g. ``spatial_reference_system``) to a binary stream of
that script.

Directory providers read a ``scripts.yaml`` manifest from the directory:

    scripts:
        spatial_reference_system: geopackage_spatial_reference_system.sql
        contents: geopackage_contents.sql
        ...

Example:
    >>> provider = DirectoryScriptProvider()
    >>> with provider.resolve("contents") as stream:
    ...     b"CREATE TABLE gpkg_contents" in stream.read()
    True
"""

from __future__ import annotations

import io
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO, cast

from gpkg_schema.core.exceptions import ResourceNotFoundError
from gpkg_schema.helpers.yaml_loader import load_yaml_file

# Bundled scripts directory within the package
BUNDLED_SCRIPTS_DIR = Path(__file__).parent.parent / "sql"

MANIFEST_FILE_NAME = "scripts.yaml"


class DirectoryScriptProvider:
    """Resolves scripts from a directory described by a manifest file.

    Attributes:
        directory: Directory holding ``scripts.yaml`` and the SQL files.
    """

    def __init__(self, directory: Path | None = None) -> None:
        """Load the script manifest.

        Args:
            directory: Scripts directory (defaults to the bundled scripts).

        Raises:
            FileNotFoundError: If the directory has no manifest.
            ValueError: If the manifest has no ``scripts`` mapping.
        """
        self.directory = directory if directory is not None else BUNDLED_SCRIPTS_DIR
        self._scripts = self._load_manifest(self.directory / MANIFEST_FILE_NAME)

    @staticmethod
    def _load_manifest(manifest_path: Path) -> dict[str, str]:
        data = cast(dict[str, Any], load_yaml_file(manifest_path))

        raw_scripts = data.get("scripts", {})
        if not isinstance(raw_scripts, dict):
            msg = f"Invalid scripts format in {manifest_path}"
            raise ValueError(msg)

        return {
            str(key): str(file_name)
            for key, file_name in cast(dict[object, object], raw_scripts).items()
        }

    @property
    def keys(self) -> list[str]:
        """Logical keys declared in the manifest, in manifest order."""
        return list(self._scripts)

    def script_path(self, key: str) -> Path:
        """Return the script file registered for *key*.

        Raises:
            ResourceNotFoundError: If the key is not in the manifest.
        """
        file_name = self._scripts.get(key)
        if file_name is None:
            raise ResourceNotFoundError(key, "not listed in " + MANIFEST_FILE_NAME)
        return self.directory / file_name

    def resolve(self, key: str) -> BinaryIO:
        path = self.script_path(key)
        if not path.is_file():
            raise ResourceNotFoundError(key, f"missing file {path}")
        return path.open("rb")


class InMemoryScriptProvider:
    """Serves scripts held in memory, keyed by logical table key."""

    def __init__(self, scripts: Mapping[str, str | bytes]) -> None:
        self._scripts = dict(scripts)

    def resolve(self, key: str) -> BinaryIO:
        if key not in self._scripts:
            raise ResourceNotFoundError(key)
        script = self._scripts[key]
        if isinstance(script, str):
            script = script.encode("utf-8")
        return io.BytesIO(script)
