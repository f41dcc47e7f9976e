"""
Type-safe YAML loader for script manifests and table definition files.
Wraps a ruamel.yaml instance with proper type hints.
"""

from io import StringIO
from pathlib import Path
from typing import Protocol, TextIO, Union, cast

from ruamel.yaml import YAML

# Recursive type for nested YAML structures
ConfigValue = Union[str, int, float, bool, None, 'ConfigDict', list['ConfigValue']]
ConfigDict = dict[str, ConfigValue]


class YAMLLoader(Protocol):
    """Protocol for the subset of the ruamel.yaml API we use."""

    def load(self, stream: TextIO) -> ConfigValue:
        """Load YAML from stream."""
        ...


def _create_yaml_loader() -> YAMLLoader:
    """Create the shared YAML loader.

    ruamel.yaml's safe loader does not execute arbitrary Python code
    from YAML content.
    """
    return cast(YAMLLoader, YAML(typ="safe", pure=True))


yaml: YAMLLoader = _create_yaml_loader()


def load_yaml_text(text: str) -> ConfigValue:
    """Parse a YAML document held in memory."""
    return yaml.load(StringIO(text))


def load_yaml_file(file_path: Path) -> ConfigDict:
    """Load a YAML mapping from disk.

    Args:
        file_path: Path to YAML file to load

    Returns:
        Mapping loaded from YAML (empty dict for an empty document)

    Raises:
        FileNotFoundError: If file does not exist
        ValueError: If the document is not a mapping
    """
    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")

    with file_path.open(encoding="utf-8") as f:
        raw: ConfigValue = yaml.load(f)

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a mapping at top level of {file_path}")
    return cast(ConfigDict, raw)
