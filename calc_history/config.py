"""Configuration for Calc History.

Settings are layered, later sources win:
- Built-in defaults
- [tool.calc-history] in pyproject.toml
- .calc-history/config.json
"""

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict

import toml


CONFIG_DIR = ".calc-history"
CONFIG_FILE = "config.json"
PYPROJECT_TABLE = "calc-history"


@dataclass
class CalcConfig:
    """Calculator configuration options."""

    int_bits: int = 32  # 0 = unbounded
    history_limit: int = 10
    compact_mode: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    def update(self, data: Dict[str, Any]) -> None:
        """Apply known keys from a mapping.

        Unknown keys and values of the wrong type (or negative integers)
        are skipped, so the current value stands.
        """
        for f in fields(self):
            if f.name in data and is_valid_value(f.type, data[f.name]):
                setattr(self, f.name, data[f.name])


def is_valid_value(field_type: Any, value: Any) -> bool:
    """Check a loaded value against a config field type."""
    if field_type in (bool, "bool"):
        return isinstance(value, bool)

    # bool is an int subclass; true/false is not a width or a count
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return value >= 0


def config_file_path(project_path: str) -> Path:
    """Return path of the JSON config file for a project."""
    return Path(project_path) / CONFIG_DIR / CONFIG_FILE


def _load_pyproject_table(project_path: str) -> Dict[str, Any]:
    pyproject = Path(project_path) / "pyproject.toml"
    if not pyproject.exists():
        return {}

    try:
        data = toml.load(pyproject)
    except (toml.TomlDecodeError, IOError):
        return {}

    return data.get("tool", {}).get(PYPROJECT_TABLE, {})


def _load_json_config(project_path: str) -> Dict[str, Any]:
    config_file = config_file_path(project_path)
    if not config_file.exists():
        return {}

    try:
        with open(config_file) as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError):
        return {}

    return data if isinstance(data, dict) else {}


def load_config(project_path: str = ".") -> CalcConfig:
    """Load configuration for a project.

    Args:
        project_path: Path to project root.

    Returns:
        CalcConfig with settings from pyproject.toml, config.json or defaults.
    """
    config = CalcConfig()
    config.update(_load_pyproject_table(project_path))
    config.update(_load_json_config(project_path))
    return config


def save_config(project_path: str, config: CalcConfig) -> Path:
    """Write configuration to .calc-history/config.json.

    Returns:
        Path of the written file.
    """
    config_file = config_file_path(project_path)
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, "w") as f:
        json.dump(config.to_dict(), f, indent=2)

    return config_file


def coerce_value(key: str, raw: str) -> Any:
    """Convert a command-line string to the type of a config field.

    Raises:
        ValueError: If the key is unknown or the value does not parse.
    """
    field_types = {f.name: f.type for f in fields(CalcConfig)}
    if key not in field_types:
        raise ValueError(f"Unknown config key: {key}")

    field_type = field_types[key]
    if field_type in (bool, "bool"):
        lowered = raw.strip().lower()
        if lowered in ("true", "yes", "on", "1"):
            return True
        if lowered in ("false", "no", "off", "0"):
            return False
        raise ValueError(f"Expected a boolean for {key}, got '{raw}'")

    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Expected an integer for {key}, got '{raw}'") from None

    if value < 0:
        raise ValueError(f"{key} must be non-negative, got {value}")
    return value
