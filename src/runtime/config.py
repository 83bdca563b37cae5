# path: src/runtime/config.py
"""
YAML configuration for recipe-diff.

The tool runs fine without any config file. When present,
config/recipe_diff.yaml supplies defaults that the command line can
override:

    output: analysis.json
    log_level: info
    parallel_load: true
    include_removed_machines: false
    json_indent: 2
    blacklist: []
    whitelist: []

Filter entries are kept as raw strings here; analysis.status turns them into
RecipeStatus values so the config layer stays independent of the analysis
package.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .logging_config import resolve_level


# Default config directory; tests monkeypatch this to point at a temp dir.
CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"
CONFIG_NAME = "recipe_diff.yaml"


@dataclass(frozen=True)
class Settings:
    """Resolved run settings (file defaults + command line overrides)."""
    output: Path = Path("analysis.json")
    log_level: str = "info"
    parallel_load: bool = True
    include_removed_machines: bool = False
    json_indent: int = 2
    blacklist: List[str] = field(default_factory=list)
    whitelist: List[str] = field(default_factory=list)

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


# key -> accepted python type(s)
_SCHEMA: Dict[str, Any] = {
    "output": str,
    "log_level": str,
    "parallel_load": bool,
    "include_removed_machines": bool,
    "json_indent": int,
    "blacklist": list,
    "whitelist": list,
}


# ---------------------------------------------------------------------------
# Low-level loaders
# ---------------------------------------------------------------------------

def _load_yaml(path: Path) -> Dict[str, Any]:
    """
    Load a YAML config file and return it as a dict.

    Raises ConfigError if the file cannot be read or is not a mapping.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"YAML config {path} must be a mapping at top level.")
    return data


def _validate(raw: Dict[str, Any], path: Path) -> Dict[str, Any]:
    """Check keys and value types against _SCHEMA."""
    unknown = sorted(set(raw) - set(_SCHEMA))
    if unknown:
        raise ConfigError(f"Unknown keys in {path}: {', '.join(unknown)}")

    for key, value in raw.items():
        expected = _SCHEMA[key]
        # bool is an int subclass; json_indent: true is a typo, not 1
        if expected is int and isinstance(value, bool):
            raise ConfigError(f"{path}: '{key}' must be an integer")
        if not isinstance(value, expected):
            raise ConfigError(
                f"{path}: '{key}' must be {expected.__name__}, got {type(value).__name__}"
            )
        if expected is list and not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{path}: '{key}' must be a list of status names")

    if raw.get("json_indent", 0) < 0:
        raise ConfigError(f"{path}: 'json_indent' must be >= 0")
    if "log_level" in raw:
        try:
            resolve_level(raw["log_level"])
        except ValueError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
    return raw


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Build Settings from a YAML file.

    - path given: the file must exist.
    - path None:  CONFIG_DIR/recipe_diff.yaml is used if present, otherwise
                  built-in defaults.
    """
    if path is None:
        path = CONFIG_DIR / CONFIG_NAME
        if not path.exists():
            return Settings()
    elif not path.exists():
        raise ConfigError(f"Missing config file: {path}")

    raw = _validate(_load_yaml(path), path)

    values: Dict[str, Any] = dict(raw)
    if "output" in values:
        values["output"] = Path(values["output"])
    for key in ("blacklist", "whitelist"):
        if key in values:
            values[key] = list(values[key])
    return Settings(**values)


__all__ = [
    "CONFIG_DIR",
    "CONFIG_NAME",
    "Settings",
    "load_settings",
]
