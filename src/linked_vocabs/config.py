"""
Configuration file system for linked-vocabs.

Supports loading configuration from multiple locations, merged with precedence:
1. /etc/linked-vocabs/config.yaml or config.json (lowest priority)
2. ~/.config/linked-vocabs/config.yaml or config.json
3. ./config.yaml, ./linked-vocabs.yaml or their .json variants (highest priority)

All found config files are merged, with later files overriding earlier ones.
YAML is checked before JSON at each location. Environment variables
(LINKED_VOCABS_*) have the highest priority.

Example config.yaml:
    use_vocabularies: [dcmitype, lcsh]
    labels:
      preferred_languages: [en, en-us, de]
    store:
      path: ~/.local/share/linked-vocabs/store
    vocabularies:
      local:
        prefix: "http://example.org/terms/"
        strict: true
        terms: [widget, gadget]
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

# Config filenames for current working directory (project-local config)
CONFIG_FILENAMES = ["config.yaml", "config.json", "linked-vocabs.yaml", "linked-vocabs.json"]
# Config filenames for system/user config directories
CONFIG_USER_FILENAMES = ["config.yaml", "config.json"]

ENV_PREFIX = "LINKED_VOCABS_"
# Environment keys holding comma-separated lists
LIST_KEYS = {"use_vocabularies", "labels__preferred_languages", "labels__predicates", "store__data"}

DEFAULTS: dict[str, Any] = {
    "timeout": 30.0,  # Seconds, for remote endpoints and document fetches
    "use_vocabularies": [],  # Empty: every catalog vocabulary
    "vocabularies": {},  # Extra catalog entries
    "labels": {
        "preferred_languages": ["en", "en-us"],
        "predicates": [],  # Label predicates tried before the defaults
    },
    "store": {
        "path": None,  # Persistent Oxigraph store; in-memory if unset
        "endpoint": None,  # Remote SPARQL endpoint, used instead of a local store
        "data": [],  # RDF files loaded into the local store
    },
    "cache": {
        "dir": None,  # Default: ~/.cache/linked-vocabs
        "ttl_days": 30,
    },
}


def _get_config_dirs() -> list[Path]:
    """Get list of config directories to search, in merge order (lowest priority first)."""
    return [
        Path("/etc/linked-vocabs"),
        Path.home() / ".config" / "linked-vocabs",
        Path.cwd(),
    ]


def find_config_files() -> list[Path]:
    """Find all existing config files, in merge order (lowest priority first).

    At each location only the first found file (YAML before JSON) is used.
    """
    found_files = []

    for dir_path in _get_config_dirs():
        # Use different filenames for cwd vs standard config dirs
        filenames = CONFIG_FILENAMES if dir_path == Path.cwd() else CONFIG_USER_FILENAMES
        for filename in filenames:
            path = dir_path / filename
            if path.exists():
                found_files.append(path)
                break  # Only use first found file at each location
    return found_files


def find_config_file() -> Path | None:
    """Find the highest-priority existing config file, or None."""
    files = find_config_files()
    return files[-1] if files else None


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base dict, modifying base in place."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _deep_copy(d: dict) -> dict:
    """Create a deep copy of a nested dict structure (lists are copied too)."""
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = _deep_copy(value)
        elif isinstance(value, list):
            result[key] = list(value)
        else:
            result[key] = value
    return result


def _load_config_file(path: Path) -> dict[str, Any]:
    """Load a single config file (YAML or JSON) and return its contents.

    Raises:
        yaml.YAMLError: If a YAML config file is malformed.
        json.JSONDecodeError: If a JSON config file is malformed.
    """
    if path.suffix in (".yaml", ".yml"):
        import yaml

        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    else:
        with open(path, encoding="utf-8") as f:
            return json.load(f)


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load config from file(s), merging with defaults.

    If path is provided, only that file is loaded (plus defaults and env
    vars). Otherwise all standard locations are searched and merged.
    """
    config = _deep_copy(DEFAULTS)

    if path is not None:
        if path.exists():
            _deep_merge(config, _load_config_file(path))
    else:
        for config_path in find_config_files():
            _deep_merge(config, _load_config_file(config_path))

    _apply_env_overrides(config)

    return config


def _apply_env_overrides(config: dict[str, Any]) -> None:
    """Apply environment variable overrides to config.

    Environment variables are named LINKED_VOCABS_<KEY> where nested
    keys use double underscore, e.g., LINKED_VOCABS_STORE__ENDPOINT=http://...
    """
    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX):
            config_key = key[len(ENV_PREFIX) :].lower()
            _set_nested_value(config, config_key, value)


def _set_nested_value(config: dict, key: str, value: str) -> None:
    """Set a nested config value using double-underscore notation.

    e.g., "cache__ttl_days" sets config["cache"]["ttl_days"]
    """
    parts = key.split("__")
    target = config
    for part in parts[:-1]:
        if not isinstance(target.get(part), dict):
            target[part] = {}
        target = target[part]

    if key in LIST_KEYS:
        target[parts[-1]] = [item.strip() for item in value.split(",") if item.strip()]
    else:
        target[parts[-1]] = _convert_value(value)


def _convert_value(value: str) -> Any:
    """Convert string value to appropriate type."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def get_config_value(config: dict[str, Any], key: str, default: Any = None) -> Any:
    """Get a config value using dot notation, e.g. "store.path"."""
    target = config
    for part in key.split("."):
        if isinstance(target, dict) and part in target:
            target = target[part]
        else:
            return default
    return target


class Config:
    """Configuration holder with convenient access methods."""

    def __init__(self, path: Path | None = None):
        """Initialize config, loading from file(s).

        Args:
            path: Optional explicit path to config file. If provided, only
                  this file is loaded. Otherwise, all standard locations
                  are searched and merged.
        """
        if path is not None:
            self._paths = [path] if path.exists() else []
        else:
            self._paths = find_config_files()
        self._data = load_config(path)

    @property
    def path(self) -> Path | None:
        """Return the highest-priority loaded config file, or None."""
        return self._paths[-1] if self._paths else None

    @property
    def paths(self) -> list[Path]:
        """Return all loaded config file paths, in merge order."""
        return self._paths.copy()

    @property
    def data(self) -> dict[str, Any]:
        """Return the raw config dictionary."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return get_config_value(self._data, key, default)

    @property
    def timeout(self) -> float:
        return float(self.get("timeout", 30.0))

    @property
    def preferred_languages(self) -> list[str]:
        """Language tags tried in order when picking a label."""
        value = self.get("labels.preferred_languages", ["en", "en-us"])
        if isinstance(value, str):
            return [value]
        # YAML parses bare 'no' as boolean False: map it back to Norwegian
        return ["no" if v is False else str(v) for v in value]

    @property
    def label_predicates(self) -> list[str]:
        return list(self.get("labels.predicates", []) or [])

    @property
    def use_vocabularies(self) -> list[str]:
        value = self.get("use_vocabularies", []) or []
        return [value] if isinstance(value, str) else list(value)

    @property
    def vocabularies(self) -> dict[str, Any]:
        """Extra catalog entries defined in config."""
        return self.get("vocabularies", {}) or {}

    @property
    def store_path(self) -> Path | None:
        val = self.get("store.path")
        return Path(val).expanduser() if val else None

    @property
    def store_endpoint(self) -> str | None:
        return self.get("store.endpoint")

    @property
    def store_data(self) -> list[Path]:
        value = self.get("store.data", []) or []
        if isinstance(value, str):
            value = [value]
        return [Path(v).expanduser() for v in value]

    @property
    def cache_dir(self) -> Path:
        val = self.get("cache.dir")
        return Path(val).expanduser() if val else Path.home() / ".cache" / "linked-vocabs"

    @property
    def cache_ttl_seconds(self) -> int:
        return int(self.get("cache.ttl_days", 30)) * 24 * 60 * 60
