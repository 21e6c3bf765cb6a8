"""Configuration loading for the updater.

Values are merged with the precedence defaults < configuration file < CLI
flags and validated into an UpdaterConfig before any rewriting starts.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import fields
from typing import Any, Dict, Optional

import yaml

from versioning.models import InvalidQualifierPatternError, InvalidVersionSpecificationError
from versioning.parser import split_qualifiers
from versioning.service import UpdaterConfig

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""


_BOOL_KEYS = {
    "accept_qualified_releases",
    "allow_snapshots",
    "process_dependencies",
    "process_dependency_management",
    "exclude_reactor",
    "generate_backup_poms",
}
_LIST_KEYS = {"qualifier_includes", "qualifier_excludes", "includes", "excludes"}
_STR_KEYS = {"comparison_method", "repository", "versions_file", "version_range"}
CONFIG_KEYS = {f.name for f in fields(UpdaterConfig) if f.init}


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML or JSON configuration file into a dict.

    Dashed keys are accepted and normalized to underscores.
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            if path.lower().endswith(".json"):
                data = json.load(handle)
            else:
                data = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid configuration file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def _coerce(key: str, value: Any) -> Any:
    if key in _BOOL_KEYS:
        if not isinstance(value, bool):
            raise ConfigError(f"'{key}' must be true or false, got {value!r}")
        return value
    if key in _LIST_KEYS:
        if isinstance(value, str):
            return tuple(split_qualifiers(value))
        if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            return tuple(value)
        raise ConfigError(f"'{key}' must be a list of strings or a comma separated string")
    if key in _STR_KEYS:
        if not isinstance(value, str):
            raise ConfigError(f"'{key}' must be a string, got {value!r}")
        return value
    raise ConfigError(f"Unknown configuration key '{key}'")


def merge_settings(file_settings: Dict[str, Any], args: Any = None) -> Dict[str, Any]:
    """Overlay CLI values that were explicitly set on top of file settings."""
    merged: Dict[str, Any] = {}
    for key, value in file_settings.items():
        merged[key] = _coerce(key, value)
    if args is not None:
        for key in CONFIG_KEYS:
            value = getattr(args, key, None)
            if value is not None:
                merged[key] = _coerce(key, value)
    return merged


def build_config(args: Any = None, config_path: Optional[str] = None) -> UpdaterConfig:
    """Build the UpdaterConfig for this run.

    ``config_path`` defaults to ``args.CONFIG``.
    """
    path = config_path or getattr(args, "CONFIG", None)
    file_settings: Dict[str, Any] = {}
    if path:
        file_settings = load_config_file(path)
        logger.debug("Loaded configuration from %s", path)
    settings = merge_settings(file_settings, args)
    if "repository" in settings:
        settings["repository"] = os.path.expanduser(settings["repository"])
    try:
        return UpdaterConfig(**settings)
    except (InvalidQualifierPatternError, InvalidVersionSpecificationError) as exc:
        raise ConfigError(str(exc)) from exc
