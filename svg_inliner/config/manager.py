from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises the declarative defaults of the inliner (default
selectors, attribute pattern, sprite sheet naming) and the logging
configuration. It loads YAML files packaged with *svg_inliner* and optionally
merges them with user overrides.

User overrides live in ``$SVG_INLINER_CONFIG_DIR`` when set, otherwise in
``~/.svg_inliner``. Files there are only read, never created.

Loaded sections are exposed as read-only mappings: the defaults are
process-wide and must not change after load.
"""

import logging
import os
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]


def _get_user_config_dir() -> Path:
    """Return the directory holding user overrides."""
    override = os.environ.get("SVG_INLINER_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".svg_inliner"


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance

    def reset(cls) -> None:
        """Drop the cached instance so the next call reloads from disk."""
        cls._instance = None


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as read-only mappings."""

    _DEFAULT_FILENAMES = {
        "options": "default_options.yml",
        "logging": "logging.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Mapping[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_default_options(self) -> Mapping[str, Any]:
        return self._data.get("options", MappingProxyType({}))

    def get_logging_config(self) -> Dict[str, Any]:
        # fresh copy: callers patch handler entries before dictConfig
        return _thaw(self._data.get("logging", {}))

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []
        user_config_dir = _get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. packaged default
            try:
                with resources.files(__package__).joinpath(filename).open("r", encoding="utf-8") as fh:
                    merged_cfg.update(yaml.safe_load(fh) or {})
                    status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. user overrides
            user_path = user_config_dir / filename
            if user_path.is_file():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = _freeze(merged_cfg)
            startup_summary.append(f"{key}: {status}")

        logger.debug("Config startup: %s", " | ".join(startup_summary))


def _freeze(value: Any) -> Any:
    """Return a read-only deep view of *value* (dicts become mapping proxies)."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    """Inverse of :func:`_freeze`, producing fresh mutable containers."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value
