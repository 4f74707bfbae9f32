"""Packaged configuration files (YAML) and the loader exposing them."""

from .manager import ConfigManager

__all__ = [
    "ConfigManager",
]
