"""Test configuration and fixtures for svg-inliner.

Provides the fixture directory, option helpers and parsing shortcuts shared
by every test module. Each test runs against the packaged defaults only: user
overrides are pointed at an empty temporary directory.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import lxml.html

from svg_inliner.config import ConfigManager
from svg_inliner.core.options import InlineOptions, resolve_options

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Provides path to the HTML/SVG fixture directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Point user overrides at an empty directory and reload defaults."""
    config_dir = tmp_path_factory.mktemp("svg_inliner_config")
    monkeypatch.setenv("SVG_INLINER_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def make_options(fixtures_dir):
    """Factory resolving options with ``root`` defaulting to the fixtures."""
    def _make(**overrides: Any) -> InlineOptions:
        values: Dict[str, Any] = {"root": str(fixtures_dir)}
        values.update(overrides)
        return resolve_options(values)
    return _make


@pytest.fixture
def read_fixture(fixtures_dir):
    def _read(name: str) -> str:
        return (fixtures_dir / name).read_text(encoding="utf-8")
    return _read


@pytest.fixture
def parse_html():
    """Parse transformed output for structural assertions.

    The HTML parser folds names to lower case: query ``viewbox``, not ``viewBox``.
    """
    return lxml.html.document_fromstring
