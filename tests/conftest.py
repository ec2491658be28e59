"""Pytest configuration and fixtures."""

import json
from io import StringIO

import pytest
from rich.console import Console

from core.report import Reporter
from core.versions import VersionCatalog


@pytest.fixture(autouse=True)
def isolated_npmrc(tmp_path, monkeypatch):
    """Keep the user's and the system's npmrc files out of the tests."""
    monkeypatch.setenv("NPM_CONFIG_GLOBALCONFIG", str(tmp_path / "global.npmrc"))
    monkeypatch.setenv("NPM_CONFIG_USERCONFIG", str(tmp_path / "user.npmrc"))


@pytest.fixture
def sample_package_json():
    """Sample package.json content for testing."""
    return """
{
  "name": "test-project",
  "version": "1.0.0",
  "dependencies": {
    "express": "^4.18.0",
    "lodash": "~4.17.21"
  }
}
"""


@pytest.fixture
def catalog():
    """A catalog seeded with a few packages, never hitting the network."""
    catalog = VersionCatalog()
    catalog.seed("lib", ["2.0.0", "1.5.0", "1.2.3"])
    catalog.seed("express", ["5.1.0", "4.21.2", "4.18.0"])
    catalog.seed("lodash", ["4.17.21"])
    catalog.seed("typescript", ["5.6.3", "5.4.5", "4.9.5"])
    return catalog


@pytest.fixture
def output():
    """Buffer capturing reporter output."""
    return StringIO()


@pytest.fixture
def reporter(output):
    """Reporter printing to an in-memory console."""
    return Reporter(Console(file=output, width=120, color_system=None))


@pytest.fixture
def write_manifest():
    """Write a package.json (as a dict) into a directory."""

    def write(directory, data):
        directory.mkdir(parents=True, exist_ok=True)
        package_file = directory / "package.json"
        package_file.write_text(json.dumps(data, indent=2) + "\n")
        return package_file

    return write
