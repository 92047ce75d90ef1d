"""Shared fixtures for the source editor tests."""

import shutil
from pathlib import Path

import pytest

from helpers import FIXTURES_DIR
from plugins.java.plugin import JavaPlugin


@pytest.fixture(scope="session")
def java_plugin():
    return JavaPlugin()


@pytest.fixture
def copy_fixture(tmp_path):
    """Copy a Java fixture into a temporary directory and return its path."""
    def _copy(name: str) -> Path:
        target = tmp_path / f"{name}.java"
        shutil.copy(FIXTURES_DIR / f"{name}.java", target)
        return target
    return _copy
