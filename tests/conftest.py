"""Shared fixtures for depwalk tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import write_manifest


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """A source tree root marked by an empty global.yaml."""
    (tmp_path / "global.yaml").write_text("{}\n")
    return tmp_path


@pytest.fixture
def app_dir(source_root: Path) -> Path:
    """``src/App`` at 1.0.0 depending on ``Lib >=2.0.0``."""
    return write_manifest(source_root / "src" / "App", dependencies={"Lib": "2.0.0"})


@pytest.fixture
def packages_dir(source_root: Path) -> Path:
    path = source_root / "packages"
    path.mkdir()
    return path
