"""Shared test fixtures."""

from pathlib import Path

import pytest


def write_files(directory: Path, count: int, size: int) -> None:
    """Create ``count`` files of ``size`` bytes each in ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    for i in range(count):
        (directory / f"file{i}.js").write_bytes(b"x" * size)


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path_factory, monkeypatch):
    """Point the settings file at a path that does not exist."""
    settings_dir = tmp_path_factory.mktemp("settings")
    settings_file = settings_dir / "config.json"
    monkeypatch.setenv("NMPRUNE_CONFIG", str(settings_file))
    return settings_file


@pytest.fixture
def scenario_tree(tmp_path):
    """
    Tree with one real target, a nested target and an excluded target.

    root/a/node_modules                     10 files, 500 bytes
    root/a/node_modules/sub/node_modules    nested, never reported on its own
    root/b/node_modules                     excluded by the tests that use it
    """
    root = tmp_path / "root"
    outer = root / "a" / "node_modules"
    write_files(outer, count=10, size=50)
    (outer / "sub" / "node_modules").mkdir(parents=True)
    write_files(root / "b" / "node_modules", count=2, size=100)
    (root / "c" / "src").mkdir(parents=True)
    return root


@pytest.fixture
def make_files():
    """Return the file-writing helper for tests that build their own trees."""
    return write_files
