"""
Shared test fixtures.
"""

import logging
import os
from pathlib import Path

import pytest

SETTINGS_TEXT = 'rootProject.name = "Demo"\n\ninclude(":app")\n'


@pytest.fixture
def gradle_project(tmp_path: Path) -> Path:
    """A minimal Gradle project root named Demo with a settings.gradle.kts and no sources."""
    root = tmp_path / "Demo"
    root.mkdir()
    (root / "settings.gradle.kts").write_text(SETTINGS_TEXT, encoding="utf-8")
    return root


@pytest.fixture
def write_source():
    """Write a source file under a project root, creating parent directories."""

    def _write(root: Path, rel: str, text: str) -> Path:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def tree_snapshot():
    """Return a sorted list of (relative path, file text or None for directories)."""

    def _snapshot(root: Path):
        entries = []
        for dirpath, dirnames, filenames in os.walk(root):
            for d in dirnames:
                entries.append((os.path.relpath(os.path.join(dirpath, d), root), None))
            for f in filenames:
                full = os.path.join(dirpath, f)
                with open(full, "r", encoding="utf-8") as fh:
                    entries.append((os.path.relpath(full, root), fh.read()))
        return sorted(entries)

    return _snapshot


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
