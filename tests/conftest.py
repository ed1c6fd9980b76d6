"""
Shared fixtures for fq tests.

Module: tests/conftest.py
"""

import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch: pytest.MonkeyPatch):
    """Undo the root logging configuration done by the CLI."""
    monkeypatch.delenv("FQ_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Create a directory with text files and a subdirectory, and chdir into it.

    Layout:
        a.txt, b.txt, notes.md, .hidden.txt, sub/c.txt, sub/deep/d.txt, dir.txt/
    """
    (tmp_path / "a.txt").write_text("alpha")
    (tmp_path / "b.txt").write_text("bravo")
    (tmp_path / "notes.md").write_text("# notes")
    (tmp_path / ".hidden.txt").write_text("hidden")
    (tmp_path / "sub" / "deep").mkdir(parents=True)
    (tmp_path / "sub" / "c.txt").write_text("charlie")
    (tmp_path / "sub" / "deep" / "d.txt").write_text("delta")
    (tmp_path / "dir.txt").mkdir()

    monkeypatch.chdir(tmp_path)
    return tmp_path
