"""Pytest configuration and fixtures for pom-validator tests."""
from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop POMV_* variables so every test starts from the default configuration."""
    for name in list(os.environ):
        if name.startswith("POMV_"):
            monkeypatch.delenv(name)
    monkeypatch.delenv("EDITOR", raising=False)


@pytest.fixture
def write_pom(tmp_path: Path):
    """Return a helper writing a file below tmp_path, creating directories as needed."""

    def write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return write
