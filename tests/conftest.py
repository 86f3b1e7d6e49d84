"""Shared pytest fixtures for the scheduler tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from planner.db import init_db


@pytest.fixture
def db_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty scheduler database in a temp directory, wired in through TODO_DBFILE."""
    path = tmp_path / "scheduler.db"
    monkeypatch.setenv("TODO_DBFILE", str(path))
    init_db()
    return path


@pytest.fixture
def client(db_file: Path) -> TestClient:
    from planner.web import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def now() -> date:
    """Friday, 1 March 2024."""
    return date(2024, 3, 1)
