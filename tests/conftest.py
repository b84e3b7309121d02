# tests/conftest.py
from __future__ import annotations

import logging
import os
import sys

import pytest

from crickboard.db_connection import ensure_schema


# =========================
# Logging -> stdout
# =========================
@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    """Send test logs to stdout so they show up under pytest -s."""
    root = logging.getLogger()
    want = None
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout:
            want = h
            break
    if want is None:
        want = logging.StreamHandler(sys.stdout)
        want.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(want)
    root.setLevel(os.getenv("TEST_LOG_LEVEL", "INFO").upper())


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Point the store at a fresh SQLite file with the schema in place."""
    path = tmp_path / "crickboard-test.db"
    monkeypatch.setenv("CRICKBOARD_DB", str(path))
    monkeypatch.delenv("CRICKBOARD_TEAM_NAME", raising=False)
    ensure_schema()
    return path


@pytest.fixture
def user_id():
    return "user-1"


@pytest.fixture
def other_user_id():
    return "user-2"
