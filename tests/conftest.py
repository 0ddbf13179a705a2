"""Pytest fixtures for weighttrack tests."""

from __future__ import annotations

import logging
import tempfile
from datetime import date, timedelta
from pathlib import Path

import pytest

from weighttrack.config import reload_settings
from weighttrack.db import DatabaseConnection, set_db
from weighttrack.tracking.models import WeightSample

REFERENCE_DAY = date(2025, 3, 31)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a config file that does not exist so defaults apply."""
    monkeypatch.setenv("WEIGHTTRACK_CONFIG", str(tmp_path / "config.yaml"))
    reload_settings()
    yield
    set_db(None)


@pytest.fixture(autouse=True)
def restore_logging():
    """Remove handlers installed by configure_logging during a test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_wt_handler", False):
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger("weighttrack").setLevel(logging.NOTSET)


@pytest.fixture
def temp_db():
    """Create a temporary database with schema and install it globally."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()
    set_db(db)

    yield db

    # Cleanup
    set_db(None)
    db_path.unlink(missing_ok=True)


def make_series(weights: list[float], spacing_days: int = 1, end: date = REFERENCE_DAY):
    """Samples ending on ``end``, one every ``spacing_days`` days."""
    n = len(weights)
    return [
        WeightSample(end - timedelta(days=spacing_days * (n - 1 - i)), w)
        for i, w in enumerate(weights)
    ]


@pytest.fixture
def losing_series():
    """Weights 120/118/116/114 at 30, 20, 10 and 0 days before the reference day."""
    return make_series([120.0, 118.0, 116.0, 114.0], spacing_days=10)


@pytest.fixture
def gaining_series():
    """Weights 110/112/114/116 at 30, 20, 10 and 0 days before the reference day."""
    return make_series([110.0, 112.0, 114.0, 116.0], spacing_days=10)
