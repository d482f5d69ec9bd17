import os
from datetime import datetime, timezone

import pytest

from sm15.application.config import EngineConfig
from sm15.application.review_processor import ReviewProcessor
from sm15.infrastructure.matrix import InMemoryOptimalFactorTable


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keeps the developer's config files and SM15_* variables out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in list(os.environ):
        if name.startswith("SM15_"):
            monkeypatch.delenv(name)
    return home


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def table():
    return InMemoryOptimalFactorTable()


@pytest.fixture
def processor(table, config):
    return ReviewProcessor(table, config)


@pytest.fixture
def t0():
    return datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
