import os
from datetime import UTC, datetime
from pathlib import Path

import pytest

from loadrush.adapters.clock import FrozenClock
from loadrush.adapters.sqlite.handles import reset_store
from loadrush.rules.loader import load_rules
from loadrush.services.event_log import reset_event_log

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Process-wide handles must not leak between tests."""
    reset_store()
    reset_event_log()
    yield
    reset_store()
    reset_event_log()


@pytest.fixture
def rules():
    """Rules loaded from the real project rules.yaml."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def frozen_clock(now) -> FrozenClock:
    return FrozenClock(now)


@pytest.fixture
def db_path(tmp_path) -> str:
    return os.path.join(str(tmp_path), "loadrush.db")
