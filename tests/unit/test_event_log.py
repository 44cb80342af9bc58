"""
Tests for the persisted event log.
"""

from __future__ import annotations

import json
import logging

import pytest

from loadrush.components.cache import InMemoryKeyValueStore
from loadrush.services.event_log import (
    EventLog,
    get_event_log,
    init_event_log,
)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


class TestEventLog:
    """Buffer, bounds and persistence."""

    def test_log_appends_and_persists(self, store, frozen_clock) -> None:
        log = EventLog(store, time_port=frozen_clock)

        event = log.log_event("archive_sweep", {"archived": 2})

        assert log.get_buffer() == [event]
        persisted = json.loads(store.get_item("app.logs.v1"))
        assert persisted == [
            {
                "id": event.id,
                "ts": frozen_clock.now_ms(),
                "level": "info",
                "type": "event",
                "name": "archive_sweep",
                "data": {"archived": 2},
            }
        ]

    def test_event_without_data_omits_key(self, store) -> None:
        EventLog(store).log_screen_view("home")

        persisted = json.loads(store.get_item("app.logs.v1"))
        assert "data" not in persisted[0]
        assert persisted[0]["type"] == "screen"

    def test_bounded_keeps_newest(self, store) -> None:
        log = EventLog(store, max_entries=3)

        for i in range(5):
            log.log_event(f"e{i}")

        assert [e.name for e in log.get_buffer()] == ["e2", "e3", "e4"]
        assert len(json.loads(store.get_item("app.logs.v1"))) == 3

    def test_lazy_load_from_store(self, store) -> None:
        EventLog(store).log_event("before_restart")

        reopened = EventLog(store)

        assert [e.name for e in reopened.get_buffer()] == ["before_restart"]

    def test_corrupt_store_starts_empty(self, store) -> None:
        store.set_item("app.logs.v1", "{not json")

        log = EventLog(store)

        assert log.get_buffer() == []
        log.log_event("fresh")
        assert [e.name for e in log.get_buffer()] == ["fresh"]

    def test_clear_persists_empty_buffer(self, store) -> None:
        log = EventLog(store)
        log.log_event("x")

        log.clear()

        assert log.get_buffer() == []
        assert json.loads(store.get_item("app.logs.v1")) == []

    def test_log_error_includes_message(self, store) -> None:
        log = EventLog(store)

        event = log.log_error("purge", ValueError("boom"), {"loadId": "L1"})

        assert event.level == "error"
        assert event.type == "error"
        assert event.data == {"loadId": "L1", "message": "boom", "errorType": "ValueError"}

    def test_events_forwarded_to_logging(self, store, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="loadrush.services.event_log"):
            EventLog(store).log("warn", "event", "slow_sweep")

        assert any(
            r.levelno == logging.WARNING and "slow_sweep" in r.getMessage() for r in caplog.records
        )

    def test_custom_storage_key(self, store) -> None:
        EventLog(store, storage_key="ops.events").log_event("x")

        assert store.get_item("ops.events") is not None
        assert store.get_item("app.logs.v1") is None

    def test_invalid_bound_rejected(self, store) -> None:
        with pytest.raises(ValueError):
            EventLog(store, max_entries=0)


class TestSingleton:
    def test_get_before_init_raises(self) -> None:
        with pytest.raises(RuntimeError):
            get_event_log()

    def test_init_then_get(self, store) -> None:
        log = init_event_log(store, max_entries=10)
        assert get_event_log() is log
