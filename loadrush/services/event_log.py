"""
EventLog - Bounded, persisted operational event log.

Keeps the most recent events in memory and mirrors them to a key/value
store so they survive restarts.

Key behaviors:
- Buffer loads lazily from the store on first use
- At most max_entries events are kept; the oldest are dropped first
- Every mutation (log, clear) persists the whole buffer
- Every event is also emitted through the logging module
- Store failures are logged and never raised to the caller
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Literal
from uuid import uuid4

from loadrush.adapters.clock import SystemClock, to_epoch_ms
from loadrush.components.cache import KeyValueStorePort, TimePort

logger = logging.getLogger(__name__)

LogLevel = Literal["debug", "info", "warn", "error"]
EventType = Literal["screen", "event", "error"]

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

DEFAULT_MAX_ENTRIES = 200
DEFAULT_STORAGE_KEY = "app.logs.v1"


@dataclass(frozen=True)
class LogEvent:
    """One recorded event."""

    id: str
    ts: int
    level: LogLevel
    type: EventType
    name: str
    data: dict[str, Any] | None = field(default=None)

    def to_json_dict(self) -> dict[str, Any]:
        out = asdict(self)
        if out["data"] is None:
            del out["data"]
        return out


def _event_from_dict(raw: Any) -> LogEvent | None:
    if not isinstance(raw, dict):
        return None
    try:
        return LogEvent(
            id=str(raw["id"]),
            ts=int(raw["ts"]),
            level=raw.get("level", "info"),
            type=raw.get("type", "event"),
            name=str(raw.get("name", "")),
            data=raw.get("data"),
        )
    except (KeyError, TypeError, ValueError):
        return None


class EventLog:
    """Process-wide event log backed by a key/value store."""

    def __init__(
        self,
        store: KeyValueStorePort,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        storage_key: str = DEFAULT_STORAGE_KEY,
        time_port: TimePort | None = None,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._store = store
        self._max_entries = max_entries
        self._storage_key = storage_key
        self._time = time_port or SystemClock()
        self._buffer: list[LogEvent] = []
        self._loaded = False

    def _load(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        try:
            raw = self._store.get_item(self._storage_key)
            parsed = json.loads(raw) if raw else []
        except Exception:
            logger.warning("Failed to load event log buffer", exc_info=True)
            parsed = []

        if not isinstance(parsed, list):
            parsed = []
        events = [e for e in (_event_from_dict(item) for item in parsed) if e is not None]
        self._buffer = events[-self._max_entries :]

    def _persist(self) -> None:
        try:
            payload = json.dumps([e.to_json_dict() for e in self._buffer], default=str)
            self._store.set_item(self._storage_key, payload)
        except Exception:
            logger.warning("Failed to persist event log buffer", exc_info=True)

    def get_buffer(self) -> list[LogEvent]:
        """Return a copy of the buffered events, oldest first."""
        self._load()
        return list(self._buffer)

    def clear(self) -> None:
        """Drop every event."""
        self._load()
        self._buffer = []
        self._persist()

    def log(
        self,
        level: LogLevel,
        type: EventType,
        name: str,
        data: dict[str, Any] | None = None,
    ) -> LogEvent:
        """Record an event and persist the buffer."""
        self._load()
        event = LogEvent(
            id=uuid4().hex,
            ts=to_epoch_ms(self._time.now_utc()),
            level=level,
            type=type,
            name=name,
            data=data,
        )
        self._buffer.append(event)
        if len(self._buffer) > self._max_entries:
            self._buffer = self._buffer[-self._max_entries :]

        logger.log(_LEVELS.get(level, logging.INFO), "[Event] %s %s %s", type, name, data or {})
        self._persist()
        return event

    def log_screen_view(self, screen: str, data: dict[str, Any] | None = None) -> LogEvent:
        return self.log("info", "screen", screen, data)

    def log_event(self, name: str, data: dict[str, Any] | None = None) -> LogEvent:
        return self.log("info", "event", name, data)

    def log_error(
        self,
        name: str,
        error: BaseException | str,
        data: dict[str, Any] | None = None,
    ) -> LogEvent:
        """Record an error, merging its message into data."""
        payload = dict(data or {})
        payload["message"] = str(error)
        if isinstance(error, BaseException):
            payload["errorType"] = type(error).__name__
        return self.log("error", "error", name, payload)


# Singleton for process-wide access
_event_log: EventLog | None = None


def get_event_log() -> EventLog:
    """
    Get the process event log (must call init_event_log first).

    Raises:
        RuntimeError: If the event log has not been initialized.
    """
    if _event_log is None:
        raise RuntimeError("Event log not initialized. Call init_event_log() at startup.")
    return _event_log


def init_event_log(
    store: KeyValueStorePort,
    max_entries: int = DEFAULT_MAX_ENTRIES,
    storage_key: str = DEFAULT_STORAGE_KEY,
) -> EventLog:
    """Initialize the process event log."""
    global _event_log
    _event_log = EventLog(store, max_entries=max_entries, storage_key=storage_key)
    return _event_log


def reset_event_log() -> None:
    """Reset the event log (for testing only)."""
    global _event_log
    _event_log = None
