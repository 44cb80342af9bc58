"""
Archival component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from loadrush.domain.entities import LoadRecord


class LoadRepoPort(Protocol):
    """Load store capability used by sweeps and purges."""

    def get_by_id(self, load_id: str) -> LoadRecord | None:
        """Get load by ID."""
        ...

    def list_archive_candidates(
        self,
        statuses: tuple[str, ...],
        delivered_before: datetime,
        limit: int,
    ) -> list[LoadRecord]:
        """List up to limit unarchived loads in statuses delivered before the cutoff."""
        ...

    def list_purge_candidates(
        self,
        archived_before: datetime,
        archived_reason: str | None,
        limit: int,
    ) -> list[LoadRecord]:
        """List up to limit loads archived before the cutoff, optionally by reason."""
        ...

    def save(self, load: LoadRecord) -> LoadRecord:
        """Insert or replace a load."""
        ...

    def delete(self, load_id: str) -> bool:
        """Delete a load. Returns True if it existed."""
        ...


class TimePort(Protocol):
    """Time port for sweep timestamps."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class EventLogPort(Protocol):
    """Operational event sink."""

    def log_event(self, name: str, data: dict[str, Any] | None = None) -> None:
        """Record an info event."""
        ...

    def log_error(
        self,
        name: str,
        error: BaseException | str,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Record an error event."""
        ...
