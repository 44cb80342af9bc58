"""
Photos component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from loadrush.domain.entities import LoadRecord


class LoadRepoPort(Protocol):
    """Store capability for photo writes."""

    def get_by_id(self, load_id: str) -> LoadRecord | None:
        """Get load by ID."""
        ...

    def save(self, load: LoadRecord) -> LoadRecord:
        """Insert or replace a load."""
        ...
