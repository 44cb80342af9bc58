"""
Archival component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loadrush.domain.entities import MANUAL_ARCHIVE_REASON, LoadRecord

# --- Validation Error ---


@dataclass(frozen=True)
class ArchivalError:
    """Archival operation error."""

    code: str
    message: str
    load_id: str | None = None


# --- Reports ---


@dataclass(frozen=True)
class SweepReport:
    """Counts for one archival sweep."""

    scanned: int
    archived: int
    archived_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SweepResult:
    """Pure sweep result: the report plus every candidate after the sweep."""

    report: SweepReport
    records: tuple[LoadRecord, ...]


@dataclass(frozen=True)
class PurgeReport:
    """Counts for one purge pass."""

    scanned: int
    purged: int
    purged_ids: tuple[str, ...] = ()


# --- Input Models ---


@dataclass(frozen=True)
class SweepInput:
    """Input for an archival sweep over unarchived loads."""

    limit: int | None = None


@dataclass(frozen=True)
class PurgeInput:
    """Input for deleting loads archived long enough ago."""

    older_than_days: int | None = None
    archived_reason: str | None = None
    limit: int | None = None


@dataclass(frozen=True)
class ManualArchiveInput:
    """Input for archiving a single load on request."""

    load_id: str
    reason: str = MANUAL_ARCHIVE_REASON


# --- Output Models ---


@dataclass(frozen=True)
class SweepOutput:
    """Output for sweep operation."""

    report: SweepReport
    errors: list[ArchivalError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class PurgeOutput:
    """Output for purge operation."""

    report: PurgeReport
    errors: list[ArchivalError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ManualArchiveOutput:
    """Output for manual archive operation."""

    load: LoadRecord | None
    errors: list[ArchivalError] = field(default_factory=list)
    success: bool = True
