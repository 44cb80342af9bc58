"""
ArchivalService - Moves finished loads off the board and purges old ones.

Functional core (eligibility, sweep, purge selection) plus a thin service
that reads candidates from the store and writes results back.

Key behaviors:
- A load is archived once it is completed (or already marked archived) and
  its delivery date is strictly more than window_days in the past
- Archiving sets isArchived/archivedAt only; every other field is untouched
- Already-archived loads are skipped, so repeated sweeps are no-ops
- Purge deletes archived loads whose archivedAt is older than the cutoff
- The store pre-filters candidates by status and cutoff; the pure rule still
  decides, so scanned counts only candidates
- Per-record store failures are logged and skipped; counts undercount
- expiresAtMs never triggers archival
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from loadrush.adapters.clock import SystemClock
from loadrush.domain.entities import LoadRecord

from .models import (
    ArchivalError,
    ManualArchiveOutput,
    PurgeOutput,
    PurgeReport,
    SweepOutput,
    SweepReport,
    SweepResult,
)
from .ports import EventLogPort, LoadRepoPort, TimePort

logger = logging.getLogger(__name__)

# --- Configuration ---


@dataclass(frozen=True)
class ArchivalConfig:
    """Archival configuration from rules."""

    window_days: int = 7
    eligible_statuses: tuple[str, ...] = ("completed", "archived")
    batch_limit: int = 200
    purge_default_days: int = 14


DEFAULT_CONFIG = ArchivalConfig()


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


# --- Eligibility ---


def archive_cutoff(now: datetime, config: ArchivalConfig = DEFAULT_CONFIG) -> datetime:
    """Loads delivered strictly before this instant are old enough to archive."""
    return _as_utc(now) - timedelta(days=config.window_days)


def is_eligible_for_archive(
    load: LoadRecord,
    now: datetime,
    config: ArchivalConfig = DEFAULT_CONFIG,
) -> bool:
    """True if the sweep at `now` should archive this load."""
    if load.is_archived:
        return False
    if load.status not in config.eligible_statuses:
        return False
    if load.delivery_date is None:
        return False
    return _as_utc(load.delivery_date) < archive_cutoff(now, config)


def archive_record(
    load: LoadRecord,
    now: datetime,
    reason: str | None = None,
) -> LoadRecord:
    """Return an archived copy of load. Only archive fields change."""
    update: dict[str, object] = {"is_archived": True, "archived_at": _as_utc(now)}
    if reason is not None:
        update["archived_reason"] = reason
    return load.model_copy(update=update)


def sweep(
    candidates: Iterable[LoadRecord],
    now: datetime,
    config: ArchivalConfig = DEFAULT_CONFIG,
) -> SweepResult:
    """
    Apply the archival rule to every candidate.

    The rule is per-record, so candidate order does not affect the outcome.
    """
    records: list[LoadRecord] = []
    archived_ids: list[str] = []

    for load in candidates:
        if is_eligible_for_archive(load, now, config):
            load = archive_record(load, now)
            archived_ids.append(load.id)
        records.append(load)

    return SweepResult(
        report=SweepReport(
            scanned=len(records),
            archived=len(archived_ids),
            archived_ids=tuple(archived_ids),
        ),
        records=tuple(records),
    )


# --- Purge Selection ---


def is_eligible_for_purge(
    load: LoadRecord,
    now: datetime,
    older_than_days: int,
    archived_reason: str | None = None,
) -> bool:
    """True if load was archived more than older_than_days before now."""
    if not load.is_archived or load.archived_at is None:
        return False
    if archived_reason is not None and load.archived_reason != archived_reason:
        return False
    return _as_utc(load.archived_at) < _as_utc(now) - timedelta(days=older_than_days)


def purge_cutoff(now: datetime, older_than_days: int) -> datetime:
    """
    Loads archived strictly before this instant may be purged.

    Raises:
        ValueError: If older_than_days is negative.
    """
    if older_than_days < 0:
        raise ValueError("older_than_days must be non-negative")
    return _as_utc(now) - timedelta(days=older_than_days)


def select_for_purge(
    candidates: Iterable[LoadRecord],
    now: datetime,
    older_than_days: int,
    archived_reason: str | None = None,
) -> list[LoadRecord]:
    """
    Pick archived loads old enough to delete.

    Raises:
        ValueError: If older_than_days is negative.
    """
    purge_cutoff(now, older_than_days)
    return [
        load
        for load in candidates
        if is_eligible_for_purge(load, now, older_than_days, archived_reason)
    ]


# --- Archival Service ---


class ArchivalService:
    """
    Archival service.

    Sweeps must be serialized by the caller; two concurrent sweeps can both
    archive the same load, which only rewrites the same fields twice.
    """

    def __init__(
        self,
        repo: LoadRepoPort,
        time_port: TimePort | None = None,
        config: ArchivalConfig | None = None,
        event_log: EventLogPort | None = None,
    ) -> None:
        """Initialize service."""
        self._repo = repo
        self._time = time_port or SystemClock()
        self._config = config or DEFAULT_CONFIG
        self._event_log = event_log

    def sweep(self, limit: int | None = None) -> SweepOutput:
        """Archive up to `limit` eligible loads, oldest delivery first."""
        now = self._time.now_utc()
        candidates = self._repo.list_archive_candidates(
            self._config.eligible_statuses,
            archive_cutoff(now, self._config),
            limit or self._config.batch_limit,
        )
        result = sweep(candidates, now, self._config)

        archived_ids = set(result.report.archived_ids)
        to_save = [r for r in result.records if r.id in archived_ids]
        saved_ids: list[str] = []
        errors: list[ArchivalError] = []

        for load in to_save:
            try:
                self._repo.save(load)
            except Exception as e:
                logger.exception("Failed to archive load %s", load.id)
                errors.append(
                    ArchivalError(code="save_failed", message=str(e), load_id=load.id)
                )
                continue
            saved_ids.append(load.id)

        report = SweepReport(
            scanned=result.report.scanned,
            archived=len(saved_ids),
            archived_ids=tuple(saved_ids),
        )
        logger.info("Archive sweep scanned %d, archived %d", report.scanned, report.archived)
        self._record(
            "archive_sweep",
            {"scanned": report.scanned, "archived": report.archived},
            errors,
        )
        return SweepOutput(report=report, errors=errors, success=not errors)

    def purge(
        self,
        older_than_days: int | None = None,
        archived_reason: str | None = None,
        limit: int | None = None,
    ) -> PurgeOutput:
        """Delete archived loads older than the cutoff."""
        days = (
            older_than_days
            if older_than_days is not None
            else self._config.purge_default_days
        )
        now = self._time.now_utc()
        candidates = self._repo.list_purge_candidates(
            purge_cutoff(now, days),
            archived_reason,
            limit or self._config.batch_limit,
        )
        selected = select_for_purge(candidates, now, days, archived_reason)

        purged_ids: list[str] = []
        errors: list[ArchivalError] = []

        for load in selected:
            try:
                self._repo.delete(load.id)
            except Exception as e:
                logger.exception("Failed to purge load %s", load.id)
                errors.append(
                    ArchivalError(code="delete_failed", message=str(e), load_id=load.id)
                )
                continue
            purged_ids.append(load.id)

        report = PurgeReport(
            scanned=len(candidates),
            purged=len(purged_ids),
            purged_ids=tuple(purged_ids),
        )
        logger.info(
            "Purge older than %d days scanned %d, purged %d",
            days,
            report.scanned,
            report.purged,
        )
        self._record(
            "archive_purge",
            {"scanned": report.scanned, "purged": report.purged, "days": days},
            errors,
        )
        return PurgeOutput(report=report, errors=errors, success=not errors)

    def manual_archive(self, load_id: str, reason: str) -> ManualArchiveOutput:
        """Archive one load regardless of status. Archived loads are returned as-is."""
        load = self._repo.get_by_id(load_id)
        if load is None:
            return ManualArchiveOutput(
                load=None,
                errors=[
                    ArchivalError(
                        code="load_not_found",
                        message=f"Load {load_id} not found",
                        load_id=load_id,
                    )
                ],
                success=False,
            )

        if load.is_archived:
            return ManualArchiveOutput(load=load)

        saved = self._repo.save(archive_record(load, self._time.now_utc(), reason))
        logger.info("Archived load %s (%s)", load_id, reason)
        self._record("manual_archive", {"loadId": load_id, "reason": reason}, [])
        return ManualArchiveOutput(load=saved)

    def _record(
        self,
        name: str,
        data: dict[str, object],
        errors: list[ArchivalError],
    ) -> None:
        if self._event_log is None:
            return
        self._event_log.log_event(name, data)
        for error in errors:
            self._event_log.log_error(name, error.message, {"loadId": error.load_id})


# --- Factory ---


def create_archival_service(
    repo: LoadRepoPort,
    time_port: TimePort | None = None,
    config: ArchivalConfig | None = None,
    event_log: EventLogPort | None = None,
) -> ArchivalService:
    """Create an ArchivalService."""
    return ArchivalService(
        repo=repo, time_port=time_port, config=config, event_log=event_log
    )
