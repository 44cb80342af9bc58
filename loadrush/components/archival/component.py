"""
Archival component - Load board cleanup.

Invariants:
- Only completed (or already archived) loads delivered more than the window
  ago are swept; other statuses are never archived by age
- Sweeps are idempotent: a second sweep at the same instant archives nothing
- Purge only ever deletes archived loads
"""

from __future__ import annotations

from loadrush.rules.models import Rules

from ._impl import ArchivalConfig, ArchivalService
from .models import (
    ManualArchiveInput,
    ManualArchiveOutput,
    PurgeInput,
    PurgeOutput,
    SweepInput,
    SweepOutput,
)
from .ports import EventLogPort, LoadRepoPort, TimePort


def _build_config(rules: Rules | None) -> ArchivalConfig:
    """Build archival config from rules."""
    if rules is None:
        return ArchivalConfig()

    archival = rules.archival
    return ArchivalConfig(
        window_days=archival.window_days,
        eligible_statuses=tuple(archival.eligible_statuses),
        batch_limit=archival.batch_limit,
        purge_default_days=archival.purge_default_days,
    )


def _service(
    repo: LoadRepoPort,
    time_port: TimePort | None,
    rules: Rules | None,
    event_log: EventLogPort | None,
) -> ArchivalService:
    return ArchivalService(
        repo=repo,
        time_port=time_port,
        config=_build_config(rules),
        event_log=event_log,
    )


# --- Component Entry Points ---


def run_sweep(
    inp: SweepInput,
    *,
    repo: LoadRepoPort,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
    event_log: EventLogPort | None = None,
) -> SweepOutput:
    """
    Archive eligible loads.

    Args:
        inp: Optional batch limit.
        repo: Load repository port.
        time_port: Clock; system time if omitted.
        rules: Optional rules for window, statuses and batch limit.
        event_log: Optional sink for the sweep outcome.

    Returns:
        SweepOutput with scanned/archived counts.
    """
    return _service(repo, time_port, rules, event_log).sweep(inp.limit)


def run_purge(
    inp: PurgeInput,
    *,
    repo: LoadRepoPort,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
    event_log: EventLogPort | None = None,
) -> PurgeOutput:
    """
    Delete loads archived more than older_than_days ago.

    Raises:
        ValueError: If older_than_days is negative.
    """
    return _service(repo, time_port, rules, event_log).purge(
        older_than_days=inp.older_than_days,
        archived_reason=inp.archived_reason,
        limit=inp.limit,
    )


def run_manual_archive(
    inp: ManualArchiveInput,
    *,
    repo: LoadRepoPort,
    time_port: TimePort | None = None,
    event_log: EventLogPort | None = None,
) -> ManualArchiveOutput:
    """Archive a single load on request."""
    return _service(repo, time_port, None, event_log).manual_archive(
        inp.load_id, inp.reason
    )


def run(
    inp: SweepInput | PurgeInput | ManualArchiveInput,
    *,
    repo: LoadRepoPort,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
    event_log: EventLogPort | None = None,
) -> SweepOutput | PurgeOutput | ManualArchiveOutput:
    """
    Main entry point for the archival component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, SweepInput):
        return run_sweep(
            inp, repo=repo, time_port=time_port, rules=rules, event_log=event_log
        )
    elif isinstance(inp, PurgeInput):
        return run_purge(
            inp, repo=repo, time_port=time_port, rules=rules, event_log=event_log
        )
    elif isinstance(inp, ManualArchiveInput):
        return run_manual_archive(
            inp, repo=repo, time_port=time_port, event_log=event_log
        )
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
