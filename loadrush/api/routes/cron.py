"""
Cron API - Scheduled load board maintenance.

Both endpoints require the x-cron-secret header.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from loadrush.adapters.sqlite.repos import SQLiteLoadRepo
from loadrush.api.deps import (
    get_clock,
    get_event_log,
    get_load_repo,
    get_rules,
    require_cron_secret,
)
from loadrush.components.archival import PurgeInput, SweepInput, run_purge, run_sweep
from loadrush.ports.clock import TimePort
from loadrush.rules.models import Rules
from loadrush.services.event_log import EventLog

router = APIRouter(dependencies=[Depends(require_cron_secret)])


# --- Response Models ---


class SweepResponse(BaseModel):
    ok: bool
    scanned: int
    archived: int


class PurgeResponse(BaseModel):
    ok: bool
    scanned: int
    purged: int


# --- Endpoints ---


@router.post("/archive-loads", response_model=SweepResponse)
def archive_loads(
    repo: SQLiteLoadRepo = Depends(get_load_repo),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
    event_log: EventLog = Depends(get_event_log),
) -> SweepResponse:
    """Archive completed loads delivered more than the window ago."""
    out = run_sweep(
        SweepInput(), repo=repo, time_port=clock, rules=rules, event_log=event_log
    )
    return SweepResponse(ok=True, scanned=out.report.scanned, archived=out.report.archived)


@router.post("/purge-loads", response_model=PurgeResponse)
def purge_loads(
    days: int | None = Query(default=None, ge=0),
    reason: str | None = Query(default=None),
    repo: SQLiteLoadRepo = Depends(get_load_repo),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
    event_log: EventLog = Depends(get_event_log),
) -> PurgeResponse:
    """Delete loads archived more than `days` ago (rules default when omitted)."""
    out = run_purge(
        PurgeInput(older_than_days=days, archived_reason=reason),
        repo=repo,
        time_port=clock,
        rules=rules,
        event_log=event_log,
    )
    return PurgeResponse(ok=True, scanned=out.report.scanned, purged=out.report.purged)
