"""
Archival component - Sweep finished loads off the board, purge old ones.
"""

from ._impl import (
    ArchivalConfig,
    ArchivalService,
    archive_record,
    create_archival_service,
    is_eligible_for_archive,
    is_eligible_for_purge,
    select_for_purge,
    sweep,
)
from .component import run, run_manual_archive, run_purge, run_sweep
from .models import (
    ArchivalError,
    ManualArchiveInput,
    ManualArchiveOutput,
    PurgeInput,
    PurgeOutput,
    PurgeReport,
    SweepInput,
    SweepOutput,
    SweepReport,
    SweepResult,
)
from .ports import EventLogPort, LoadRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_sweep",
    "run_purge",
    "run_manual_archive",
    # Input models
    "SweepInput",
    "PurgeInput",
    "ManualArchiveInput",
    # Output models
    "ArchivalError",
    "ManualArchiveOutput",
    "PurgeOutput",
    "PurgeReport",
    "SweepOutput",
    "SweepReport",
    "SweepResult",
    # Ports
    "EventLogPort",
    "LoadRepoPort",
    "TimePort",
    # Core
    "ArchivalConfig",
    "ArchivalService",
    "archive_record",
    "create_archival_service",
    "is_eligible_for_archive",
    "is_eligible_for_purge",
    "select_for_purge",
    "sweep",
]
