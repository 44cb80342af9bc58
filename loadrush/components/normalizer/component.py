"""
Normalizer component - CSV bulk import to canonical loads.

Handles single-row normalization and batch import into the load store.

Invariants:
- Normalization never raises on malformed row content
- status is always in the configured allow-list
- origin/destination parts and contact fields are strings, never None
- A missing owner id fails fast
"""

from __future__ import annotations

import logging

from loadrush.adapters.clock import SystemClock
from loadrush.rules.models import Rules

from ._impl import ImporterConfig, normalize_row
from .models import (
    ImportOutput,
    ImportRowError,
    ImportRowsInput,
    NormalizeOutput,
    NormalizeRowInput,
)
from .ports import LoadWriterPort, TimePort

logger = logging.getLogger(__name__)


def _build_config(rules: Rules | None) -> ImporterConfig:
    """Build importer config from rules."""
    if rules is None:
        return ImporterConfig()

    return ImporterConfig(
        allowed_statuses=tuple(rules.importer.allowed_statuses),
        default_status=rules.importer.default_status,
    )


# --- Component Entry Points ---


def run_normalize(
    inp: NormalizeRowInput,
    *,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> NormalizeOutput:
    """
    Normalize a single parsed row.

    Raises:
        ValueError: If owner_id is missing.
    """
    clock = time_port or SystemClock()
    load = normalize_row(inp.row, inp.owner_id, clock.now_utc(), _build_config(rules))
    return NormalizeOutput(load=load)


def run_import(
    inp: ImportRowsInput,
    *,
    repo: LoadWriterPort,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> ImportOutput:
    """
    Normalize and persist a batch of parsed rows.

    Rows whose save fails are reported in errors and excluded from the
    imported count; the batch continues.

    Raises:
        ValueError: If owner_id is missing.
    """
    if not inp.owner_id or not inp.owner_id.strip():
        raise ValueError("owner_id is required to import rows")

    clock = time_port or SystemClock()
    config = _build_config(rules)

    load_ids: list[str] = []
    errors: list[ImportRowError] = []

    for index, row in enumerate(inp.rows):
        load = normalize_row(row, inp.owner_id, clock.now_utc(), config)
        try:
            saved = repo.save(load)
        except Exception as e:
            logger.exception("Import of row %d failed", index)
            errors.append(
                ImportRowError(index=index, code="save_failed", message=str(e))
            )
            continue
        load_ids.append(saved.id)

    logger.info("Imported %d of %d rows for %s", len(load_ids), len(inp.rows), inp.owner_id)

    return ImportOutput(
        imported=len(load_ids),
        load_ids=tuple(load_ids),
        errors=errors,
        success=len(errors) == 0,
    )


def run(
    inp: NormalizeRowInput | ImportRowsInput,
    *,
    repo: LoadWriterPort | None = None,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> NormalizeOutput | ImportOutput:
    """
    Main entry point for the normalizer component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, NormalizeRowInput):
        return run_normalize(inp, time_port=time_port, rules=rules)
    elif isinstance(inp, ImportRowsInput):
        if repo is None:
            raise ValueError("LoadWriterPort is required for import operations")
        return run_import(inp, repo=repo, time_port=time_port, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
