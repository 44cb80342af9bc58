"""
Normalizer component input/output models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from loadrush.domain.entities import LoadRecord

# --- Field Resolution ---


FieldKind = Literal["text", "number", "date"]


@dataclass(frozen=True)
class FieldChain:
    """Ordered source keys for one canonical field; the first truthy value wins."""

    target: str
    sources: tuple[str, ...]
    kind: FieldKind = "text"


# --- Validation Error ---


@dataclass(frozen=True)
class ImportRowError:
    """A row that could not be imported."""

    index: int
    code: str
    message: str


# --- Input Models ---


@dataclass(frozen=True)
class NormalizeRowInput:
    """Input for normalizing a single parsed row."""

    row: Mapping[str, Any]
    owner_id: str


@dataclass(frozen=True)
class ImportRowsInput:
    """Input for normalizing and persisting a batch of parsed rows."""

    rows: tuple[Mapping[str, Any], ...]
    owner_id: str


# --- Output Models ---


@dataclass(frozen=True)
class NormalizeOutput:
    """Output for normalize operation."""

    load: LoadRecord


@dataclass(frozen=True)
class ImportOutput:
    """Output for batch import."""

    imported: int
    load_ids: tuple[str, ...]
    errors: list[ImportRowError] = field(default_factory=list)
    success: bool = True
