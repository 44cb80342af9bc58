"""
Photos component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loadrush.domain.entities import LoadRecord

# --- Validation Error ---


@dataclass(frozen=True)
class PhotoValidationError:
    """Photo update error."""

    code: str
    message: str
    load_id: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class SanitizePhotosInput:
    """Input for sanitizing candidate photo URLs."""

    urls: tuple[str, ...]


@dataclass(frozen=True)
class UpdatePhotosInput:
    """Input for replacing a load's photo fields."""

    load_id: str
    photos: tuple[str, ...]
    primary_photo: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class SanitizeOutput:
    """Accepted URLs and quota usage of the serialized field."""

    valid: tuple[str, ...]
    total_array_size: int
    percent_used: int


@dataclass(frozen=True)
class UpdatePhotosOutput:
    """Output for photo update operation."""

    load: LoadRecord | None
    sanitized: SanitizeOutput | None
    errors: list[PhotoValidationError] = field(default_factory=list)
    success: bool = True
