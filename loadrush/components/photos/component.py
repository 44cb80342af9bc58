"""
Photos component - Photo field validation before persistence.

Invariants:
- Persisted photos only ever contain sanitizer-approved URLs
- primaryPhoto is one of photos, or empty
- At most max_photos URLs, in submitted order
"""

from __future__ import annotations

from loadrush.rules.models import Rules

from ._impl import PhotoConfig, apply_photos, sanitize_photo_urls
from .models import (
    PhotoValidationError,
    SanitizeOutput,
    SanitizePhotosInput,
    UpdatePhotosInput,
    UpdatePhotosOutput,
)
from .ports import LoadRepoPort


def _build_config(rules: Rules | None) -> PhotoConfig:
    """Build photo config from rules."""
    if rules is None:
        return PhotoConfig()

    photos = rules.photos
    return PhotoConfig(
        max_photos=photos.max_photos,
        max_url_bytes=photos.max_url_bytes,
        max_field_bytes=photos.max_field_bytes,
        storage_host=photos.storage_host,
        image_extensions=tuple(photos.image_extensions),
    )


# --- Component Entry Points ---


def run_sanitize(
    inp: SanitizePhotosInput,
    *,
    rules: Rules | None = None,
) -> SanitizeOutput:
    """Sanitize candidate photo URLs."""
    return sanitize_photo_urls(inp.urls, _build_config(rules))


def run_update_photos(
    inp: UpdatePhotosInput,
    *,
    repo: LoadRepoPort,
    rules: Rules | None = None,
) -> UpdatePhotosOutput:
    """
    Sanitize and persist a load's photos.

    Args:
        inp: Load id, candidate URLs and requested cover photo.
        repo: Load repository port.
        rules: Optional rules for photo limits.

    Returns:
        UpdatePhotosOutput with the saved load or a not-found error.
    """
    load = repo.get_by_id(inp.load_id)
    if load is None:
        return UpdatePhotosOutput(
            load=None,
            sanitized=None,
            errors=[
                PhotoValidationError(
                    code="load_not_found",
                    message=f"Load {inp.load_id} not found",
                    load_id=inp.load_id,
                )
            ],
            success=False,
        )

    updated, sanitized = apply_photos(
        load, inp.photos, inp.primary_photo, _build_config(rules)
    )
    saved = repo.save(updated)

    return UpdatePhotosOutput(load=saved, sanitized=sanitized)


def run(
    inp: SanitizePhotosInput | UpdatePhotosInput,
    *,
    repo: LoadRepoPort | None = None,
    rules: Rules | None = None,
) -> SanitizeOutput | UpdatePhotosOutput:
    """
    Main entry point for the photos component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, SanitizePhotosInput):
        return run_sanitize(inp, rules=rules)
    elif isinstance(inp, UpdatePhotosInput):
        if repo is None:
            raise ValueError("LoadRepoPort is required for update operations")
        return run_update_photos(inp, repo=repo, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
