"""
Photos component - Photo URL sanitization and quota checks.
"""

from ._impl import (
    PhotoConfig,
    apply_photos,
    byte_len,
    is_likely_image_url,
    percent_of_quota,
    resolve_primary_photo,
    sanitize_photo_urls,
    serialized_size,
)
from .component import run, run_sanitize, run_update_photos
from .models import (
    PhotoValidationError,
    SanitizeOutput,
    SanitizePhotosInput,
    UpdatePhotosInput,
    UpdatePhotosOutput,
)
from .ports import LoadRepoPort

__all__ = [
    # Entry points
    "run",
    "run_sanitize",
    "run_update_photos",
    # Input models
    "SanitizePhotosInput",
    "UpdatePhotosInput",
    # Output models
    "PhotoValidationError",
    "SanitizeOutput",
    "UpdatePhotosOutput",
    # Ports
    "LoadRepoPort",
    # Functional core
    "PhotoConfig",
    "apply_photos",
    "byte_len",
    "is_likely_image_url",
    "percent_of_quota",
    "resolve_primary_photo",
    "sanitize_photo_urls",
    "serialized_size",
]
