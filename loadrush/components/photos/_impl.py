"""
Photo field sanitization.

Functional Core - pure business logic.

Filters run in a fixed order, each narrowing the candidate list:
1. Drop empty entries, trim whitespace
2. Keep https:// only
3. Keep image-looking URLs (extension, optional query) or storage-host URLs
4. Keep URLs of at most max_url_bytes UTF-8 bytes
5. Truncate to max_photos, preserving order

Rejected URLs are dropped silently. Sanitization never raises, so a bad
photo list cannot block an otherwise valid write.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from loadrush.domain.entities import LoadRecord

from .models import SanitizeOutput

logger = logging.getLogger(__name__)

# --- Configuration ---


@dataclass(frozen=True)
class PhotoConfig:
    """Photo field limits from rules."""

    max_photos: int = 20
    max_url_bytes: int = 1024
    max_field_bytes: int = 1_000_000
    storage_host: str = "firebasestorage.googleapis.com"
    image_extensions: tuple[str, ...] = (
        "png",
        "jpg",
        "jpeg",
        "webp",
        "gif",
        "heic",
        "heif",
        "bmp",
        "tif",
        "tiff",
    )


DEFAULT_CONFIG = PhotoConfig()

EMPTY_RESULT = SanitizeOutput(valid=(), total_array_size=0, percent_used=0)


# --- Filters ---


def byte_len(value: str) -> int:
    return len(value.encode("utf-8"))


def _image_pattern(config: PhotoConfig) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(ext) for ext in config.image_extensions)
    return re.compile(rf"\.({alternatives})(\?.*)?$", re.IGNORECASE)


def is_likely_image_url(url: str, config: PhotoConfig = DEFAULT_CONFIG) -> bool:
    """True for URLs ending in an image extension or served by the storage host."""
    if _image_pattern(config).search(url):
        return True
    return re.search(re.escape(config.storage_host), url, re.IGNORECASE) is not None


def serialized_size(urls: Iterable[str]) -> int:
    """UTF-8 byte length of the compact JSON array of urls."""
    return byte_len(json.dumps(list(urls), separators=(",", ":"), ensure_ascii=False))


def percent_of_quota(size: int, config: PhotoConfig = DEFAULT_CONFIG) -> int:
    """Size as a half-up rounded percentage of the field quota, capped at 100."""
    return min(100, math.floor(size / config.max_field_bytes * 100 + 0.5))


def sanitize_photo_urls(
    urls: Iterable[Any] | None,
    config: PhotoConfig = DEFAULT_CONFIG,
) -> SanitizeOutput:
    """Filter candidate photo URLs and report quota usage."""
    try:
        pattern = _image_pattern(config)
        host = re.compile(re.escape(config.storage_host), re.IGNORECASE)

        candidates = [str(u).strip() for u in (urls or []) if u]
        candidates = [u for u in candidates if u.startswith("https://")]
        candidates = [u for u in candidates if pattern.search(u) or host.search(u)]
        candidates = [u for u in candidates if byte_len(u) <= config.max_url_bytes]
        valid = tuple(candidates[: config.max_photos])

        size = serialized_size(valid)
        return SanitizeOutput(
            valid=valid,
            total_array_size=size,
            percent_used=percent_of_quota(size, config),
        )
    except Exception:
        logger.warning("Photo sanitization failed, accepting no photos", exc_info=True)
        return EMPTY_RESULT


def resolve_primary_photo(valid: tuple[str, ...], requested: str | None) -> str:
    """Keep the requested cover if it survived sanitization, else the first photo."""
    if requested and requested in valid:
        return requested
    return valid[0] if valid else ""


def apply_photos(
    load: LoadRecord,
    urls: Iterable[Any] | None,
    primary_photo: str | None = None,
    config: PhotoConfig = DEFAULT_CONFIG,
) -> tuple[LoadRecord, SanitizeOutput]:
    """Return a copy of load carrying only sanitizer-approved photo fields."""
    sanitized = sanitize_photo_urls(urls, config)
    requested = primary_photo if primary_photo is not None else load.primary_photo
    updated = load.model_copy(
        update={
            "photos": list(sanitized.valid),
            "primary_photo": resolve_primary_photo(sanitized.valid, requested),
        }
    )
    return updated, sanitized
