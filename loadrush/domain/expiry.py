"""
Advisory expiry computation for loads.

expiresAtMs is metadata written alongside a load when the client supplies a
naive local delivery time plus an IANA zone. It is never an archival
trigger; the archival sweep decides on status and deliveryDate alone.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

EXPIRY_GRACE = timedelta(hours=36)
FALLBACK_TZ = "America/Phoenix"
DEFAULT_DELIVERY_TIME = "T17:00"

_LOCAL_ISO = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2})(?::(\d{2}))?(?:\.(\d{1,3}))?"
)
_HAS_TIME = re.compile(r"T\d{2}:\d{2}")


def resolve_zone(tz_name: str | None) -> ZoneInfo:
    """Return the named zone, or the fallback zone when it is unknown."""
    if tz_name:
        try:
            return ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("Unknown delivery zone %r, using %s", tz_name, FALLBACK_TZ)
    return ZoneInfo(FALLBACK_TZ)


def parse_local_wall_time(delivery_local: str) -> datetime:
    """
    Parse a naive local ISO date-time ("2025-09-16T08:30", "2025-09-16").

    Date-only values are taken at 17:00 local.

    Raises:
        ValueError: If the value is not a local ISO timestamp.
    """
    raw = str(delivery_local).strip()
    normalized = raw if _HAS_TIME.search(raw) else f"{raw}{DEFAULT_DELIVERY_TIME}"
    match = _LOCAL_ISO.match(normalized)
    if not match:
        raise ValueError(f"invalid local delivery time: {delivery_local!r}")

    year, month, day, hour, minute = (int(match.group(i)) for i in range(1, 6))
    second = int(match.group(6) or 0)
    millis = int((match.group(7) or "0").ljust(3, "0"))
    return datetime(year, month, day, hour, minute, second, millis * 1000)


def compute_expires_at_ms(
    delivery_local: str,
    tz_name: str | None,
    now: datetime | None = None,
) -> int:
    """
    Compute epoch millis 36 hours after the local delivery wall time.

    Unparseable input degrades to now + 36 hours.
    """
    try:
        wall = parse_local_wall_time(delivery_local)
        # fold=0 picks the first occurrence of an ambiguous wall time
        local = wall.replace(tzinfo=resolve_zone(tz_name))
        expires = local.astimezone(UTC) + EXPIRY_GRACE
    except (ValueError, OverflowError):
        logger.info("Could not compute expiry for %r, using now + 36h", delivery_local)
        expires = (now or datetime.now(UTC)) + EXPIRY_GRACE
    return int(expires.timestamp() * 1000)
