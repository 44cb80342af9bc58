"""
Row normalization - Parsed import rows to canonical LoadRecords.

Functional Core - pure business logic.

Key behaviors:
- Each canonical field resolves through an ordered FieldChain of source keys
- Numbers keep only digits and '.', anything unparseable becomes 0
- Dates go through a permissive parser; failures leave the field unset
- Status is restricted to an allow-list, defaulting to "active"
- Text and contact fields are always strings, never None
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from email.utils import parsedate_to_datetime
from typing import Any

from loadrush.domain.entities import LoadRecord, Location
from loadrush.domain.expiry import compute_expires_at_ms

from .models import FieldChain

# --- Configuration ---


@dataclass(frozen=True)
class ImporterConfig:
    """Importer configuration from rules."""

    allowed_statuses: tuple[str, ...] = ("active", "draft", "archived")
    default_status: str = "active"


DEFAULT_CONFIG = ImporterConfig()


# --- Resolution Table ---


FIELD_CHAINS: dict[str, FieldChain] = {
    chain.target: chain
    for chain in (
        FieldChain("rate", ("rate", "rateTotalUSD"), "number"),
        FieldChain("status", ("status",)),
        FieldChain("origin.city", ("originCity", "pickupCity")),
        FieldChain("origin.state", ("originState", "pickupState")),
        FieldChain("origin.zip", ("originZip", "pickupZip")),
        FieldChain("destination.city", ("destCity", "dropoffCity")),
        FieldChain("destination.state", ("destState", "dropoffState")),
        FieldChain("destination.zip", ("destZip", "dropoffZip")),
        FieldChain("pickup_date", ("pickupDate",), "date"),
        FieldChain("delivery_date", ("deliveryDate",), "date"),
        FieldChain("weight_lbs", ("weight",), "number"),
        FieldChain("distance_miles", ("distanceMiles", "miles"), "number"),
        FieldChain("equipment_type", ("equipmentType", "truckType")),
        FieldChain("title", ("title",)),
        FieldChain("description", ("description",)),
        FieldChain("contact_name", ("contactName",)),
        FieldChain("contact_email", ("contactEmail",)),
        FieldChain("contact_phone", ("contactPhone",)),
        FieldChain("delivery_date_local", ("deliveryDateLocal",)),
        FieldChain("delivery_tz", ("deliveryTZ",)),
    )
}


def resolve(row: Mapping[str, Any], target: str) -> Any:
    """Return the first truthy source value for target, or None."""
    for key in FIELD_CHAINS[target].sources:
        value = row.get(key)
        if value:
            return value
    return None


def resolve_present(row: Mapping[str, Any], target: str) -> Any:
    """Return the first source value that is neither None nor empty, or None."""
    for key in FIELD_CHAINS[target].sources:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def resolve_field(row: Mapping[str, Any], target: str) -> Any:
    """Resolve target and coerce it according to its chain kind."""
    chain = FIELD_CHAINS[target]
    value = resolve(row, target)
    if chain.kind == "number":
        return to_number(value)
    if chain.kind == "date":
        return parse_date(value)
    return "" if value is None else str(value)


# --- Value Parsing ---


_NON_NUMERIC = re.compile(r"[^\d.]")


def to_number(value: Any) -> float:
    """
    Parse a loosely formatted number ("$1,200.50" -> 1200.5).

    Strips everything except digits and the decimal point. Empty or
    unparseable remainders ("", ".", "1.2.3") yield 0.
    """
    if value is None:
        return 0.0
    cleaned = _NON_NUMERIC.sub("", str(value))
    if not cleaned:
        return 0.0
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


_DATE_FORMATS = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


def _as_utc(dt: datetime) -> datetime | None:
    """Convert to UTC; None when the shift leaves the supported date range."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    try:
        return dt.astimezone(UTC)
    except OverflowError:
        return None


def parse_date(value: Any) -> datetime | None:
    """
    Parse a date the way a permissive client-side parser would.

    Accepts datetimes, dates, epoch millis, ISO 8601 (including a trailing
    Z), RFC 2822 and common US formats. Naive results are taken as UTC.
    Returns None when nothing matches.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if not text:
        return None

    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    try:
        return _as_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        return None


def normalize_status(value: Any, config: ImporterConfig = DEFAULT_CONFIG) -> str:
    """Lower-case status restricted to the allow-list."""
    status = str(value or config.default_status).strip().lower()
    return status if status in config.allowed_statuses else config.default_status


def _format_rate(rate: float) -> str:
    return str(int(rate)) if rate.is_integer() else str(rate)


def fallback_title(equipment_type: str | None, rate: float) -> str:
    """Synthesize "<equipment> <rate>", omitting the rate clause when zero."""
    rate_clause = _format_rate(rate) if rate else ""
    return f"{equipment_type or 'Load'} {rate_clause}".strip()


# --- Normalization ---


def normalize_row(
    row: Mapping[str, Any],
    owner_id: str,
    now: datetime,
    config: ImporterConfig = DEFAULT_CONFIG,
) -> LoadRecord:
    """
    Convert a parsed row into a canonical LoadRecord.

    Never raises for malformed row content.

    Raises:
        ValueError: If owner_id is missing or blank.
    """
    if not owner_id or not str(owner_id).strip():
        raise ValueError("owner_id is required to normalize a row")

    if not isinstance(row, Mapping):
        row = {}

    rate = resolve_field(row, "rate")

    raw_weight = resolve_present(row, "weight_lbs")
    weight_lbs = to_number(raw_weight) if raw_weight is not None else None

    raw_miles = resolve_present(row, "distance_miles")
    distance_miles = to_number(raw_miles) if raw_miles is not None else None

    equipment = resolve(row, "equipment_type")
    equipment_type = str(equipment) if equipment is not None else None

    title = resolve_field(row, "title") or fallback_title(equipment_type, rate)

    delivery_local = resolve(row, "delivery_date_local")
    delivery_tz = resolve(row, "delivery_tz")
    expires_at_ms = None
    if delivery_local:
        expires_at_ms = compute_expires_at_ms(
            str(delivery_local), str(delivery_tz) if delivery_tz else None, now
        )

    return LoadRecord(
        created_by=owner_id,
        shipper_id=owner_id,
        status=normalize_status(resolve(row, "status"), config),
        created_at=now,
        pickup_date=resolve_field(row, "pickup_date"),
        delivery_date=resolve_field(row, "delivery_date"),
        delivery_date_local=str(delivery_local) if delivery_local else None,
        delivery_tz=str(delivery_tz) if delivery_tz else None,
        rate=rate,
        distance_miles=distance_miles,
        weight_lbs=weight_lbs,
        equipment_type=equipment_type,
        origin=Location(
            city=resolve_field(row, "origin.city"),
            state=resolve_field(row, "origin.state"),
            zip=resolve_field(row, "origin.zip"),
        ),
        destination=Location(
            city=resolve_field(row, "destination.city"),
            state=resolve_field(row, "destination.state"),
            zip=resolve_field(row, "destination.zip"),
        ),
        title=title,
        description=resolve_field(row, "description"),
        contact_name=resolve_field(row, "contact_name"),
        contact_email=resolve_field(row, "contact_email"),
        contact_phone=resolve_field(row, "contact_phone"),
        expires_at_ms=expires_at_ms,
    )
