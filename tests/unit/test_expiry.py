"""
Tests for advisory expiry computation.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from loadrush.domain.expiry import (
    compute_expires_at_ms,
    parse_local_wall_time,
    resolve_zone,
)


def _ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


class TestParseLocalWallTime:
    def test_date_only_defaults_to_five_pm(self) -> None:
        assert parse_local_wall_time("2025-09-16") == datetime(2025, 9, 16, 17, 0)

    def test_seconds_and_millis(self) -> None:
        assert parse_local_wall_time("2025-09-16T08:30:15.5") == datetime(
            2025, 9, 16, 8, 30, 15, 500_000
        )

    def test_garbage_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_local_wall_time("next tuesday")


class TestResolveZone:
    def test_unknown_zone_falls_back_to_phoenix(self) -> None:
        assert resolve_zone("Mars/Olympus_Mons").key == "America/Phoenix"

    def test_missing_zone_falls_back_to_phoenix(self) -> None:
        assert resolve_zone(None).key == "America/Phoenix"


class TestComputeExpiresAtMs:
    def test_adds_36_hours_to_local_delivery(self) -> None:
        # 17:00 MST (UTC-7) is midnight UTC the next day
        expected = _ms(datetime(2025, 9, 18, 12, 0, tzinfo=UTC))
        assert compute_expires_at_ms("2025-09-16", "America/Phoenix") == expected

    def test_respects_named_zone(self) -> None:
        # 08:00 EDT (UTC-4) is 12:00 UTC
        expected = _ms(datetime(2025, 9, 18, 0, 0, tzinfo=UTC))
        assert compute_expires_at_ms("2025-09-16T08:00", "America/New_York") == expected

    def test_unparseable_uses_now(self) -> None:
        now = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)
        expected = _ms(datetime(2024, 6, 17, 0, 0, tzinfo=UTC))
        assert compute_expires_at_ms("soon", None, now) == expected

    def test_impossible_date_uses_now(self) -> None:
        now = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)
        assert compute_expires_at_ms("2025-02-30", "UTC", now) == _ms(
            datetime(2024, 6, 17, 0, 0, tzinfo=UTC)
        )

    def test_out_of_range_result_uses_now(self) -> None:
        now = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)
        assert compute_expires_at_ms("9999-12-31", "UTC", now) == _ms(
            datetime(2024, 6, 17, 0, 0, tzinfo=UTC)
        )
