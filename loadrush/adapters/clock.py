from datetime import UTC, datetime, timedelta


def to_epoch_ms(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)

    def now_ms(self) -> int:
        return to_epoch_ms(self.now_utc())


class FrozenClock:
    """
    Clock that returns a fixed time.

    Useful for deterministic testing of time windows.
    """

    def __init__(self, frozen_utc: datetime) -> None:
        if frozen_utc.tzinfo is None:
            frozen_utc = frozen_utc.replace(tzinfo=UTC)
        self._frozen_utc = frozen_utc.astimezone(UTC)

    def now_utc(self) -> datetime:
        return self._frozen_utc

    def now_ms(self) -> int:
        return to_epoch_ms(self._frozen_utc)

    def advance(self, delta: timedelta) -> None:
        """Advance frozen time by delta."""
        self._frozen_utc = self._frozen_utc + delta
