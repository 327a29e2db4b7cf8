"""Wall-clock sources used by the restriction guard."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


class SystemClock:
    """Reads the current UTC time."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """Manually advanced clock for tests and replays.

    Examples:
        >>> from datetime import UTC
        >>> clock = FrozenClock(datetime(2025, 1, 1, tzinfo=UTC))
        >>> clock.advance(seconds=5).second
        5
    """

    def __init__(self, start: datetime) -> None:
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, **delta: float) -> datetime:
        self._now = self._now + timedelta(**delta)
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment
