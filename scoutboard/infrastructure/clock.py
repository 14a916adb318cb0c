"""Clock implementations."""

from datetime import UTC, datetime, timedelta

from scoutboard.core.interfaces.clock import IClock


class SystemClock(IClock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock(IClock):
    """Clock frozen at a given instant; naive instants are taken as UTC."""

    def __init__(self, instant: datetime):
        self._instant = instant if instant.tzinfo else instant.replace(tzinfo=UTC)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant if instant.tzinfo else instant.replace(tzinfo=UTC)

    def advance(self, **delta: float) -> None:
        """Move forward, e.g. ``advance(days=1)``."""
        self._instant += timedelta(**delta)
