"""Abstract clock so "now" and "today" are always injected."""

from abc import ABC, abstractmethod
from datetime import date, datetime, tzinfo


class IClock(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as an aware datetime."""
        pass

    def today(self, tz: tzinfo) -> date:
        """Current calendar date in ``tz``."""
        return self.now().astimezone(tz).date()
