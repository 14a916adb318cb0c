"""Urgency classification derived from a target date."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class UrgencyKind(str, Enum):
    """Three-way temporal state of an item with a target date."""

    OVERDUE = "overdue"
    TODAY = "today"
    UPCOMING = "upcoming"


class Urgency(BaseModel):
    """
    Classified urgency.

    ``days`` is always a non-negative magnitude; callers never take
    ``abs`` themselves. Use ``signed_days`` for ordering.
    """

    model_config = {"frozen": True}

    kind: UrgencyKind
    days: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_magnitude(self) -> "Urgency":
        if self.kind == UrgencyKind.TODAY and self.days != 0:
            raise ValueError("Today urgency has no day magnitude")
        if self.kind != UrgencyKind.TODAY and self.days == 0:
            raise ValueError(f"{self.kind.value} urgency needs a positive day count")
        return self

    @classmethod
    def overdue(cls, days: int) -> "Urgency":
        return cls(kind=UrgencyKind.OVERDUE, days=days)

    @classmethod
    def today(cls) -> "Urgency":
        return cls(kind=UrgencyKind.TODAY)

    @classmethod
    def upcoming(cls, days: int) -> "Urgency":
        return cls(kind=UrgencyKind.UPCOMING, days=days)

    @property
    def signed_days(self) -> int:
        if self.kind == UrgencyKind.OVERDUE:
            return -self.days
        return self.days

    @property
    def is_due(self) -> bool:
        """Overdue or due today."""
        return self.kind != UrgencyKind.UPCOMING

    @property
    def label(self) -> str:
        if self.kind == UrgencyKind.TODAY:
            return "Heute"
        if self.kind == UrgencyKind.OVERDUE:
            return f"vor {self.days} {'Tag' if self.days == 1 else 'Tagen'}"
        if self.days == 1:
            return "Morgen"
        return f"in {self.days} Tagen"
