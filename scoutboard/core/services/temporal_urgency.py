"""
Temporal urgency: calendar-day offsets and their classification.

All functions are pure. "Today" is always passed in by the caller, which
takes it from an injected clock.
"""

from datetime import date, datetime, timedelta, tzinfo

from scoutboard.core.entities.pipeline import PipelineItem, parse_timestamp
from scoutboard.core.entities.urgency import Urgency

__all__ = [
    "days_until",
    "classify",
    "local_date",
    "target_date",
    "urgency_for",
    "parse_timestamp",
]


def local_date(value: date | datetime, tz: tzinfo | None = None) -> date:
    """
    Reduce a date or datetime to a calendar date.

    Aware datetimes are converted into ``tz`` first; naive datetimes keep
    their wall-clock date.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def days_until(
    target: date | datetime,
    today: date | datetime,
    tz: tzinfo | None = None,
) -> int:
    """
    Calendar days from ``today`` to ``target``.

    Both sides are normalized to local calendar dates before subtracting, so
    a target later on the same day is 0 and a target at 00:01 tomorrow is 1.
    """
    return (local_date(target, tz) - local_date(today, tz)).days


def classify(days: int | None) -> Urgency:
    """
    Classify a days-until value.

    Raises:
        ValueError: If ``days`` is None. Items without urgency must not be
            classified.
    """
    if days is None:
        raise ValueError("Cannot classify an item without urgency")
    if days < 0:
        return Urgency.overdue(-days)
    if days == 0:
        return Urgency.today()
    return Urgency.upcoming(days)


def target_date(created_at: datetime, offset_days: int, tz: tzinfo | None = None) -> date:
    """Local calendar date of ``created_at`` plus ``offset_days`` calendar days."""
    if offset_days < 0:
        raise ValueError(f"Negative urgency offset: {offset_days}")
    return local_date(created_at, tz) + timedelta(days=offset_days)


def item_target_date(item: PipelineItem, tz: tzinfo | None = None) -> date | None:
    """Target date of an item, or None when it carries no urgency.

    An explicit due date wins over ``created_at + offset``.
    """
    if item.due_date is not None:
        return item.due_date
    if item.urgency_offset_days is None or item.created_at is None:
        return None
    return target_date(item.created_at, item.urgency_offset_days, tz)


def urgency_for(
    item: PipelineItem,
    today: date | datetime,
    tz: tzinfo | None = None,
) -> Urgency | None:
    """Classified urgency of an item, or None if it is unclassified."""
    target = item_target_date(item, tz)
    if target is None:
        return None
    return classify(days_until(target, today, tz))
