"""Reminder views for the task/reminder feed."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from scoutboard.core.entities.pipeline import parse_date, parse_timestamp
from scoutboard.core.entities.urgency import Urgency

REMINDERS_COLLECTION = "reminders"
PLAYERS_COLLECTION = "player_details"


def player_display_name(record: Mapping[str, Any]) -> str | None:
    """"First Last" of an agency player record, or None when both are blank."""
    name = " ".join(
        str(record.get(part) or "").strip() for part in ("first_name", "last_name")
    ).strip()
    return name or None


class SourceRef(BaseModel):
    """Pointer back to the entity a reminder belongs to (navigation target)."""

    model_config = {"frozen": True}

    kind: str
    id: str
    context: dict[str, str] = Field(default_factory=dict)


class ReminderView(BaseModel):
    """
    A reminder as shown in the feed.

    Either loaded from a stored ``reminders`` row or synthesized from a
    pipeline item carrying an urgency offset. Synthesized reminders have no
    backing row, so their completion state lives only in this object.
    """

    id: str
    title: str
    target_date: date
    completed: bool = False
    completed_at: datetime | None = None
    subtitle: str | None = None
    synthesized: bool = False
    source_ref: SourceRef | None = None
    urgency: Urgency | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> ReminderView | None:
        """Build a view from a stored reminder row, or None if it has no due date."""
        due = parse_date(record.get("due_date"))
        record_id = record.get("id")
        if due is None or record_id is None:
            return None

        source_ref = None
        source_type = record.get("source_type")
        source_id = record.get("source_id")
        if source_type and source_id:
            context = {}
            if record.get("club_name"):
                context["club_name"] = str(record["club_name"])
            source_ref = SourceRef(kind=str(source_type), id=str(source_id), context=context)

        return cls(
            id=str(record_id),
            title=str(record.get("title") or ""),
            target_date=due,
            completed=bool(record.get("completed")),
            completed_at=parse_timestamp(record.get("completed_at")),
            subtitle=record.get("player_name") or None,
            synthesized=False,
            source_ref=source_ref,
        )
