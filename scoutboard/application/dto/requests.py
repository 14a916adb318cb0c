"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field


class TransitionRequest(BaseModel):
    """Move an item to another stage (drag and drop or explicit action)."""

    stage: str = Field(
        ...,
        min_length=1,
        description="Target stage id",
        examples=["in_beobachtung", "offen", "high"],
    )


class UrgencyRequest(BaseModel):
    """Set or clear the follow-up offset of an item."""

    days: int | None = Field(
        default=None,
        description="Days after now until the item is due; null or negative clears it",
        examples=[30, 7, None],
    )


class ArchiveRequest(BaseModel):
    """Archive a scouted player."""

    reason: str | None = Field(
        default=None,
        max_length=500,
        description="Why the player was archived",
        examples=["Vertrag verlängert"],
    )


class CreateItemRequest(BaseModel):
    """Create a pipeline item from raw fields.

    The stage defaults to the pipeline's default stage.
    """

    data: dict[str, Any] = Field(
        ...,
        description="Record fields, e.g. first_name/last_name/club for scouting",
    )


class CreateReminderRequest(BaseModel):
    """Store a reminder."""

    title: str = Field(..., min_length=1, max_length=300, description="Reminder title")
    due_date: date = Field(..., description="Due date (YYYY-MM-DD)")
    user_id: str | None = Field(default=None, description="Owning advisor")
    source_type: str | None = Field(
        default=None,
        description="Kind of the entity the reminder belongs to",
        examples=["player", "transfer"],
    )
    source_id: str | None = Field(default=None, description="Id of that entity")
    player_name: str | None = Field(default=None, description="Player shown as subtitle")
    club_name: str | None = Field(default=None, description="Club to highlight")
