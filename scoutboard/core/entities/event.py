"""Board events published after mutations and refresh requests."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from scoutboard.core.entities.pipeline import PipelineKind


class BoardEventType(str, Enum):
    """What happened on a board."""

    STAGE_CHANGED = "stage_changed"
    COMPLETION_TOGGLED = "completion_toggled"
    URGENCY_CHANGED = "urgency_changed"
    ARCHIVED = "archived"
    RESTORED = "restored"
    DELETED = "deleted"
    CREATED = "created"
    MIGRATED = "migrated"
    REFRESH_REQUESTED = "refresh_requested"


class BoardEvent(BaseModel):
    """A notification delivered to board listeners."""

    type: BoardEventType
    kind: PipelineKind | None = None
    item_id: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
