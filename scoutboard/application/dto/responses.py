"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class StageResponse(BaseModel):
    """Stage of a pipeline."""

    id: str = Field(..., description="Stage id")
    label: str = Field(..., description="Display label")
    sort_weight: int = Field(..., description="Column order")
    color_hint: str = Field(..., description="Suggested color")
    description: str = Field(default="", description="What the stage means")


class UrgencyResponse(BaseModel):
    """Classified urgency of an item."""

    kind: str = Field(..., description="overdue, today or upcoming")
    days: int = Field(..., description="Positive magnitude (0 for today)")
    label: str = Field(..., description="Display text, e.g. 'in 3 Tagen'")


class PipelineItemResponse(BaseModel):
    """Pipeline item with derived urgency."""

    id: str = Field(..., description="Item id")
    kind: str = Field(..., description="Pipeline kind")
    stage: str = Field(..., description="Current stage id")
    created_at: datetime | None = Field(default=None, description="Urgency anchor")
    updated_at: datetime | None = Field(default=None, description="Last update")
    urgency_offset_days: int | None = Field(default=None, description="Follow-up offset")
    due_date: date | None = Field(default=None, description="Explicit due date (tasks)")
    target_date: date | None = Field(default=None, description="Derived target date")
    urgency: UrgencyResponse | None = Field(default=None, description="Classification")
    completed: bool = Field(default=False, description="Completion state")
    completed_at: datetime | None = Field(default=None, description="Completion time")
    archived: bool = Field(default=False, description="Archived (scouting)")
    title: str = Field(default="", description="Display name used for ordering")
    owner_id: str | None = Field(default=None, description="Authoring advisor")
    record: dict[str, Any] = Field(default_factory=dict, description="Raw record fields")


class BoardColumnResponse(BaseModel):
    """One stage column with its ordered items."""

    stage: StageResponse
    items: list[PipelineItemResponse] = Field(default_factory=list)
    count: int = Field(default=0, description="Number of items in the column")


class MigrationReportResponse(BaseModel):
    """Outcome of a legacy status migration pass."""

    scanned: int = 0
    migrated: int = 0
    failed: int = 0
    failed_ids: list[str] = Field(default_factory=list)


class BoardResponse(BaseModel):
    """Projected board."""

    kind: str = Field(..., description="Pipeline kind")
    columns: list[BoardColumnResponse] = Field(default_factory=list)
    archived: list[PipelineItemResponse] = Field(default_factory=list)
    completed: list[PipelineItemResponse] = Field(default_factory=list)
    facets: dict[str, list[str]] = Field(default_factory=dict)
    migration: MigrationReportResponse | None = None
    total: int = Field(default=0, description="Items matching the filter")


class SourceRefResponse(BaseModel):
    """Navigation target of a reminder."""

    kind: str
    id: str
    context: dict[str, str] = Field(default_factory=dict)


class ReminderResponse(BaseModel):
    """Reminder in the feed."""

    id: str = Field(..., description="Reminder id ('transfer-<id>' when synthesized)")
    title: str
    target_date: date
    completed: bool = False
    completed_at: datetime | None = None
    subtitle: str | None = None
    synthesized: bool = False
    source_ref: SourceRefResponse | None = None
    urgency: UrgencyResponse | None = None


class ReminderFeedResponse(BaseModel):
    """Merged reminder feed."""

    due_now: list[ReminderResponse] = Field(default_factory=list)
    upcoming: list[ReminderResponse] = Field(default_factory=list)
    completed: list[ReminderResponse] = Field(default_factory=list)
    total: int = Field(default=0, description="Stored plus synthesized reminders")


class ToggleReminderResponse(BaseModel):
    """Toggled reminder."""

    reminder: ReminderResponse
    persisted: bool = Field(
        ..., description="False for synthesized reminders (state is not stored)"
    )


class AgentRefreshResponse(BaseModel):
    """Result of an agent refresh."""

    item_id: str
    refreshed: bool
    agent_name: str | None = None
    agent_updated_at: datetime | None = None


class ProviderHealthResponse(BaseModel):
    """Dependency health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    schema_version: str | None = Field(default=None, description="Latest applied migration")
    pending_migrations: list[str] = Field(default_factory=list)
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="healthy, degraded or unhealthy")
    version: str
    uptime_seconds: float
    timezone: str = Field(..., description="Board timezone")
    today: date = Field(..., description="\"Today\" as used for urgency")
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. RECORD_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
