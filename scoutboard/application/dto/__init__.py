"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from scoutboard.application.dto.requests import (
    ArchiveRequest,
    CreateItemRequest,
    CreateReminderRequest,
    TransitionRequest,
    UrgencyRequest,
)
from scoutboard.application.dto.responses import (
    AgentRefreshResponse,
    BoardColumnResponse,
    BoardResponse,
    ErrorResponse,
    HealthResponse,
    MigrationReportResponse,
    PipelineItemResponse,
    ProviderHealthResponse,
    ReminderFeedResponse,
    ReminderResponse,
    SourceRefResponse,
    StageResponse,
    ToggleReminderResponse,
    UrgencyResponse,
)

__all__ = [
    # Requests
    "TransitionRequest",
    "UrgencyRequest",
    "ArchiveRequest",
    "CreateItemRequest",
    "CreateReminderRequest",
    # Responses
    "StageResponse",
    "UrgencyResponse",
    "PipelineItemResponse",
    "BoardColumnResponse",
    "BoardResponse",
    "MigrationReportResponse",
    "SourceRefResponse",
    "ReminderResponse",
    "ReminderFeedResponse",
    "ToggleReminderResponse",
    "AgentRefreshResponse",
    "ProviderHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
