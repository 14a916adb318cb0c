"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from scoutboard.application.services import (
    get_agent_enrichment_service,
    get_event_channel,
    get_pipeline_board,
    get_reminder_projector,
    get_stage_registry,
    get_transition_controller,
    reset_services,
)

__all__ = [
    "get_stage_registry",
    "get_event_channel",
    "get_pipeline_board",
    "get_reminder_projector",
    "get_transition_controller",
    "get_agent_enrichment_service",
    "reset_services",
]
