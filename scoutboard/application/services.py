"""
Service factory functions for dependency injection.

This module is the composition root: it wires infrastructure
implementations to core services. Use cases should import from here.
"""

from typing import TYPE_CHECKING

from scoutboard.config import get_settings
from scoutboard.core.services import (
    AgentEnrichmentService,
    EventChannel,
    LegacyStatusMigrator,
    PipelineBoard,
    ReminderProjector,
    StageRegistry,
    TransitionController,
    build_default_registry,
    log_board_event,
)
from scoutboard.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from scoutboard.core.interfaces import IAgentLookup, IClock, IRecordStore


# Singleton instances
_stage_registry: StageRegistry | None = None
_event_channel: EventChannel | None = None
_clock: "IClock | None" = None


def get_stage_registry() -> StageRegistry:
    """Get the process-wide stage registry."""
    global _stage_registry
    if _stage_registry is None:
        _stage_registry = build_default_registry()
    return _stage_registry


def get_event_channel() -> EventChannel:
    """Get the board event channel shared by all controllers; logs every event."""
    global _event_channel
    if _event_channel is None:
        _event_channel = EventChannel()
        _event_channel.subscribe(log_board_event)
    return _event_channel


def get_clock() -> "IClock":
    """Get the clock (system clock unless overridden via ``set_clock``)."""
    global _clock
    if _clock is None:
        from scoutboard.infrastructure.clock import SystemClock

        _clock = SystemClock()
    return _clock


def set_clock(clock: "IClock") -> None:
    """Replace the clock (for testing)."""
    global _clock
    _clock = clock


def get_default_store() -> "IRecordStore":
    """Record store backed by the global SQLite pool."""
    # Lazy import infrastructure
    from scoutboard.infrastructure.storage.sqlite import get_record_store

    return get_record_store()


def get_pipeline_board() -> PipelineBoard:
    """Board projector in the configured timezone."""
    return PipelineBoard(get_stage_registry(), tz=get_settings().board.tzinfo)


def get_reminder_projector() -> ReminderProjector:
    """Reminder feed projector in the configured timezone."""
    return ReminderProjector(get_stage_registry(), tz=get_settings().board.tzinfo)


def get_legacy_migrator(store: "IRecordStore | None" = None) -> LegacyStatusMigrator:
    """Migrator over the given store (default SQLite store)."""
    return LegacyStatusMigrator(
        store or get_default_store(),
        get_stage_registry(),
        events=get_event_channel(),
    )


def get_transition_controller(
    store: "IRecordStore | None" = None,
    clock: "IClock | None" = None,
    events: EventChannel | None = None,
) -> TransitionController:
    """
    Build a TransitionController.

    Args:
        store: Optional record store override
        clock: Optional clock override
        events: Optional event channel override

    Returns:
        Controller publishing on the shared event channel by default
    """
    return TransitionController(
        store=store or get_default_store(),
        registry=get_stage_registry(),
        clock=clock or get_clock(),
        events=events or get_event_channel(),
    )


def get_agent_lookup(clock: "IClock | None" = None) -> "IAgentLookup | None":
    """Transfermarkt lookup, or None when enrichment is disabled."""
    settings = get_settings().enrichment
    if not settings.enabled:
        return None

    if settings.proxy_url and not settings.proxy_url.startswith(("http://", "https://")):
        raise ConfigurationError(
            "ENRICH_PROXY_URL must be an http(s) URL prefix",
            details={"proxy_url": settings.proxy_url},
        )

    from scoutboard.infrastructure.enrichment import TransfermarktAgentLookup

    return TransfermarktAgentLookup(
        timeout=settings.timeout,
        max_retries=settings.max_retries,
        proxy_url=settings.proxy_url,
        clock=clock or get_clock(),
    )


def get_agent_enrichment_service(
    store: "IRecordStore | None" = None,
    lookup: "IAgentLookup | None" = None,
    clock: "IClock | None" = None,
) -> AgentEnrichmentService:
    """
    Build the agent enrichment service.

    The lookup is optional; without one every refresh is a no-op.
    """
    clock = clock or get_clock()
    return AgentEnrichmentService(
        store=store or get_default_store(),
        registry=get_stage_registry(),
        clock=clock,
        lookup=lookup if lookup is not None else get_agent_lookup(clock),
        refresh_interval_hours=get_settings().enrichment.refresh_interval_hours,
    )


def reset_services() -> None:
    """Reset all singleton instances (for testing)."""
    global _stage_registry, _event_channel, _clock
    _stage_registry = None
    _event_channel = None
    _clock = None
