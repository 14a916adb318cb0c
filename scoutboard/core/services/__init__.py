"""
Core business logic services.

Layer-pure services that depend only on:
- scoutboard/core/entities/*
- scoutboard/core/interfaces/*
- scoutboard/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from scoutboard.core.services.agent_enrichment import AgentEnrichmentService
from scoutboard.core.services.collation import collation_key
from scoutboard.core.services.event_channel import EventChannel, log_board_event
from scoutboard.core.services.legacy_migrator import (
    LegacyStatusMigrator,
    MigrationReport,
)
from scoutboard.core.services.pipeline_board import BoardFilter, PipelineBoard
from scoutboard.core.services.reminder_projector import ReminderFeed, ReminderProjector
from scoutboard.core.services.stage_registry import (
    StageRegistry,
    build_default_registry,
)
from scoutboard.core.services.transition_controller import TransitionController

__all__ = [
    # Stages
    "StageRegistry",
    "build_default_registry",
    # Migration
    "LegacyStatusMigrator",
    "MigrationReport",
    # Board
    "PipelineBoard",
    "BoardFilter",
    "collation_key",
    # Mutations
    "TransitionController",
    "EventChannel",
    "log_board_event",
    # Reminders
    "ReminderProjector",
    "ReminderFeed",
    # Enrichment
    "AgentEnrichmentService",
]
