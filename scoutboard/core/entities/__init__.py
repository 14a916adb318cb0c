"""Core domain entities."""

from scoutboard.core.entities.agent import AgentInfo
from scoutboard.core.entities.event import BoardEvent, BoardEventType
from scoutboard.core.entities.pipeline import (
    MigrationRule,
    PipelineDefinition,
    PipelineItem,
    PipelineKind,
    Stage,
    parse_date,
    parse_offset,
    parse_timestamp,
)
from scoutboard.core.entities.reminder import (
    REMINDERS_COLLECTION,
    ReminderView,
    SourceRef,
)
from scoutboard.core.entities.urgency import Urgency, UrgencyKind

__all__ = [
    # Pipeline entities
    "PipelineKind",
    "Stage",
    "MigrationRule",
    "PipelineDefinition",
    "PipelineItem",
    "parse_timestamp",
    "parse_date",
    "parse_offset",
    # Urgency
    "Urgency",
    "UrgencyKind",
    # Reminder entities
    "REMINDERS_COLLECTION",
    "ReminderView",
    "SourceRef",
    # Events
    "BoardEvent",
    "BoardEventType",
    # Enrichment
    "AgentInfo",
]
