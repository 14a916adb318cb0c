"""Application use cases."""

from scoutboard.application.use_cases.load_board import BoardView, LoadBoardUseCase
from scoutboard.application.use_cases.manage_item import ManageItemUseCase
from scoutboard.application.use_cases.refresh_agent import (
    RefreshAgentResult,
    RefreshAgentUseCase,
)
from scoutboard.application.use_cases.reminders import (
    ReminderFeedUseCase,
    ToggleReminderResult,
)

__all__ = [
    "LoadBoardUseCase",
    "BoardView",
    "ManageItemUseCase",
    "ReminderFeedUseCase",
    "ToggleReminderResult",
    "RefreshAgentUseCase",
    "RefreshAgentResult",
]
