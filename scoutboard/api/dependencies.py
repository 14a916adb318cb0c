"""
Dependency injection container for FastAPI.

Provides service and use case instances to route handlers. Tests replace
``get_store`` and ``get_board_clock`` via ``app.dependency_overrides``.
"""

from fastapi import Depends

from scoutboard.application.services import (
    get_agent_enrichment_service,
    get_clock,
    get_default_store,
    get_legacy_migrator,
    get_transition_controller,
)
from scoutboard.application.use_cases import (
    LoadBoardUseCase,
    ManageItemUseCase,
    RefreshAgentUseCase,
    ReminderFeedUseCase,
)
from scoutboard.core.interfaces import IClock, IRecordStore
from scoutboard.core.services import LegacyStatusMigrator


# Infrastructure dependencies
def get_store() -> IRecordStore:
    """Get the record store."""
    return get_default_store()


def get_board_clock() -> IClock:
    """Get the clock used for "today"."""
    return get_clock()


# Service dependencies
def get_migrator(store: IRecordStore = Depends(get_store)) -> LegacyStatusMigrator:
    """Get legacy status migrator."""
    return get_legacy_migrator(store)


# Use case dependencies
def get_load_board_use_case(
    store: IRecordStore = Depends(get_store),
    clock: IClock = Depends(get_board_clock),
) -> LoadBoardUseCase:
    """Get load board use case."""
    return LoadBoardUseCase(store=store, clock=clock)


def get_manage_item_use_case(
    store: IRecordStore = Depends(get_store),
    clock: IClock = Depends(get_board_clock),
) -> ManageItemUseCase:
    """Get manage item use case."""
    return ManageItemUseCase(
        store=store,
        controller=get_transition_controller(store=store, clock=clock),
    )


def get_reminder_feed_use_case(
    store: IRecordStore = Depends(get_store),
    clock: IClock = Depends(get_board_clock),
) -> ReminderFeedUseCase:
    """Get reminder feed use case."""
    return ReminderFeedUseCase(store=store, clock=clock)


def get_refresh_agent_use_case(
    store: IRecordStore = Depends(get_store),
    clock: IClock = Depends(get_board_clock),
) -> RefreshAgentUseCase:
    """Get refresh agent use case."""
    return RefreshAgentUseCase(
        store=store,
        enrichment=get_agent_enrichment_service(store=store, clock=clock),
    )
