"""
Refresh Agent Use Case.

Refreshes the agent of one scouted player from its profile page.
"""

from dataclasses import dataclass
from typing import Any

from scoutboard.application.services import (
    get_agent_enrichment_service,
    get_default_store,
    get_stage_registry,
)
from scoutboard.core.entities.pipeline import PipelineKind
from scoutboard.core.exceptions import RecordNotFoundError
from scoutboard.core.interfaces.storage import IRecordStore
from scoutboard.core.services import AgentEnrichmentService


@dataclass
class RefreshAgentResult:
    """Record after the refresh attempt."""

    record: dict[str, Any]
    refreshed: bool


class RefreshAgentUseCase:
    """Use case for on-demand agent enrichment."""

    def __init__(
        self,
        store: IRecordStore | None = None,
        enrichment: AgentEnrichmentService | None = None,
    ):
        self._store = store or get_default_store()
        self._enrichment = enrichment or get_agent_enrichment_service(store=self._store)
        self._collection = get_stage_registry().definition(PipelineKind.SCOUTING).collection

    async def execute(self, item_id: str) -> RefreshAgentResult:
        """
        Refresh one player.

        A missing lookup, a recent refresh or a failed lookup leave the
        record as it was (``refreshed`` is False).

        Raises:
            RecordNotFoundError: If the player does not exist.
        """
        record = await self._store.get(self._collection, item_id)
        if record is None:
            raise RecordNotFoundError(self._collection, item_id)

        updated = await self._enrichment.refresh(record)
        if updated is None:
            return RefreshAgentResult(record=record, refreshed=False)
        return RefreshAgentResult(record=updated, refreshed=True)
