"""
Manage Item Use Case.

Loads a single pipeline item by id and applies one mutation through the
TransitionController.
"""

from typing import Any

from scoutboard.application.services import (
    get_default_store,
    get_stage_registry,
    get_transition_controller,
)
from scoutboard.config import get_logger
from scoutboard.core.entities.pipeline import PipelineItem, PipelineKind
from scoutboard.core.exceptions import RecordNotFoundError
from scoutboard.core.interfaces.storage import IRecordStore
from scoutboard.core.services import StageRegistry, TransitionController

logger = get_logger(__name__)


class ManageItemUseCase:
    """Use case for stage transitions and the other single-item mutations."""

    def __init__(
        self,
        store: IRecordStore | None = None,
        registry: StageRegistry | None = None,
        controller: TransitionController | None = None,
    ):
        self._store = store or get_default_store()
        self._registry = registry or get_stage_registry()
        self._controller = controller or get_transition_controller(store=self._store)

    async def load(self, kind: PipelineKind | str, item_id: str) -> PipelineItem:
        """
        Load an item.

        Raises:
            RecordNotFoundError: If no record has this id.
        """
        definition = self._registry.definition(kind)
        record = await self._store.get(definition.collection, item_id)
        if record is None:
            raise RecordNotFoundError(definition.collection, item_id)
        return PipelineItem.from_record(record, definition)

    async def transition(
        self, kind: PipelineKind | str, item_id: str, stage: str
    ) -> PipelineItem:
        """Move an item to ``stage``; validated before the record is loaded."""
        self._registry.get_stage(kind, stage)
        item = await self.load(kind, item_id)
        return await self._controller.transition(item, stage)

    async def toggle_completion(self, kind: PipelineKind | str, item_id: str) -> PipelineItem:
        item = await self.load(kind, item_id)
        return await self._controller.toggle_completion(item)

    async def set_urgency(
        self, kind: PipelineKind | str, item_id: str, days: int | None
    ) -> PipelineItem:
        item = await self.load(kind, item_id)
        return await self._controller.set_urgency_offset(item, days)

    async def archive(
        self, kind: PipelineKind | str, item_id: str, reason: str | None = None
    ) -> PipelineItem:
        item = await self.load(kind, item_id)
        return await self._controller.archive(item, reason)

    async def restore(self, kind: PipelineKind | str, item_id: str) -> PipelineItem:
        item = await self.load(kind, item_id)
        return await self._controller.restore(item)

    async def delete(self, kind: PipelineKind | str, item_id: str) -> None:
        item = await self.load(kind, item_id)
        await self._controller.delete(item)

    async def create(self, kind: PipelineKind | str, data: dict[str, Any]) -> PipelineItem:
        return await self._controller.create(kind, data)
