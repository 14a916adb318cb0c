"""
Transition controller.

Validated mutations of single pipeline items: stage changes, completion,
urgency offset edits, archiving and deletion. Every mutation is one store
write; failures surface to the caller and are never retried here.
"""

from datetime import datetime
from typing import Any

from scoutboard.config import get_logger
from scoutboard.core.entities.event import BoardEvent, BoardEventType
from scoutboard.core.entities.pipeline import (
    PipelineDefinition,
    PipelineItem,
    PipelineKind,
    parse_offset,
)
from scoutboard.core.exceptions import (
    PersistenceFailedError,
    RecordNotFoundError,
    ValidationError,
)
from scoutboard.core.interfaces.clock import IClock
from scoutboard.core.interfaces.storage import IRecordStore
from scoutboard.core.services.event_channel import EventChannel
from scoutboard.core.services.stage_registry import StageRegistry

logger = get_logger(__name__)


def _iso(ts: datetime) -> str:
    return ts.isoformat()


def _base_record(definition: PipelineDefinition, item: PipelineItem) -> dict[str, Any]:
    """Raw record of an item, rebuilt from its fields where the record lacks them."""
    base: dict[str, Any] = {"id": item.id, definition.stage_field: item.stage}
    if item.created_at is not None:
        base["created_at"] = _iso(item.created_at)
    if item.updated_at is not None:
        base["updated_at"] = _iso(item.updated_at)
    if item.completed_at is not None:
        base["completed_at"] = _iso(item.completed_at)
    if definition.offset_field:
        base[definition.offset_field] = item.urgency_offset_days
    if definition.due_field and item.due_date is not None:
        base[definition.due_field] = item.due_date.isoformat()
    if definition.completed_field:
        base[definition.completed_field] = item.completed
    if definition.archivable:
        base["archived"] = item.archived
    if definition.owner_field and item.owner_id is not None:
        base[definition.owner_field] = item.owner_id
    base.update(item.record)
    return base


class TransitionController:
    """
    Applies item mutations through the record store.

    Items are never modified in place; each method returns the updated copy
    (or the same item for a no-op) and the caller replaces its local state.
    """

    def __init__(
        self,
        store: IRecordStore,
        registry: StageRegistry,
        clock: IClock,
        events: EventChannel | None = None,
    ):
        self._store = store
        self._registry = registry
        self._clock = clock
        self._events = events

    async def transition(self, item: PipelineItem, target_stage: str) -> PipelineItem:
        """
        Move an item to another stage.

        Dropping an item back onto its own stage is a successful no-op
        without a write.

        Raises:
            InvalidStageError: Target is not a stage of the item's pipeline.
            RecordNotFoundError: The record no longer exists.
            PersistenceFailedError: The store failed the write.
        """
        definition = self._registry.definition(item.kind)
        self._registry.get_stage(item.kind, target_stage)

        if target_stage == item.stage:
            logger.debug("stage_transition_noop", kind=item.kind.value, item_id=item.id)
            return item

        patch: dict[str, Any] = {definition.stage_field: target_stage}
        if definition.bumps_updated_at:
            patch["updated_at"] = _iso(self._clock.now())

        updated = await self._write(definition, item, patch, "transition")
        logger.info(
            "stage_transitioned",
            kind=item.kind.value,
            item_id=item.id,
            from_stage=item.stage,
            to_stage=target_stage,
        )
        self._publish(
            BoardEventType.STAGE_CHANGED,
            updated,
            {"from_stage": item.stage, "to_stage": target_stage},
        )
        return updated

    async def toggle_completion(self, item: PipelineItem) -> PipelineItem:
        """Flip completion; ``completed_at`` is set on completion and cleared on reopen."""
        definition = self._registry.definition(item.kind)
        if definition.completed_field is None:
            raise ValidationError(
                "completed", f"{item.kind.value} items cannot be completed"
            )

        completed = not item.completed
        patch = {
            definition.completed_field: completed,
            "completed_at": _iso(self._clock.now()) if completed else None,
        }
        updated = await self._write(definition, item, patch, "toggle_completion")
        logger.info(
            "completion_toggled",
            kind=item.kind.value,
            item_id=item.id,
            completed=completed,
        )
        self._publish(BoardEventType.COMPLETION_TOGGLED, updated, {"completed": completed})
        return updated

    async def set_urgency_offset(
        self, item: PipelineItem, days: int | None
    ) -> PipelineItem:
        """
        Change the follow-up offset of an item.

        A changed offset re-anchors ``created_at`` to now so the target date
        counts from the moment of the edit. None or a negative value clears
        the offset. An unchanged value is a no-op.
        """
        definition = self._registry.definition(item.kind)
        if definition.offset_field is None:
            raise ValidationError(
                "urgency_offset_days",
                f"{item.kind.value} items have no urgency offset",
                days,
            )

        offset = parse_offset(days)
        if offset == item.urgency_offset_days:
            return item

        now = _iso(self._clock.now())
        patch: dict[str, Any] = {definition.offset_field: offset, "created_at": now}
        if definition.bumps_updated_at:
            patch["updated_at"] = now

        updated = await self._write(definition, item, patch, "set_urgency_offset")
        logger.info(
            "urgency_offset_changed",
            kind=item.kind.value,
            item_id=item.id,
            old_days=item.urgency_offset_days,
            new_days=offset,
        )
        self._publish(BoardEventType.URGENCY_CHANGED, updated, {"days": offset})
        return updated

    async def archive(self, item: PipelineItem, reason: str | None = None) -> PipelineItem:
        """Archive an item; the stage is kept."""
        definition = self._require_archivable(item)
        patch = {
            "archived": True,
            "archived_at": _iso(self._clock.now()),
            "archive_reason": reason or None,
        }
        updated = await self._write(definition, item, patch, "archive")
        logger.info("item_archived", kind=item.kind.value, item_id=item.id, reason=reason)
        self._publish(BoardEventType.ARCHIVED, updated, {"reason": reason})
        return updated

    async def restore(self, item: PipelineItem) -> PipelineItem:
        """Bring an archived item back onto the board."""
        definition = self._require_archivable(item)
        if not item.archived:
            return item

        patch = {"archived": False, "archived_at": None, "archive_reason": None}
        updated = await self._write(definition, item, patch, "restore")
        logger.info("item_restored", kind=item.kind.value, item_id=item.id)
        self._publish(BoardEventType.RESTORED, updated)
        return updated

    async def delete(self, item: PipelineItem) -> None:
        """
        Remove an item permanently.

        Raises:
            RecordNotFoundError: The record was already gone.
            PersistenceFailedError: The store failed the delete.
        """
        definition = self._registry.definition(item.kind)
        try:
            deleted = await self._store.delete(definition.collection, item.id)
        except (RecordNotFoundError, PersistenceFailedError):
            raise
        except Exception as e:
            raise PersistenceFailedError(
                "delete", definition.collection, item.id, cause=str(e)
            ) from e

        if not deleted:
            raise RecordNotFoundError(definition.collection, item.id)

        logger.info("item_deleted", kind=item.kind.value, item_id=item.id)
        self._publish(BoardEventType.DELETED, item)

    async def create(
        self, kind: PipelineKind | str, record: dict[str, Any]
    ) -> PipelineItem:
        """
        Insert a new item.

        The stage defaults to the pipeline's default stage and must be
        valid; transfer interest gets the default follow-up offset.
        """
        definition = self._registry.definition(kind)
        data = dict(record)
        data.pop("id", None)

        stage = data.get(definition.stage_field) or self._registry.default_stage(kind).id
        self._registry.get_stage(kind, stage)
        data[definition.stage_field] = stage

        if (
            definition.offset_field
            and definition.default_offset_days is not None
            and definition.offset_field not in data
        ):
            data[definition.offset_field] = definition.default_offset_days

        now = _iso(self._clock.now())
        data.setdefault("created_at", now)
        if definition.bumps_updated_at:
            data["updated_at"] = now

        try:
            stored = await self._store.insert(definition.collection, data)
        except Exception as e:
            raise PersistenceFailedError(
                "insert", definition.collection, cause=str(e)
            ) from e

        item = PipelineItem.from_record(stored, definition)
        logger.info("item_created", kind=definition.kind.value, item_id=item.id, stage=stage)
        self._publish(BoardEventType.CREATED, item)
        return item

    def _require_archivable(self, item: PipelineItem) -> PipelineDefinition:
        definition = self._registry.definition(item.kind)
        if not definition.archivable:
            raise ValidationError("archived", f"{item.kind.value} items cannot be archived")
        return definition

    async def _write(
        self,
        definition: PipelineDefinition,
        item: PipelineItem,
        patch: dict[str, Any],
        operation: str,
    ) -> PipelineItem:
        try:
            stored = await self._store.update(definition.collection, item.id, patch)
        except (RecordNotFoundError, PersistenceFailedError):
            raise
        except Exception as e:
            logger.warning(
                "item_write_failed",
                operation=operation,
                kind=item.kind.value,
                item_id=item.id,
                exc_info=True,
            )
            raise PersistenceFailedError(
                operation, definition.collection, item.id, cause=str(e)
            ) from e

        merged = {**_base_record(definition, item), **patch}
        if isinstance(stored, dict):
            merged.update(stored)
        merged["id"] = item.id
        return PipelineItem.from_record(merged, definition)

    def _publish(
        self,
        event_type: BoardEventType,
        item: PipelineItem,
        payload: dict[str, Any] | None = None,
    ) -> None:
        if self._events is None:
            return
        self._events.publish(
            BoardEvent(type=event_type, kind=item.kind, item_id=item.id, payload=payload or {})
        )
