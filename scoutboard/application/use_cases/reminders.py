"""
Reminder Use Cases.

Builds the merged reminder feed and creates or toggles reminders. Stored
reminders are persisted; synthesized ones only ever change in the returned
copy.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from scoutboard.application.services import (
    get_clock,
    get_default_store,
    get_pipeline_board,
    get_reminder_projector,
    get_stage_registry,
)
from scoutboard.config import get_logger, get_settings
from scoutboard.core.entities.pipeline import PipelineItem, PipelineKind
from scoutboard.core.entities.reminder import (
    PLAYERS_COLLECTION,
    REMINDERS_COLLECTION,
    ReminderView,
    player_display_name,
)
from scoutboard.core.exceptions import (
    PersistenceFailedError,
    RecordNotFoundError,
    ValidationError,
)
from scoutboard.core.interfaces.clock import IClock
from scoutboard.core.interfaces.storage import IRecordStore
from scoutboard.core.services import (
    PipelineBoard,
    ReminderFeed,
    ReminderProjector,
    StageRegistry,
)
from scoutboard.core.services.temporal_urgency import classify, days_until

logger = get_logger(__name__)


@dataclass
class ToggleReminderResult:
    """Toggled reminder and whether the change was stored."""

    reminder: ReminderView
    persisted: bool


class ReminderFeedUseCase:
    """Use case for the reminder feed and reminder mutations."""

    def __init__(
        self,
        store: IRecordStore | None = None,
        registry: StageRegistry | None = None,
        board: PipelineBoard | None = None,
        projector: ReminderProjector | None = None,
        clock: IClock | None = None,
    ):
        self._store = store or get_default_store()
        self._registry = registry or get_stage_registry()
        self._board = board or get_pipeline_board()
        self._projector = projector or get_reminder_projector()
        self._clock = clock or get_clock()

    def _today(self) -> date:
        return self._clock.today(get_settings().board.tzinfo)

    async def _source_items(self) -> list[PipelineItem]:
        """Items of every pipeline that carries a follow-up offset."""
        items: list[PipelineItem] = []
        for kind in self._registry.kinds():
            definition = self._registry.definition(kind)
            if definition.offset_field is None:
                continue
            records = await self._store.fetch_all(definition.collection)
            items.extend(self._board.items(records, kind))
        return items

    async def _player_names(self) -> dict[str, str]:
        """Agency player names by id, for synthesized reminder subtitles."""
        names: dict[str, str] = {}
        for record in await self._store.fetch_all(PLAYERS_COLLECTION):
            name = player_display_name(record)
            if name and record.get("id"):
                names[str(record["id"])] = name
        return names

    async def build_feed(
        self,
        user_id: str | None = None,
        include_completed: bool = False,
    ) -> ReminderFeed:
        """
        Build the merged feed.

        Args:
            user_id: Only stored reminders of this advisor.
            include_completed: Return all completed reminders instead of
                only those completed today.

        Raises:
            ValidationError: If reminders are scoped per user and no
                ``user_id`` is given.
        """
        if not user_id and get_settings().board.scope == "user":
            raise ValidationError("user_id", "required when reminders are scoped per user")
        filters = {"user_id": user_id} if user_id else None
        direct = await self._store.fetch_all(REMINDERS_COLLECTION, filters)
        sources = await self._source_items()

        feed = self._projector.project(
            direct,
            sources,
            self._today(),
            include_completed=include_completed,
            player_names=await self._player_names(),
        )
        logger.info(
            "reminder_feed_built",
            total=len(feed.items),
            due_now=len(feed.due_now),
            upcoming=len(feed.upcoming),
        )
        return feed

    async def create(
        self,
        title: str,
        due_date: date,
        user_id: str | None = None,
        source_type: str | None = None,
        source_id: str | None = None,
        player_name: str | None = None,
        club_name: str | None = None,
    ) -> ReminderView:
        """Store a new reminder."""
        if not title.strip():
            raise ValidationError("title", "must not be empty", title)

        record: dict[str, Any] = {
            "user_id": user_id,
            "title": title.strip(),
            "due_date": due_date.isoformat(),
            "completed": False,
            "completed_at": None,
            "source_type": source_type,
            "source_id": source_id,
            "player_name": player_name,
            "club_name": club_name,
            "created_at": self._clock.now().isoformat(),
        }
        try:
            stored = await self._store.insert(REMINDERS_COLLECTION, record)
        except Exception as e:
            raise PersistenceFailedError("insert", REMINDERS_COLLECTION, cause=str(e)) from e

        view = ReminderView.from_record(stored)
        if view is None:
            raise PersistenceFailedError(
                "insert", REMINDERS_COLLECTION, cause="stored reminder has no due date"
            )
        logger.info("reminder_created", reminder_id=view.id, due_date=due_date.isoformat())
        return self._classified(view)

    async def toggle(self, reminder_id: str) -> ToggleReminderResult:
        """
        Toggle a reminder's completion.

        Stored reminders are updated in the store. Synthesized reminders
        (``"{kind}-{item_id}"``) are toggled in the returned copy only.

        Raises:
            RecordNotFoundError: Neither a stored reminder nor a source item
                matches the id.
        """
        record = await self._store.get(REMINDERS_COLLECTION, reminder_id)
        if record is not None:
            view = await self._toggle_stored(record)
            return ToggleReminderResult(reminder=view, persisted=True)

        synthesized = await self._synthesized(reminder_id)
        if synthesized is None:
            raise RecordNotFoundError(REMINDERS_COLLECTION, reminder_id)

        toggled = self._projector.toggle_local(synthesized, self._clock.now())
        logger.info(
            "synthesized_reminder_toggled",
            reminder_id=reminder_id,
            completed=toggled.completed,
        )
        return ToggleReminderResult(reminder=toggled, persisted=False)

    async def _toggle_stored(self, record: dict[str, Any]) -> ReminderView:
        completed = not bool(record.get("completed"))
        patch = {
            "completed": completed,
            "completed_at": self._clock.now().isoformat() if completed else None,
        }
        try:
            stored = await self._store.update(REMINDERS_COLLECTION, str(record["id"]), patch)
        except RecordNotFoundError:
            raise
        except Exception as e:
            raise PersistenceFailedError(
                "toggle", REMINDERS_COLLECTION, str(record["id"]), cause=str(e)
            ) from e

        merged = {**record, **patch}
        if isinstance(stored, dict):
            merged.update(stored)
        view = ReminderView.from_record(merged)
        if view is None:
            raise ValidationError("due_date", "stored reminder has no due date", record.get("id"))
        logger.info("reminder_toggled", reminder_id=view.id, completed=completed)
        return self._classified(view)

    async def _synthesized(self, reminder_id: str) -> ReminderView | None:
        prefix, _, item_id = reminder_id.partition("-")
        try:
            kind = PipelineKind(prefix)
        except ValueError:
            return None
        if not item_id:
            return None

        definition = self._registry.definition(kind)
        if definition.offset_field is None:
            return None
        record = await self._store.get(definition.collection, item_id)
        if record is None:
            return None

        views = self._projector.synthesize(
            [PipelineItem.from_record(record, definition)],
            self._today(),
            await self._player_names(),
        )
        return views[0] if views else None

    def _classified(self, view: ReminderView) -> ReminderView:
        urgency = classify(
            days_until(view.target_date, self._today(), get_settings().board.tzinfo)
        )
        return view.model_copy(update={"urgency": urgency})
