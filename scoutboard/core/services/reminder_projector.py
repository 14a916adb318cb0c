"""
Reminder projection.

Builds the reminder feed from stored reminder rows and from pipeline items
that carry a follow-up offset (synthesized reminders).
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any

from scoutboard.config import get_logger
from scoutboard.core.entities.pipeline import PipelineDefinition, PipelineItem
from scoutboard.core.entities.reminder import ReminderView, SourceRef
from scoutboard.core.services.collation import collation_key
from scoutboard.core.services.stage_registry import StageRegistry
from scoutboard.core.services.temporal_urgency import (
    classify,
    days_until,
    item_target_date,
    local_date,
)

logger = get_logger(__name__)


class _Blank(dict):
    def __missing__(self, key: str) -> str:
        return ""


@dataclass
class ReminderFeed:
    """Merged reminder feed partitioned for display."""

    items: list[ReminderView] = field(default_factory=list)
    due_now: list[ReminderView] = field(default_factory=list)
    upcoming: list[ReminderView] = field(default_factory=list)
    completed: list[ReminderView] = field(default_factory=list)


class ReminderProjector:
    """
    Merges stored and synthesized reminders into one ordered feed.

    Synthesized reminders have no backing row. Toggling their completion
    only changes the returned copy and is lost on the next projection.
    """

    def __init__(self, registry: StageRegistry, tz: tzinfo | None = None):
        self._registry = registry
        self._tz = tz

    def synthesize(
        self,
        items: Iterable[PipelineItem],
        today: date,
        player_names: Mapping[str, str] | None = None,
    ) -> list[ReminderView]:
        """
        Derive reminders from items with a follow-up offset.

        Items without an offset (or without a creation timestamp) produce
        nothing.
        """
        views: list[ReminderView] = []
        for item in items:
            if item.urgency_offset_days is None or item.created_at is None:
                continue
            definition = self._registry.definition(item.kind)
            target = item_target_date(item, self._tz)
            if target is None:
                continue

            views.append(
                ReminderView(
                    id=f"{item.kind.value}-{item.id}",
                    title=self._title(definition, item),
                    target_date=target,
                    completed=False,
                    subtitle=self._subtitle(definition, item, player_names or {}),
                    synthesized=True,
                    source_ref=SourceRef(
                        kind=item.kind.value,
                        id=item.id,
                        context={
                            name: str(item.record[name])
                            for name in definition.reminder_context_fields
                            if item.record.get(name)
                        },
                    ),
                    urgency=classify(days_until(target, today, self._tz)),
                )
            )
        return views

    def project(
        self,
        direct: Iterable[ReminderView | Mapping[str, Any]],
        source_items: Iterable[PipelineItem],
        today: date,
        include_completed: bool = False,
        player_names: Mapping[str, str] | None = None,
    ) -> ReminderFeed:
        """
        Build the feed.

        Args:
            direct: Stored reminders (views or raw rows).
            source_items: Pipeline items that may carry a follow-up offset.
            today: Reference date in the board timezone.
            include_completed: List every completed reminder in
                ``feed.completed`` instead of only those completed today.
            player_names: Agency player names by id, used as subtitles of
                synthesized reminders.

        Returns:
            ``items`` holds every direct and synthesized reminder.
            ``due_now`` and ``upcoming`` hold the open ones.
        """
        views: list[ReminderView] = []
        for entry in direct:
            view = entry if isinstance(entry, ReminderView) else ReminderView.from_record(entry)
            if view is None:
                logger.debug(
                    "reminder_row_skipped",
                    reminder_id=entry.get("id") if isinstance(entry, Mapping) else None,
                )
                continue
            views.append(
                view.model_copy(
                    update={"urgency": classify(days_until(view.target_date, today, self._tz))}
                )
            )
        views.extend(self.synthesize(source_items, today, player_names))

        ordered = sorted(views, key=self._sort_key)
        feed = ReminderFeed(items=ordered)
        for view in ordered:
            if view.completed:
                if include_completed or self._completed_on(view, today):
                    feed.completed.append(view)
            elif view.urgency is not None and view.urgency.is_due:
                feed.due_now.append(view)
            else:
                feed.upcoming.append(view)
        return feed

    def toggle_local(self, view: ReminderView, now: datetime) -> ReminderView:
        """Toggled copy of a reminder; nothing is persisted."""
        completed = not view.completed
        return view.model_copy(
            update={"completed": completed, "completed_at": now if completed else None}
        )

    @staticmethod
    def _title(definition: PipelineDefinition, item: PipelineItem) -> str:
        if definition.reminder_title:
            return definition.reminder_title.format_map(_Blank(item.record)).strip()
        return item.secondary_sort_key

    @staticmethod
    def _subtitle(
        definition: PipelineDefinition, item: PipelineItem, player_names: Mapping[str, str]
    ) -> str | None:
        if definition.player_field is None:
            return None
        player_id = item.record.get(definition.player_field)
        if not player_id:
            return None
        return player_names.get(str(player_id))

    @staticmethod
    def _sort_key(view: ReminderView) -> tuple:
        signed = view.urgency.signed_days if view.urgency is not None else 0
        return (signed, collation_key(view.title))

    def _completed_on(self, view: ReminderView, today: date) -> bool:
        if view.completed_at is None:
            return False
        return local_date(view.completed_at, self._tz) == today
