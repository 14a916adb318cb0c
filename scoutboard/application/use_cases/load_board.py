"""
Load Board Use Case.

Normalizes legacy stage ids, fetches a pipeline's records and projects them
into ordered stage columns.
"""

from dataclasses import dataclass, field
from typing import Any

from scoutboard.application.services import (
    get_clock,
    get_default_store,
    get_legacy_migrator,
    get_pipeline_board,
    get_stage_registry,
)
from scoutboard.config import board_context, get_logger, get_settings
from scoutboard.core.entities.pipeline import (
    PipelineDefinition,
    PipelineItem,
    PipelineKind,
    Stage,
)
from scoutboard.core.exceptions import ValidationError
from scoutboard.core.interfaces.clock import IClock
from scoutboard.core.interfaces.storage import IRecordStore
from scoutboard.core.services import (
    BoardFilter,
    LegacyStatusMigrator,
    MigrationReport,
    PipelineBoard,
    StageRegistry,
)

logger = get_logger(__name__)


@dataclass
class BoardView:
    """A projected board."""

    kind: PipelineKind
    stages: list[Stage]
    columns: dict[str, list[PipelineItem]]
    archived: list[PipelineItem] = field(default_factory=list)
    completed: list[PipelineItem] = field(default_factory=list)
    facets: dict[str, list[str]] = field(default_factory=dict)
    migration: MigrationReport | None = None
    total: int = 0


class LoadBoardUseCase:
    """
    Use case for loading one pipeline board.

    Archived and completed items are listed separately from the stage
    columns. When boards are scoped per user, an owner id is required.
    """

    def __init__(
        self,
        store: IRecordStore | None = None,
        registry: StageRegistry | None = None,
        board: PipelineBoard | None = None,
        migrator: LegacyStatusMigrator | None = None,
        clock: IClock | None = None,
    ):
        self._store = store or get_default_store()
        self._registry = registry or get_stage_registry()
        self._board = board or get_pipeline_board()
        self._migrator = migrator or get_legacy_migrator(self._store)
        self._clock = clock or get_clock()

    async def execute(
        self,
        kind: PipelineKind | str,
        owner_id: str | None = None,
        board_filter: BoardFilter | None = None,
        filters: dict[str, Any] | None = None,
    ) -> BoardView:
        """
        Load and project a board.

        Args:
            kind: Pipeline to load.
            owner_id: Restrict to items of this advisor.
            board_filter: Free-text search and facet selection.
            filters: Extra equality filters passed to the store
                (e.g. ``{"player_id": ...}`` for one player's transfer interest).

        Returns:
            BoardView with ordered columns.
        """
        settings = get_settings().board
        definition = self._registry.definition(kind)

        query = dict(filters or {})
        if definition.owner_field:
            if owner_id:
                query[definition.owner_field] = owner_id
            elif settings.scope == "user":
                raise ValidationError(
                    "owner_id", "required when boards are scoped per user"
                )

        with board_context(definition.kind.value, owner_id=owner_id):
            return await self._load(definition, query, board_filter)

    async def _load(
        self,
        definition: PipelineDefinition,
        query: dict[str, Any],
        board_filter: BoardFilter | None,
    ) -> BoardView:
        settings = get_settings().board
        migration = None
        if settings.migrate_on_fetch and definition.legacy_stages:
            migration = await self._migrator.run(definition.kind)

        records = await self._store.fetch_all(definition.collection, query or None)
        today = self._clock.today(settings.tzinfo)

        items = self._board.filter(records, definition.kind, board_filter)
        active: list[PipelineItem] = []
        archived: list[PipelineItem] = []
        completed: list[PipelineItem] = []
        for item in items:
            if item.archived:
                archived.append(item)
            elif item.completed:
                completed.append(item)
            else:
                active.append(item)

        view = BoardView(
            kind=definition.kind,
            stages=self._registry.stages_for(definition.kind),
            columns=self._board.project(active, definition.kind, today),
            archived=self._board.order(archived, today),
            completed=sorted(
                completed,
                key=lambda i: i.completed_at.timestamp() if i.completed_at else 0.0,
                reverse=True,
            ),
            facets=self._board.facet_values(records, definition.kind),
            migration=migration,
            total=len(items),
        )

        logger.info(
            "board_loaded",
            kind=definition.kind.value,
            records=len(records),
            shown=len(active),
            archived=len(archived),
            completed=len(completed),
        )
        return view
