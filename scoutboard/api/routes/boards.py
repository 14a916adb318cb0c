"""
Pipeline board endpoints.

One set of routes serves the scouting, transfer and task boards.
"""

from datetime import UTC, date, tzinfo

from fastapi import APIRouter, Depends, Query, Response, status

from scoutboard.api.dependencies import (
    get_board_clock,
    get_load_board_use_case,
    get_manage_item_use_case,
    get_migrator,
    get_refresh_agent_use_case,
)
from scoutboard.application.dto.requests import (
    ArchiveRequest,
    CreateItemRequest,
    TransitionRequest,
    UrgencyRequest,
)
from scoutboard.application.dto.responses import (
    AgentRefreshResponse,
    BoardColumnResponse,
    BoardResponse,
    ErrorResponse,
    MigrationReportResponse,
    PipelineItemResponse,
    StageResponse,
    UrgencyResponse,
)
from scoutboard.application.use_cases import (
    LoadBoardUseCase,
    ManageItemUseCase,
    RefreshAgentUseCase,
)
from scoutboard.config import get_settings
from scoutboard.core.entities.pipeline import PipelineItem, PipelineKind, parse_timestamp
from scoutboard.core.entities.urgency import Urgency
from scoutboard.core.exceptions import ValidationError
from scoutboard.core.interfaces import IClock
from scoutboard.core.services import BoardFilter, LegacyStatusMigrator, MigrationReport
from scoutboard.core.services.temporal_urgency import item_target_date, urgency_for

router = APIRouter(prefix="/api/boards", tags=["boards"])


def urgency_to_response(urgency: Urgency | None) -> UrgencyResponse | None:
    if urgency is None:
        return None
    return UrgencyResponse(kind=urgency.kind.value, days=urgency.days, label=urgency.label)


def item_to_response(item: PipelineItem, today: date, tz: tzinfo) -> PipelineItemResponse:
    """Convert an item to its response DTO with derived urgency."""
    return PipelineItemResponse(
        id=item.id,
        kind=item.kind.value,
        stage=item.stage,
        created_at=item.created_at,
        updated_at=item.updated_at,
        urgency_offset_days=item.urgency_offset_days,
        due_date=item.due_date,
        target_date=item_target_date(item, tz),
        urgency=urgency_to_response(urgency_for(item, today, tz)),
        completed=item.completed,
        completed_at=item.completed_at,
        archived=item.archived,
        title=item.secondary_sort_key,
        owner_id=item.owner_id,
        record=item.record,
    )


def _report_to_response(report: MigrationReport) -> MigrationReportResponse:
    return MigrationReportResponse(
        scanned=report.scanned,
        migrated=report.migrated,
        failed=report.failed,
        failed_ids=report.failed_ids,
    )


def _parse_facets(values: list[str]) -> dict[str, set[str]]:
    """Parse repeated ``name:value`` query parameters."""
    facets: dict[str, set[str]] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip() or not value.strip():
            raise ValidationError("facet", "expected name:value", raw)
        facets.setdefault(name.strip(), set()).add(value.strip())
    return facets


class _ItemResponder:
    """Converts items with the request's "today"."""

    def __init__(self, clock: IClock = Depends(get_board_clock)):
        self.tz = get_settings().board.tzinfo
        self.today = clock.today(self.tz)

    def __call__(self, item: PipelineItem) -> PipelineItemResponse:
        return item_to_response(item, self.today, self.tz)


@router.get(
    "/{kind}",
    response_model=BoardResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_board(
    kind: PipelineKind,
    owner_id: str | None = None,
    search: str = "",
    facet: list[str] = Query(default=[]),
    player_id: str | None = None,
    use_case: LoadBoardUseCase = Depends(get_load_board_use_case),
    respond: _ItemResponder = Depends(),
) -> BoardResponse:
    """
    Load a board.

    Stage columns are ordered urgency-first. Use ``facet=position:ST`` (repeated)
    to filter by facets and ``player_id`` to show one player's transfer interest.
    """
    view = await use_case.execute(
        kind,
        owner_id=owner_id,
        board_filter=BoardFilter(search=search, facets=_parse_facets(facet)),
        filters={"player_id": player_id} if player_id else None,
    )

    return BoardResponse(
        kind=view.kind.value,
        columns=[
            BoardColumnResponse(
                stage=StageResponse(**stage.model_dump()),
                items=[respond(i) for i in view.columns.get(stage.id, [])],
                count=len(view.columns.get(stage.id, [])),
            )
            for stage in view.stages
        ],
        archived=[respond(i) for i in view.archived],
        completed=[respond(i) for i in view.completed],
        facets=view.facets,
        migration=_report_to_response(view.migration) if view.migration else None,
        total=view.total,
    )


@router.post("/{kind}/migrate", response_model=MigrationReportResponse)
async def migrate_board(
    kind: PipelineKind,
    migrator: LegacyStatusMigrator = Depends(get_migrator),
) -> MigrationReportResponse:
    """Rewrite retired stage ids of a pipeline."""
    return _report_to_response(await migrator.run(kind))


@router.post(
    "/{kind}/items",
    response_model=PipelineItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_item(
    kind: PipelineKind,
    request: CreateItemRequest,
    use_case: ManageItemUseCase = Depends(get_manage_item_use_case),
    respond: _ItemResponder = Depends(),
) -> PipelineItemResponse:
    """Create an item in the pipeline's default (or given) stage."""
    return respond(await use_case.create(kind, request.data))


@router.post(
    "/{kind}/items/{item_id}/transition",
    response_model=PipelineItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def transition_item(
    kind: PipelineKind,
    item_id: str,
    request: TransitionRequest,
    use_case: ManageItemUseCase = Depends(get_manage_item_use_case),
    respond: _ItemResponder = Depends(),
) -> PipelineItemResponse:
    """Move an item to another stage."""
    return respond(await use_case.transition(kind, item_id, request.stage))


@router.post(
    "/{kind}/items/{item_id}/completion",
    response_model=PipelineItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def toggle_completion(
    kind: PipelineKind,
    item_id: str,
    use_case: ManageItemUseCase = Depends(get_manage_item_use_case),
    respond: _ItemResponder = Depends(),
) -> PipelineItemResponse:
    """Toggle completion of a task."""
    return respond(await use_case.toggle_completion(kind, item_id))


@router.put(
    "/{kind}/items/{item_id}/urgency",
    response_model=PipelineItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def set_urgency(
    kind: PipelineKind,
    item_id: str,
    request: UrgencyRequest,
    use_case: ManageItemUseCase = Depends(get_manage_item_use_case),
    respond: _ItemResponder = Depends(),
) -> PipelineItemResponse:
    """Set or clear the follow-up offset; a change restarts the countdown."""
    return respond(await use_case.set_urgency(kind, item_id, request.days))


@router.post(
    "/{kind}/items/{item_id}/archive",
    response_model=PipelineItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def archive_item(
    kind: PipelineKind,
    item_id: str,
    request: ArchiveRequest | None = None,
    use_case: ManageItemUseCase = Depends(get_manage_item_use_case),
    respond: _ItemResponder = Depends(),
) -> PipelineItemResponse:
    """Archive a scouted player."""
    reason = request.reason if request else None
    return respond(await use_case.archive(kind, item_id, reason))


@router.post(
    "/{kind}/items/{item_id}/restore",
    response_model=PipelineItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def restore_item(
    kind: PipelineKind,
    item_id: str,
    use_case: ManageItemUseCase = Depends(get_manage_item_use_case),
    respond: _ItemResponder = Depends(),
) -> PipelineItemResponse:
    """Restore an archived player."""
    return respond(await use_case.restore(kind, item_id))


@router.delete(
    "/{kind}/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_item(
    kind: PipelineKind,
    item_id: str,
    use_case: ManageItemUseCase = Depends(get_manage_item_use_case),
) -> Response:
    """Delete an item."""
    await use_case.delete(kind, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/scouting/items/{item_id}/agent",
    response_model=AgentRefreshResponse,
    responses={404: {"model": ErrorResponse}},
)
async def refresh_agent(
    item_id: str,
    use_case: RefreshAgentUseCase = Depends(get_refresh_agent_use_case),
) -> AgentRefreshResponse:
    """Refresh the player's agent from the linked Transfermarkt profile."""
    result = await use_case.execute(item_id)
    return AgentRefreshResponse(
        item_id=item_id,
        refreshed=result.refreshed,
        agent_name=result.record.get("agent_name") or None,
        agent_updated_at=parse_timestamp(result.record.get("agent_updated_at"), assume_tz=UTC),
    )
