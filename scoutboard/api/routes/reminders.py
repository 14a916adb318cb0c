"""
Reminder feed endpoints.
"""

from fastapi import APIRouter, Depends, status

from scoutboard.api.dependencies import get_reminder_feed_use_case
from scoutboard.api.routes.boards import urgency_to_response
from scoutboard.application.dto.requests import CreateReminderRequest
from scoutboard.application.dto.responses import (
    ErrorResponse,
    ReminderFeedResponse,
    ReminderResponse,
    SourceRefResponse,
    ToggleReminderResponse,
)
from scoutboard.application.use_cases import ReminderFeedUseCase
from scoutboard.core.entities.reminder import ReminderView

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


def _view_to_response(view: ReminderView) -> ReminderResponse:
    """Convert a reminder view to its response DTO."""
    source_ref = None
    if view.source_ref is not None:
        source_ref = SourceRefResponse(
            kind=view.source_ref.kind,
            id=view.source_ref.id,
            context=dict(view.source_ref.context),
        )
    return ReminderResponse(
        id=view.id,
        title=view.title,
        target_date=view.target_date,
        completed=view.completed,
        completed_at=view.completed_at,
        subtitle=view.subtitle,
        synthesized=view.synthesized,
        source_ref=source_ref,
        urgency=urgency_to_response(view.urgency),
    )


@router.get("/feed", response_model=ReminderFeedResponse)
async def get_feed(
    user_id: str | None = None,
    include_completed: bool = False,
    use_case: ReminderFeedUseCase = Depends(get_reminder_feed_use_case),
) -> ReminderFeedResponse:
    """
    Merged reminder feed.

    Stored reminders and follow-ups derived from transfer interest, ordered by
    urgency. Completed reminders are limited to today's unless
    ``include_completed`` is set.
    """
    feed = await use_case.build_feed(user_id=user_id, include_completed=include_completed)
    return ReminderFeedResponse(
        due_now=[_view_to_response(v) for v in feed.due_now],
        upcoming=[_view_to_response(v) for v in feed.upcoming],
        completed=[_view_to_response(v) for v in feed.completed],
        total=len(feed.items),
    )


@router.post(
    "",
    response_model=ReminderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_reminder(
    request: CreateReminderRequest,
    use_case: ReminderFeedUseCase = Depends(get_reminder_feed_use_case),
) -> ReminderResponse:
    """Create a new reminder."""
    view = await use_case.create(
        title=request.title,
        due_date=request.due_date,
        user_id=request.user_id,
        source_type=request.source_type,
        source_id=request.source_id,
        player_name=request.player_name,
        club_name=request.club_name,
    )
    return _view_to_response(view)


@router.post(
    "/{reminder_id}/toggle",
    response_model=ToggleReminderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def toggle_reminder(
    reminder_id: str,
    use_case: ReminderFeedUseCase = Depends(get_reminder_feed_use_case),
) -> ToggleReminderResponse:
    """Toggle a reminder. Synthesized reminders are not persisted."""
    result = await use_case.toggle(reminder_id)
    return ToggleReminderResponse(
        reminder=_view_to_response(result.reminder),
        persisted=result.persisted,
    )
