"""Tests for ReminderFeedUseCase."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from scoutboard.application.use_cases import ReminderFeedUseCase
from scoutboard.config import reset_settings
from scoutboard.core.exceptions import (
    PersistenceFailedError,
    RecordNotFoundError,
    ValidationError,
)
from scoutboard.core.services import PipelineBoard, ReminderProjector


@pytest.fixture
def reminder_row() -> dict:
    return {
        "id": "r1",
        "user_id": "u1",
        "title": "Berater anrufen",
        "due_date": "2024-06-15",
        "completed": False,
        "completed_at": None,
    }


@pytest.fixture
def store(reminder_row, transfer_record):
    collections = {
        "reminders": [reminder_row],
        "transfer_clubs": [transfer_record],
        "player_details": [{"id": "p1", "first_name": "Jonas", "last_name": "Müller"}],
    }
    store = AsyncMock()
    store.fetch_all.side_effect = lambda collection, filters=None: collections.get(collection, [])
    store.get.side_effect = lambda collection, record_id: next(
        (r for r in collections.get(collection, []) if r["id"] == record_id), None
    )
    store.update.return_value = None
    store.insert.side_effect = lambda collection, record: {**record, "id": "r2"}
    return store


@pytest.fixture
def user_scope(monkeypatch):
    monkeypatch.setenv("BOARD_SCOPE", "user")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def use_case(store, registry, tz, clock) -> ReminderFeedUseCase:
    return ReminderFeedUseCase(
        store=store,
        registry=registry,
        board=PipelineBoard(registry, tz=tz),
        projector=ReminderProjector(registry, tz=tz),
        clock=clock,
    )


class TestBuildFeed:
    """Tests for the merged feed."""

    async def test_merges_stored_and_synthesized(self, use_case, store):
        feed = await use_case.build_feed(user_id="u1")

        store.fetch_all.assert_any_await("reminders", {"user_id": "u1"})
        store.fetch_all.assert_any_await("transfer_clubs")
        assert [v.id for v in feed.due_now] == ["r1"]
        assert [v.id for v in feed.upcoming] == ["transfer-t1"]
        assert feed.upcoming[0].urgency.days == 3
        assert feed.upcoming[0].subtitle == "Jonas Müller"

    async def test_user_scope_requires_user_id(self, use_case, store, user_scope):
        with pytest.raises(ValidationError) as exc_info:
            await use_case.build_feed()

        assert exc_info.value.details["field"] == "user_id"
        store.fetch_all.assert_not_awaited()

    async def test_user_scope_with_user_id(self, use_case, store, user_scope):
        feed = await use_case.build_feed(user_id="u1")

        store.fetch_all.assert_any_await("reminders", {"user_id": "u1"})
        assert [v.id for v in feed.due_now] == ["r1"]


class TestCreate:
    """Tests for storing reminders."""

    async def test_create(self, use_case, store, clock):
        view = await use_case.create(
            "Vertrag prüfen", date(2024, 6, 14), user_id="u1",
            source_type="transfer", source_id="t1", club_name="SC Freiburg",
        )

        record = store.insert.await_args.args[1]
        assert record["due_date"] == "2024-06-14"
        assert record["created_at"] == clock.now().isoformat()
        assert view.id == "r2"
        assert view.urgency.label == "vor 1 Tag"
        assert view.source_ref.context == {"club_name": "SC Freiburg"}

    async def test_empty_title(self, use_case, store):
        with pytest.raises(ValidationError):
            await use_case.create("   ", date(2024, 6, 14))
        store.insert.assert_not_awaited()

    async def test_store_failure(self, use_case, store):
        store.insert.side_effect = RuntimeError("quota")
        with pytest.raises(PersistenceFailedError):
            await use_case.create("x", date(2024, 6, 14))


class TestToggle:
    """Tests for toggling stored and synthesized reminders."""

    async def test_stored_reminder_is_persisted(self, use_case, store, clock):
        result = await use_case.toggle("r1")

        assert result.persisted is True
        assert result.reminder.completed is True
        store.update.assert_awaited_once_with(
            "reminders", "r1", {"completed": True, "completed_at": clock.now().isoformat()}
        )

    async def test_synthesized_reminder_is_local_only(self, use_case, store):
        result = await use_case.toggle("transfer-t1")

        assert result.persisted is False
        assert result.reminder.completed is True
        assert result.reminder.synthesized is True
        store.update.assert_not_awaited()

    @pytest.mark.parametrize("reminder_id", ["nope", "transfer-missing", "task-k1", "transfer-"])
    async def test_unknown(self, use_case, reminder_id):
        with pytest.raises(RecordNotFoundError):
            await use_case.toggle(reminder_id)
