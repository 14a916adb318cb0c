"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

import pytest

from scoutboard.application.services import reset_services
from scoutboard.core.services import StageRegistry, build_default_registry
from scoutboard.infrastructure.clock import FixedClock

BERLIN = ZoneInfo("Europe/Berlin")

# 12:00 local time in Berlin (summer time)
NOW = datetime(2024, 6, 15, 10, 0, tzinfo=UTC)
TODAY = date(2024, 6, 15)


@pytest.fixture(autouse=True)
def _reset_singletons() -> Generator[None, None, None]:
    """Every test starts with fresh service singletons."""
    reset_services()
    yield
    reset_services()


@pytest.fixture
def tz() -> ZoneInfo:
    """Board timezone."""
    return BERLIN


@pytest.fixture
def today() -> date:
    """Reference calendar day."""
    return TODAY


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at the reference instant."""
    return FixedClock(NOW)


@pytest.fixture
def registry() -> StageRegistry:
    """Registry with the scouting, transfer and task pipelines."""
    return build_default_registry()


@pytest.fixture
def scouting_record() -> dict:
    """Sample scouted player record."""
    return {
        "id": "p1",
        "first_name": "Jonas",
        "last_name": "Müller",
        "club": "FC Augsburg U19",
        "position": "ZM, ST",
        "birth_date": "2006-03-14",
        "rating": "A",
        "status": "gesichtet",
        "scout_id": "u1",
        "archived": False,
        "created_at": "2024-06-01T09:00:00+00:00",
    }


@pytest.fixture
def transfer_record() -> dict:
    """Sample transfer-club interest record."""
    return {
        "id": "t1",
        "player_id": "p1",
        "club_name": "SC Freiburg",
        "advisor_name": "Anna",
        "status": "offen",
        "reminder_days": 3,
        "created_at": "2024-06-15T08:00:00+00:00",
        "updated_at": "2024-06-15T08:00:00+00:00",
    }


@pytest.fixture
def task_record() -> dict:
    """Sample task record."""
    return {
        "id": "k1",
        "title": "Vertrag prüfen",
        "description": "Unterlagen vom Verein",
        "priority": "high",
        "due_date": "2024-06-14",
        "user_id": "u1",
        "completed": False,
        "completed_at": None,
        "created_at": "2024-06-10T08:00:00+00:00",
    }
