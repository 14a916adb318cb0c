"""Tests for AgentEnrichmentService."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from scoutboard.core.entities.agent import AgentInfo
from scoutboard.core.exceptions import FetchBlockedError
from scoutboard.core.services import AgentEnrichmentService

PROFILE = "https://www.transfermarkt.de/jonas-muller/profil/spieler/1"


@pytest.fixture
def lookup():
    lookup = MagicMock()
    lookup.supports_url.return_value = True
    lookup.lookup = AsyncMock(
        return_value=AgentInfo(
            name="ProSoccer GmbH",
            source_url=PROFILE,
            fetched_at=datetime(2024, 6, 15, tzinfo=UTC),
        )
    )
    return lookup


@pytest.fixture
def store():
    store = AsyncMock()
    store.update.return_value = None
    return store


@pytest.fixture
def service(store, registry, clock, lookup) -> AgentEnrichmentService:
    return AgentEnrichmentService(store, registry, clock, lookup=lookup)


@pytest.fixture
def player() -> dict:
    return {"id": "p1", "last_name": "Müller", "transfermarkt_url": PROFILE}


class TestRefresh:
    """Tests for refreshing one player."""

    async def test_new_agent_is_stored(self, service, store, clock, player):
        result = await service.refresh(player)

        store.update.assert_awaited_once_with(
            "scouted_players",
            "p1",
            {"agent_updated_at": clock.now().isoformat(), "agent_name": "ProSoccer GmbH"},
        )
        assert result["agent_name"] == "ProSoccer GmbH"
        assert result["last_name"] == "Müller"

    async def test_unchanged_agent_only_touches_timestamp(self, service, store, player):
        player["agent_name"] = "ProSoccer GmbH"
        await service.refresh(player)
        assert "agent_name" not in store.update.await_args.args[2]

    async def test_no_agent_listed(self, service, store, lookup, player):
        lookup.lookup.return_value = None
        result = await service.refresh(player)
        assert result is not None
        assert "agent_name" not in store.update.await_args.args[2]

    async def test_recent_refresh_skipped(self, service, store, clock, player):
        player["agent_updated_at"] = (clock.now() - timedelta(hours=3)).isoformat()
        assert await service.refresh(player) is None
        store.update.assert_not_awaited()

    async def test_stale_refresh_runs(self, service, clock, player):
        player["agent_updated_at"] = (clock.now() - timedelta(hours=30)).isoformat()
        assert service.is_due(player)
        assert await service.refresh(player) is not None

    async def test_lookup_failure_is_swallowed(self, service, store, lookup, player):
        lookup.lookup.side_effect = FetchBlockedError(PROFILE, 429)
        assert await service.refresh(player) is None
        store.update.assert_not_awaited()

    async def test_store_failure_is_swallowed(self, service, store, player):
        store.update.side_effect = RuntimeError("locked")
        assert await service.refresh(player) is None

    async def test_unsupported_or_missing_url(self, service, lookup, player):
        lookup.supports_url.return_value = False
        assert await service.refresh(player) is None
        assert await service.refresh({"id": "p2"}) is None
        lookup.lookup.assert_not_awaited()

    async def test_without_lookup(self, store, registry, clock, player):
        service = AgentEnrichmentService(store, registry, clock)
        assert await service.refresh(player) is None
        store.update.assert_not_awaited()
