"""Tests for RefreshAgentUseCase."""

from unittest.mock import AsyncMock

import pytest

from scoutboard.application.use_cases import RefreshAgentUseCase
from scoutboard.core.exceptions import RecordNotFoundError


@pytest.fixture
def player() -> dict:
    return {"id": "p1", "transfermarkt_url": "https://www.transfermarkt.de/x/profil/spieler/1"}


class TestRefreshAgentUseCase:
    """Tests for on-demand agent refresh."""

    async def test_refreshed(self, player):
        store = AsyncMock()
        store.get.return_value = player
        enrichment = AsyncMock()
        enrichment.refresh.return_value = {**player, "agent_name": "ProSoccer"}

        result = await RefreshAgentUseCase(store=store, enrichment=enrichment).execute("p1")

        store.get.assert_awaited_once_with("scouted_players", "p1")
        assert result.refreshed is True
        assert result.record["agent_name"] == "ProSoccer"

    async def test_not_refreshed_returns_stored_record(self, player):
        store = AsyncMock()
        store.get.return_value = player
        enrichment = AsyncMock()
        enrichment.refresh.return_value = None

        result = await RefreshAgentUseCase(store=store, enrichment=enrichment).execute("p1")

        assert result.refreshed is False
        assert result.record is player

    async def test_missing_player(self):
        store = AsyncMock()
        store.get.return_value = None

        with pytest.raises(RecordNotFoundError):
            await RefreshAgentUseCase(store=store, enrichment=AsyncMock()).execute("p1")
