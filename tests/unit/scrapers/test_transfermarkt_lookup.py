"""Unit tests for TransfermarktAgentLookup.

Tests cover:
- URL validation (supports_url)
- Agent extraction from profile HTML variants
- Retry logic with backoff
- Error classification (network / blocked)
- Proxy prefix handling
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from scoutboard.core.exceptions import FetchBlockedError, FetchNetworkError
from scoutboard.infrastructure.clock import FixedClock
from scoutboard.infrastructure.enrichment.transfermarkt import TransfermarktAgentLookup

PROFILE = "https://www.transfermarkt.de/jonas-muller/profil/spieler/123"
CLIENT = "scoutboard.infrastructure.enrichment.transfermarkt.httpx.AsyncClient"


@pytest.fixture
def fetcher():
    """Create a lookup with zero backoff for fast tests."""
    return TransfermarktAgentLookup(timeout=5.0, max_retries=3, backoff_delays=[0, 0, 0])


def _response(status_code: int = 200, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status = MagicMock()
    return response


def _client(**get_kwargs) -> AsyncMock:
    mock_client = AsyncMock()
    for name, value in get_kwargs.items():
        setattr(mock_client.get, name, value)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


class TestSupportsUrl:
    """Tests for URL validation."""

    @pytest.mark.parametrize(
        "url",
        [
            PROFILE,
            "https://transfermarkt.com/x/profil/spieler/1",
            "http://www.transfermarkt.at/x",
        ],
    )
    def test_supported(self, fetcher, url):
        assert fetcher.supports_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "ftp://www.transfermarkt.de/x",
            "https://www.transfermarkt.de.evil.com/x",
            "https://www.kicker.de/spieler",
            "not a url",
        ],
    )
    def test_unsupported(self, fetcher, url):
        assert not fetcher.supports_url(url)


class TestExtractAgent:
    """Tests for HTML parsing."""

    def test_label_followed_by_value(self):
        html = """
        <ul>
          <li><span>Spielerberater:</span><span><a href="/b">ProSoccer GmbH</a></span></li>
        </ul>
        """
        assert TransfermarktAgentLookup.extract_agent(html) == "ProSoccer GmbH"

    def test_definition_list(self):
        html = "<dl><dt>Berater:</dt><dd>  Max   Mustermann </dd></dl>"
        assert TransfermarktAgentLookup.extract_agent(html) == "Max Mustermann"

    def test_data_attribute(self):
        html = '<div data-agent="Stellar Group">Stellar Group</div>'
        assert TransfermarktAgentLookup.extract_agent(html) == "Stellar Group"

    def test_json_field(self):
        html = '<script>window.player = {"agent": "Rogon Sportmanagement"};</script>'
        assert TransfermarktAgentLookup.extract_agent(html) == "Rogon Sportmanagement"

    def test_class_fallback(self):
        html = '<p class="player-agent-name">SportsTotal</p>'
        assert TransfermarktAgentLookup.extract_agent(html) == "SportsTotal"

    def test_placeholder_means_no_agent(self):
        html = "<li><span>Spielerberater:</span><span>keine Angabe</span></li>"
        assert TransfermarktAgentLookup.extract_agent(html) is None

    def test_nothing_found(self):
        assert TransfermarktAgentLookup.extract_agent("<html><body>Profil</body></html>") is None


class TestRetryLogic:
    """Tests for retry with backoff."""

    async def test_succeeds_on_first_attempt(self, fetcher):
        html = "<li><span>Spielerberater:</span><span>ProSoccer</span></li>"
        mock_client = _client(return_value=_response(text=html))

        with patch(CLIENT, return_value=mock_client):
            agent = await fetcher.lookup(PROFILE)

        assert agent is not None
        assert agent.name == "ProSoccer"
        assert agent.source_url == PROFILE
        assert mock_client.get.call_count == 1

    async def test_retries_on_blocked_then_succeeds(self, fetcher):
        mock_client = _client(
            side_effect=[_response(429), _response(text='{"agent": "X Sports"}')]
        )

        with patch(CLIENT, return_value=mock_client):
            agent = await fetcher.lookup(PROFILE)

        assert agent.name == "X Sports"
        assert mock_client.get.call_count == 2

    async def test_blocked_exhausts_retries(self, fetcher):
        mock_client = _client(return_value=_response(403))

        with patch(CLIENT, return_value=mock_client):
            with pytest.raises(FetchBlockedError):
                await fetcher.lookup(PROFILE)

        assert mock_client.get.call_count == 3

    async def test_timeout_is_network_error(self, fetcher):
        mock_client = _client(side_effect=httpx.ReadTimeout("Read timed out"))

        with patch(CLIENT, return_value=mock_client):
            with pytest.raises(FetchNetworkError) as exc_info:
                await fetcher.lookup(PROFILE)

        assert "Timeout" in exc_info.value.message

    async def test_connect_error_is_network_error(self, fetcher):
        mock_client = _client(side_effect=httpx.ConnectError("Connection refused"))

        with patch(CLIENT, return_value=mock_client):
            with pytest.raises(FetchNetworkError):
                await fetcher.lookup(PROFILE)

        assert mock_client.get.call_count == 3

    async def test_no_agent_listed(self, fetcher):
        mock_client = _client(return_value=_response(text="<html></html>"))

        with patch(CLIENT, return_value=mock_client):
            assert await fetcher.lookup(PROFILE) is None


class TestProxy:
    """Tests for the optional proxy prefix."""

    async def test_url_is_encoded_onto_prefix(self):
        fetcher = TransfermarktAgentLookup(proxy_url="https://proxy.local/raw?url=")
        mock_client = _client(return_value=_response(text="<html></html>"))

        with patch(CLIENT, return_value=mock_client):
            await fetcher.lookup(PROFILE)

        requested = mock_client.get.call_args.args[0]
        assert requested.startswith("https://proxy.local/raw?url=https%3A%2F%2Fwww.transfermarkt.de")


class TestFetchedAt:
    """The lookup stamps results with its injected clock."""

    async def test_fetched_at_comes_from_clock(self):
        clock = FixedClock(datetime(2024, 6, 15, 8, 30, tzinfo=UTC))
        fetcher = TransfermarktAgentLookup(max_retries=1, clock=clock)
        html = "<li><span>Spielerberater:</span><span>ProSoccer</span></li>"
        mock_client = _client(return_value=_response(text=html))

        with patch(CLIENT, return_value=mock_client):
            agent = await fetcher.lookup(PROFILE)

        assert agent is not None
        assert agent.fetched_at == clock.now()
