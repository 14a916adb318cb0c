"""
Transfermarkt profile page agent lookup.

Finds the "Spielerberater" of a player on a Transfermarkt profile page.
Includes retry with backoff, user-agent rotation and structured error
classification (network / blocked / parse).
"""

import asyncio
import random
import re
from urllib.parse import quote, urlparse

import httpx
from bs4 import BeautifulSoup, Tag

from scoutboard.config import get_logger
from scoutboard.core.entities.agent import AgentInfo
from scoutboard.core.exceptions import (
    FetchBlockedError,
    FetchNetworkError,
    FetchParseError,
)
from scoutboard.core.interfaces.clock import IClock
from scoutboard.core.interfaces.enrichment import IAgentLookup
from scoutboard.infrastructure.clock import SystemClock

logger = get_logger(__name__)

_TRANSFERMARKT_BARE_DOMAINS = {
    "transfermarkt.de",
    "transfermarkt.com",
    "transfermarkt.at",
    "transfermarkt.ch",
    "transfermarkt.co.uk",
    "transfermarkt.es",
    "transfermarkt.it",
    "transfermarkt.fr",
}

_TRANSFERMARKT_DOMAINS = _TRANSFERMARKT_BARE_DOMAINS | {
    f"www.{d}" for d in _TRANSFERMARKT_BARE_DOMAINS
}

_USER_AGENTS = [
    (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_2) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) "
        "Version/17.2 Safari/605.1.15"
    ),
    (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) "
        "Gecko/20100101 Firefox/121.0"
    ),
]

_BLOCKED_STATUS_CODES = {403, 429, 503}

_AGENT_LABELS = ("spielerberater:", "berater:", "player agent:", "agent:")
_AGENT_JSON_PATTERN = re.compile(r'"agent"\s*:\s*"([^"]+)"', re.IGNORECASE)
_AGENT_CLASS_PATTERN = re.compile(r"agent", re.IGNORECASE)

# Transfermarkt's placeholder when no agent is registered
_NO_AGENT_VALUES = {"", "-", "keine angabe", "ohne berater", "no agent", "unknown"}

_DEFAULT_BACKOFF_DELAYS = [1.0, 2.0, 4.0]


class TransfermarktAgentLookup(IAgentLookup):
    """Looks up the agent on Transfermarkt player profiles.

    Pages can optionally be fetched through a proxy prefix; the profile
    URL is appended URL-encoded (``https://proxy/raw?url=``).
    """

    def __init__(
        self,
        timeout: float = 15.0,
        max_retries: int = 2,
        backoff_delays: list[float] | None = None,
        proxy_url: str | None = None,
        clock: IClock | None = None,
    ):
        self._timeout = timeout
        self._clock = clock or SystemClock()
        self._max_retries = max(1, max_retries)
        self._backoff_delays = backoff_delays or list(_DEFAULT_BACKOFF_DELAYS)
        self._proxy_url = proxy_url

    def supports_url(self, url: str) -> bool:
        """Check if URL points at a Transfermarkt page."""
        try:
            parsed = urlparse(url)
        except ValueError:
            return False
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            return False
        return parsed.hostname.lower() in _TRANSFERMARKT_DOMAINS

    async def lookup(self, url: str) -> AgentInfo | None:
        """Fetch the profile page and extract the agent name."""
        html = await self._fetch_html(url)
        try:
            name = self.extract_agent(html)
        except Exception as exc:
            raise FetchParseError(url, str(exc)) from exc

        if name is None:
            logger.info("agent_not_listed", url=url)
            return None
        return AgentInfo(name=name, source_url=url, fetched_at=self._clock.now())

    def _request_url(self, url: str) -> str:
        if not self._proxy_url:
            return url
        return f"{self._proxy_url}{quote(url, safe='')}"

    async def _fetch_html(self, url: str) -> str:
        """Fetch raw HTML with retry and backoff."""
        last_error: Exception | None = None
        request_url = self._request_url(url)

        for attempt in range(1, self._max_retries + 1):
            logger.debug("agent_fetch_attempt", url=url, attempt=attempt)
            try:
                async with httpx.AsyncClient(
                    timeout=self._timeout,
                    follow_redirects=True,
                    headers={
                        "User-Agent": random.choice(_USER_AGENTS),  # noqa: S311
                        "Accept-Language": "de-DE,de;q=0.9,en;q=0.8",
                        "Accept": "text/html,application/xhtml+xml,*/*;q=0.8",
                    },
                ) as client:
                    response = await client.get(request_url)

                    if response.status_code in _BLOCKED_STATUS_CODES:
                        last_error = FetchBlockedError(url, response.status_code)
                        logger.warning(
                            "agent_fetch_blocked",
                            url=url,
                            status_code=response.status_code,
                            attempt=attempt,
                        )
                    else:
                        response.raise_for_status()
                        return response.text

            except httpx.TimeoutException:
                last_error = FetchNetworkError(url, f"Timeout after {self._timeout}s")
                logger.warning("agent_fetch_timeout", url=url, attempt=attempt)
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                last_error = FetchNetworkError(url, f"HTTP {status}")
                logger.warning(
                    "agent_fetch_http_error", url=url, attempt=attempt, status_code=status
                )
            except httpx.RequestError as exc:
                last_error = FetchNetworkError(url, str(exc))
                logger.warning(
                    "agent_fetch_network_error", url=url, attempt=attempt, error=str(exc)
                )

            if attempt < self._max_retries:
                delay = self._backoff_delays[min(attempt - 1, len(self._backoff_delays) - 1)]
                await asyncio.sleep(delay)

        logger.error("agent_fetch_retries_exhausted", url=url, max_retries=self._max_retries)
        if last_error is not None:
            raise last_error
        raise FetchNetworkError(url, "All retries exhausted")

    @classmethod
    def extract_agent(cls, html: str) -> str | None:
        """
        Extract the agent name from profile HTML.

        Tried in order: a "Spielerberater:"/"Berater:" label followed by the
        value element, a ``data-agent`` element, an ``"agent"`` JSON field and
        finally any element whose class mentions "agent".
        """
        soup = BeautifulSoup(html, "html.parser")

        for label in soup.find_all(["span", "dt", "th", "li", "div"]):
            text = label.get_text(" ", strip=True).lower()
            if text not in _AGENT_LABELS:
                continue
            value = label.find_next_sibling()
            name = cls._clean(value.get_text(" ", strip=True) if isinstance(value, Tag) else None)
            if name:
                return name

        tagged = soup.find(attrs={"data-agent": True})
        if isinstance(tagged, Tag):
            name = cls._clean(tagged.get_text(" ", strip=True) or str(tagged.get("data-agent")))
            if name:
                return name

        match = _AGENT_JSON_PATTERN.search(html)
        if match:
            name = cls._clean(match.group(1))
            if name:
                return name

        classed = soup.find(class_=_AGENT_CLASS_PATTERN)
        if isinstance(classed, Tag):
            return cls._clean(classed.get_text(" ", strip=True))

        return None

    @staticmethod
    def _clean(value: str | None) -> str | None:
        if value is None:
            return None
        name = " ".join(value.split())
        if name.lower() in _NO_AGENT_VALUES:
            return None
        return name
