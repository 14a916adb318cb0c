"""
Agent enrichment for scouted players.

Best-effort refresh of a player's agent from the profile page linked in the
record. Any failure means "no enrichment available" and never reaches the
caller as an exception.
"""

from collections.abc import Mapping
from datetime import UTC, timedelta
from typing import Any

from scoutboard.config import get_logger
from scoutboard.core.entities.pipeline import PipelineKind, parse_timestamp
from scoutboard.core.interfaces.clock import IClock
from scoutboard.core.interfaces.enrichment import IAgentLookup
from scoutboard.core.interfaces.storage import IRecordStore
from scoutboard.core.services.stage_registry import StageRegistry

logger = get_logger(__name__)

PROFILE_URL_FIELD = "transfermarkt_url"


class AgentEnrichmentService:
    """
    Refreshes ``agent_name`` on scouted player records.

    Each record is looked up at most once per refresh interval, tracked by
    ``agent_updated_at``. Works with the lookup absent (returns None).
    """

    def __init__(
        self,
        store: IRecordStore,
        registry: StageRegistry,
        clock: IClock,
        lookup: IAgentLookup | None = None,
        refresh_interval_hours: int = 24,
    ):
        self._store = store
        self._clock = clock
        self._lookup = lookup
        self._collection = registry.definition(PipelineKind.SCOUTING).collection
        self._interval = timedelta(hours=refresh_interval_hours)

    def is_due(self, record: Mapping[str, Any]) -> bool:
        """Check whether the record's agent info is older than the refresh interval."""
        last = parse_timestamp(record.get("agent_updated_at"), assume_tz=UTC)
        if last is None:
            return True
        return self._clock.now() - last >= self._interval

    async def refresh(self, record: Mapping[str, Any]) -> dict[str, Any] | None:
        """
        Look up and persist the agent of one scouted player.

        Returns:
            The updated record, or None when nothing was refreshed.
        """
        if self._lookup is None:
            return None

        record_id = record.get("id")
        url = str(record.get(PROFILE_URL_FIELD) or "").strip()
        if not record_id or not url or not self._lookup.supports_url(url):
            return None

        if not self.is_due(record):
            logger.debug("agent_refresh_skipped_recent", record_id=record_id)
            return None

        try:
            agent = await self._lookup.lookup(url)
        except Exception:
            logger.warning("agent_lookup_failed", record_id=record_id, url=url, exc_info=True)
            return None

        patch: dict[str, Any] = {"agent_updated_at": self._clock.now().isoformat()}
        if agent is not None and agent.name and agent.name != record.get("agent_name"):
            patch["agent_name"] = agent.name

        try:
            await self._store.update(self._collection, str(record_id), patch)
        except Exception:
            logger.warning("agent_update_failed", record_id=record_id, exc_info=True)
            return None

        logger.info(
            "agent_refreshed",
            record_id=record_id,
            changed="agent_name" in patch,
        )
        return {**record, **patch}
