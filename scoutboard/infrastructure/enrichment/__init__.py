"""External profile lookups used to enrich scouted players."""

from scoutboard.infrastructure.enrichment.transfermarkt import TransfermarktAgentLookup

__all__ = ["TransfermarktAgentLookup"]
