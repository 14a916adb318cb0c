"""Abstract interface for external agent lookups."""

from abc import ABC, abstractmethod

from scoutboard.core.entities.agent import AgentInfo


class IAgentLookup(ABC):
    """
    Looks up a player's agent on an external profile page.

    Implementations raise ``EnrichmentError`` subclasses on failure.
    """

    @abstractmethod
    def supports_url(self, url: str) -> bool:
        """Check if this lookup can handle the given profile URL."""
        pass

    @abstractmethod
    async def lookup(self, url: str) -> AgentInfo | None:
        """Fetch the profile page and return the agent, or None if none is listed."""
        pass
