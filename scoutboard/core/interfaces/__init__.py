"""Core interfaces (ports) implemented by the infrastructure layer."""

from scoutboard.core.interfaces.clock import IClock
from scoutboard.core.interfaces.enrichment import IAgentLookup
from scoutboard.core.interfaces.storage import IRecordStore

__all__ = [
    "IRecordStore",
    "IClock",
    "IAgentLookup",
]
