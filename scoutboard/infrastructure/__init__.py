"""Infrastructure layer implementations."""

from scoutboard.infrastructure import enrichment, storage

__all__ = ["storage", "enrichment"]
