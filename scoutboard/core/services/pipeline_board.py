"""
Pipeline board projection.

Buckets a record set into the stages of one pipeline, orders each bucket
urgency-first and filters by free text and facets. Pure: the same records
and the same "today" always give the same board.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Any

from scoutboard.config import get_logger
from scoutboard.core.entities.pipeline import (
    PipelineDefinition,
    PipelineItem,
    PipelineKind,
)
from scoutboard.core.services.collation import collation_key
from scoutboard.core.services.stage_registry import StageRegistry
from scoutboard.core.services.temporal_urgency import urgency_for

logger = get_logger(__name__)

RecordLike = Mapping[str, Any] | PipelineItem


@dataclass
class BoardFilter:
    """Free-text search plus multi-select facets.

    ``facets`` maps a facet name to the selected values; an empty selection
    does not restrict.
    """

    search: str = ""
    facets: dict[str, set[str]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.search.strip() and not any(self.facets.values())


class PipelineBoard:
    """
    Projects records of any pipeline kind into ordered stage buckets.

    Malformed records are skipped with a warning; they never abort a
    projection.
    """

    def __init__(self, registry: StageRegistry, tz: tzinfo | None = None):
        self._registry = registry
        self._tz = tz

    def items(
        self, records: Iterable[RecordLike], kind: PipelineKind | str
    ) -> list[PipelineItem]:
        """Interpret records as pipeline items, dropping unreadable ones."""
        definition = self._registry.definition(kind)
        items: list[PipelineItem] = []
        for record in records:
            if isinstance(record, PipelineItem):
                items.append(record)
                continue
            try:
                items.append(PipelineItem.from_record(record, definition))
            except (ValueError, TypeError):
                logger.warning(
                    "board_record_skipped",
                    kind=definition.kind.value,
                    record_id=record.get("id") if isinstance(record, Mapping) else None,
                    exc_info=True,
                )
        return items

    def sort_key(self, item: PipelineItem, today: date) -> tuple:
        """Urgency first (most overdue first), unclassified last, then name."""
        urgency = urgency_for(item, today, self._tz)
        if urgency is None:
            return (1, 0, collation_key(item.secondary_sort_key))
        return (0, urgency.signed_days, collation_key(item.secondary_sort_key))

    def order(self, items: Iterable[PipelineItem], today: date) -> list[PipelineItem]:
        """Stable urgency-first ordering."""
        return sorted(items, key=lambda item: self.sort_key(item, today))

    def project(
        self,
        records: Iterable[RecordLike],
        kind: PipelineKind | str,
        today: date,
    ) -> dict[str, list[PipelineItem]]:
        """
        Bucket records by stage.

        Args:
            records: Raw records or already interpreted items.
            kind: Pipeline the records belong to.
            today: Reference date for urgency ordering.

        Returns:
            One entry per registry stage in registry order, each bucket
            sorted urgency-first. Items with an unknown stage are left out.
        """
        definition = self._registry.definition(kind)
        buckets: dict[str, list[PipelineItem]] = {
            stage.id: [] for stage in self._registry.stages_for(kind)
        }

        for item in self.items(records, kind):
            bucket = buckets.get(item.stage)
            if bucket is None:
                logger.warning(
                    "board_item_unknown_stage",
                    kind=definition.kind.value,
                    item_id=item.id,
                    stage=item.stage,
                )
                continue
            bucket.append(item)

        return {stage_id: self.order(bucket, today) for stage_id, bucket in buckets.items()}

    def filter(
        self,
        records: Iterable[RecordLike],
        kind: PipelineKind | str,
        board_filter: BoardFilter | None = None,
    ) -> list[PipelineItem]:
        """
        Filter items by search text and facets.

        Search is a case-insensitive substring match OR-combined over the
        pipeline's search fields. Facets are AND-combined across facets and
        OR-combined within the selected values of one facet.
        """
        definition = self._registry.definition(kind)
        items = self.items(records, kind)
        if board_filter is None or board_filter.is_empty:
            return items

        needle = board_filter.search.strip().lower()
        return [
            item
            for item in items
            if (not needle or self._matches_search(item.record, definition, needle))
            and self._matches_facets(item.record, definition, board_filter.facets)
        ]

    def facet_values(
        self, records: Iterable[RecordLike], kind: PipelineKind | str
    ) -> dict[str, list[str]]:
        """Distinct values per facet, for building the filter controls."""
        definition = self._registry.definition(kind)
        values: dict[str, set[str]] = {name: set() for name in definition.facets}
        for item in self.items(records, kind):
            for name, extract in definition.facets.items():
                values[name] |= extract(item.record)

        result: dict[str, list[str]] = {}
        for name, found in values.items():
            if name == "birth_year":
                # Newest first
                result[name] = sorted(found, reverse=True)
            else:
                result[name] = sorted(found, key=collation_key)
        return result

    @staticmethod
    def _matches_search(
        record: Mapping[str, Any], definition: PipelineDefinition, needle: str
    ) -> bool:
        for fields in definition.search_fields:
            haystack = " ".join(str(record.get(f) or "") for f in fields).lower()
            if needle in haystack:
                return True
        return False

    @staticmethod
    def _matches_facets(
        record: Mapping[str, Any],
        definition: PipelineDefinition,
        selected: Mapping[str, set[str]],
    ) -> bool:
        for name, wanted in selected.items():
            if not wanted:
                continue
            extract = definition.facets.get(name)
            if extract is None:
                # Unknown facet name: nothing can match
                return False
            if not extract(record) & set(wanted):
                return False
        return True
