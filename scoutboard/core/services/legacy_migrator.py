"""
Legacy status migration.

Rewrites records whose stage still uses a retired vocabulary. Runs before
each full board fetch; a second run over the same data issues no writes.
"""

from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from scoutboard.config import get_logger
from scoutboard.core.entities.event import BoardEvent, BoardEventType
from scoutboard.core.entities.pipeline import (
    MigrationRule,
    PipelineDefinition,
    PipelineKind,
)
from scoutboard.core.interfaces.storage import IRecordStore
from scoutboard.core.services.event_channel import EventChannel
from scoutboard.core.services.stage_registry import StageRegistry

logger = get_logger(__name__)


@dataclass
class MigrationReport:
    """Outcome of one migration pass."""

    scanned: int = 0
    migrated: int = 0
    failed: int = 0
    failed_ids: list[str] = field(default_factory=list)

    def merge(self, other: "MigrationReport") -> "MigrationReport":
        return MigrationReport(
            scanned=self.scanned + other.scanned,
            migrated=self.migrated + other.migrated,
            failed=self.failed + other.failed,
            failed_ids=self.failed_ids + other.failed_ids,
        )


class LegacyStatusMigrator:
    """
    Best-effort normalizer for retired stage ids.

    Individual write failures are logged and counted, never raised.
    """

    def __init__(
        self,
        store: IRecordStore,
        registry: StageRegistry,
        events: EventChannel | None = None,
    ):
        self._store = store
        self._registry = registry
        self._events = events

    async def migrate(
        self,
        records: Sequence[MutableMapping[str, Any]],
        mapping: Mapping[str, MigrationRule | str | Mapping[str, Any]],
        definition: PipelineDefinition,
    ) -> MigrationReport:
        """
        Migrate records whose stage is a key of ``mapping``.

        Each matching record gets exactly one update. Successfully updated
        records are patched in place, so running again over the same list
        finds nothing to do.

        Args:
            records: Raw records of ``definition.collection``.
            mapping: Retired stage id -> target stage id, or a mapping with a
                ``stage`` key plus extra fields to overwrite.
            definition: Pipeline the records belong to.

        Returns:
            Counts of scanned, migrated and failed records.
        """
        rules = {old: MigrationRule.parse(rule) for old, rule in mapping.items()}
        for old, rule in rules.items():
            if not self._registry.is_valid_stage(definition.kind, rule.stage):
                raise ValueError(
                    f"Migration target '{rule.stage}' for '{old}' is not a "
                    f"{definition.kind.value} stage"
                )

        report = MigrationReport(scanned=len(records))

        for record in records:
            current = record.get(definition.stage_field)
            rule = rules.get(current) if isinstance(current, str) else None
            if rule is None:
                continue

            record_id = str(record.get("id"))
            patch = rule.patch(definition.stage_field)
            try:
                await self._store.update(definition.collection, record_id, patch)
            except Exception:
                logger.warning(
                    "legacy_status_migration_failed",
                    collection=definition.collection,
                    record_id=record_id,
                    from_stage=current,
                    exc_info=True,
                )
                report.failed += 1
                report.failed_ids.append(record_id)
                continue

            record.update(patch)
            report.migrated += 1
            logger.debug(
                "legacy_status_migrated",
                collection=definition.collection,
                record_id=record_id,
                from_stage=current,
                to_stage=rule.stage,
            )

        if report.migrated or report.failed:
            logger.info(
                "legacy_migration_complete",
                kind=definition.kind.value,
                scanned=report.scanned,
                migrated=report.migrated,
                failed=report.failed,
            )
        return report

    async def run(self, kind: PipelineKind | str) -> MigrationReport:
        """
        Fetch and migrate all records of a pipeline that carry a retired stage.

        Fetch failures are logged and leave the report empty for that stage
        id; the board read that follows is never blocked.
        """
        definition = self._registry.definition(kind)
        report = MigrationReport()
        if not definition.legacy_stages:
            return report

        for old in definition.legacy_stages:
            try:
                records = await self._store.fetch_all(
                    definition.collection, {definition.stage_field: old}
                )
            except Exception:
                logger.warning(
                    "legacy_migration_fetch_failed",
                    collection=definition.collection,
                    stage=old,
                    exc_info=True,
                )
                continue
            if records:
                report = report.merge(
                    await self.migrate(records, definition.legacy_stages, definition)
                )

        if report.migrated and self._events is not None:
            self._events.publish(
                BoardEvent(
                    type=BoardEventType.MIGRATED,
                    kind=definition.kind,
                    payload={"migrated": report.migrated, "failed": report.failed},
                )
            )
        return report
