"""Tests for LegacyStatusMigrator."""

from unittest.mock import AsyncMock

import pytest

from scoutboard.core.entities.event import BoardEventType
from scoutboard.core.exceptions import PersistenceFailedError
from scoutboard.core.services import EventChannel, LegacyStatusMigrator
from scoutboard.core.services.stage_registry import SCOUTING


@pytest.fixture
def store():
    store = AsyncMock()
    store.update.return_value = None
    store.fetch_all.return_value = []
    return store


@pytest.fixture
def migrator(store, registry) -> LegacyStatusMigrator:
    return LegacyStatusMigrator(store, registry)


class TestMigrate:
    """Tests for migrating an in-memory record set."""

    async def test_simple_rename(self, migrator, store):
        records = [{"id": "p1", "status": "zu_kontaktieren", "club": "FCA"}]

        report = await migrator.migrate(
            records, {"zu_kontaktieren": "in_beobachtung"}, SCOUTING
        )

        assert report.migrated == 1
        store.update.assert_awaited_once_with(
            "scouted_players", "p1", {"status": "in_beobachtung"}
        )
        assert records[0] == {"id": "p1", "status": "in_beobachtung", "club": "FCA"}

    async def test_archiviert_sets_archived(self, migrator, store):
        records = [{"id": "p2", "status": "archiviert"}]

        await migrator.migrate(
            records, {"archiviert": {"stage": "gesichtet", "archived": True}}, SCOUTING
        )

        store.update.assert_awaited_once_with(
            "scouted_players", "p2", {"status": "gesichtet", "archived": True}
        )
        assert records[0]["status"] == "gesichtet"
        assert records[0]["archived"] is True

    async def test_second_run_issues_no_writes(self, migrator, store, registry):
        records = [
            {"id": "p1", "status": "zu_kontaktieren"},
            {"id": "p2", "status": "in_kontakt"},
            {"id": "p3", "status": "gesichtet"},
        ]

        first = await migrator.migrate(records, SCOUTING.legacy_stages, SCOUTING)
        second = await migrator.migrate(records, SCOUTING.legacy_stages, SCOUTING)

        assert first.migrated == 2
        assert second.migrated == 0
        assert store.update.await_count == 2
        assert all(registry.is_valid_stage("scouting", r["status"]) for r in records)

    async def test_write_failure_is_counted_not_raised(self, migrator, store):
        store.update.side_effect = [
            PersistenceFailedError("update", "scouted_players", "p1"),
            None,
        ]
        records = [
            {"id": "p1", "status": "in_kontakt"},
            {"id": "p2", "status": "in_kontakt"},
        ]

        report = await migrator.migrate(records, {"in_kontakt": "kontaktiert"}, SCOUTING)

        assert report.scanned == 2
        assert report.migrated == 1
        assert report.failed == 1
        assert report.failed_ids == ["p1"]
        assert records[0]["status"] == "in_kontakt"
        assert records[1]["status"] == "kontaktiert"

    async def test_invalid_target_rejected(self, migrator, store):
        with pytest.raises(ValueError):
            await migrator.migrate([{"id": "p1", "status": "x"}], {"x": "nowhere"}, SCOUTING)
        store.update.assert_not_awaited()


class TestRun:
    """Tests for fetching and migrating a whole pipeline."""

    async def test_fetches_by_retired_stage(self, migrator, store):
        store.fetch_all.side_effect = lambda collection, filters: (
            [{"id": "p9", "status": "archiviert"}] if filters == {"status": "archiviert"} else []
        )

        report = await migrator.run("scouting")

        assert report.migrated == 1
        assert store.fetch_all.await_count == 3
        store.update.assert_awaited_once_with(
            "scouted_players", "p9", {"status": "gesichtet", "archived": True}
        )

    async def test_pipeline_without_legacy_stages(self, migrator, store):
        report = await migrator.run("transfer")
        assert report.scanned == 0
        store.fetch_all.assert_not_awaited()

    async def test_fetch_failure_is_skipped(self, migrator, store):
        store.fetch_all.side_effect = RuntimeError("offline")
        report = await migrator.run("scouting")
        assert report.migrated == 0
        assert report.failed == 0


class TestMigrationEvents:
    """Tests for the migrated notification."""

    async def test_publishes_when_records_changed(self, store, registry):
        events = EventChannel()
        received = []
        events.subscribe(received.append, BoardEventType.MIGRATED)
        store.fetch_all.side_effect = lambda collection, filters: (
            [{"id": "p1", "status": "in_kontakt"}] if filters == {"status": "in_kontakt"} else []
        )

        await LegacyStatusMigrator(store, registry, events=events).run("scouting")
        store.fetch_all.side_effect = lambda collection, filters: []
        await LegacyStatusMigrator(store, registry, events=events).run("scouting")

        assert len(received) == 1
        assert received[0].payload == {"migrated": 1, "failed": 0}
