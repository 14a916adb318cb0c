"""Tests for calendar-day urgency arithmetic."""

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from scoutboard.core.entities.pipeline import PipelineItem, PipelineKind
from scoutboard.core.entities.urgency import Urgency, UrgencyKind
from scoutboard.core.services.temporal_urgency import (
    classify,
    days_until,
    item_target_date,
    local_date,
    target_date,
    urgency_for,
)


def _transfer_item(created_at: datetime, offset: int | None) -> PipelineItem:
    return PipelineItem(
        id="t1",
        kind=PipelineKind.TRANSFER,
        stage="offen",
        created_at=created_at,
        urgency_offset_days=offset,
    )


class TestDaysUntil:
    """Tests for days_until."""

    @pytest.mark.parametrize("hour", [0, 6, 12, 23])
    def test_same_calendar_day_is_zero(self, hour):
        today = datetime(2024, 6, 15, 8, 30)
        target = datetime.combine(date(2024, 6, 15), time(hour, 59))
        assert days_until(target, today) == 0
        assert classify(days_until(target, today)) == Urgency.today()

    def test_just_after_midnight_is_tomorrow(self):
        today = datetime(2024, 6, 15, 23, 59)
        target = datetime(2024, 6, 16, 0, 1)
        assert days_until(target, today) == 1

    def test_aware_values_use_board_zone(self, tz):
        # 23:30 UTC on the 15th is already the 16th in Berlin
        target = datetime(2024, 6, 15, 23, 30, tzinfo=UTC)
        assert days_until(target, date(2024, 6, 15), tz) == 1
        assert days_until(target, date(2024, 6, 15)) == 0

    def test_across_dst_change(self, tz):
        # Berlin switches to summer time on 2024-03-31
        target = datetime(2024, 4, 1, 0, 30, tzinfo=tz)
        assert days_until(target, date(2024, 3, 30), tz) == 2

    def test_local_date_keeps_naive_wall_clock(self, tz):
        assert local_date(datetime(2024, 6, 15, 23, 30), tz) == date(2024, 6, 15)


class TestClassify:
    """Tests for classify."""

    @pytest.mark.parametrize("n", [1, 2, 17, 365])
    def test_magnitudes_are_positive(self, n):
        assert classify(-n) == Urgency(kind=UrgencyKind.OVERDUE, days=n)
        assert classify(n) == Urgency(kind=UrgencyKind.UPCOMING, days=n)

    def test_zero_is_today(self):
        assert classify(0).kind == UrgencyKind.TODAY

    def test_none_is_rejected(self):
        with pytest.raises(ValueError):
            classify(None)


class TestTargetDate:
    """Tests for target date derivation."""

    def test_created_plus_offset(self, tz):
        created = datetime(2024, 1, 1, tzinfo=UTC)
        assert target_date(created, 5, tz) == date(2024, 1, 6)

    def test_negative_offset_rejected(self):
        with pytest.raises(ValueError):
            target_date(datetime(2024, 1, 1, tzinfo=UTC), -1)

    def test_due_date_wins(self, tz):
        item = _transfer_item(datetime(2024, 1, 1, tzinfo=UTC), 5).model_copy(
            update={"due_date": date(2024, 2, 1)}
        )
        assert item_target_date(item, tz) == date(2024, 2, 1)

    def test_no_offset_no_target(self, tz):
        assert item_target_date(_transfer_item(datetime(2024, 1, 1, tzinfo=UTC), None), tz) is None


class TestUrgencyFor:
    """Worked examples of urgency classification."""

    def test_upcoming(self, tz):
        item = _transfer_item(datetime(2024, 1, 1, tzinfo=UTC), 5)
        urgency = urgency_for(item, date(2024, 1, 3), tz)
        assert item_target_date(item, tz) == date(2024, 1, 6)
        assert urgency == Urgency.upcoming(3)

    def test_overdue(self, tz):
        item = _transfer_item(datetime(2024, 1, 1, tzinfo=UTC), 5)
        assert urgency_for(item, date(2024, 1, 10), tz) == Urgency.overdue(4)

    def test_today_from_clock_instant(self, tz, clock):
        item = _transfer_item(clock.now() - timedelta(days=2), 2)
        assert urgency_for(item, clock.today(tz), tz) == Urgency.today()

    def test_unclassified(self, tz):
        assert urgency_for(_transfer_item(None, 5), date(2024, 1, 3), tz) is None


class TestZonesWestOfUtc:
    """Date-only anchors keep their calendar day west of UTC."""

    NEW_YORK = ZoneInfo("America/New_York")

    def test_date_only_created_at(self, registry):
        record = {"id": "t1", "status": "offen", "created_at": "2024-01-01", "reminder_days": 5}
        item = PipelineItem.from_record(record, registry.definition(PipelineKind.TRANSFER))

        assert item_target_date(item, self.NEW_YORK) == date(2024, 1, 6)
        assert urgency_for(item, date(2024, 1, 6), self.NEW_YORK) == Urgency.today()

    def test_naive_created_at_keeps_wall_clock_day(self, registry):
        record = {
            "id": "t1",
            "status": "offen",
            "created_at": "2024-01-01T20:00:00",
            "reminder_days": 1,
        }
        item = PipelineItem.from_record(record, registry.definition(PipelineKind.TRANSFER))
        assert item_target_date(item, self.NEW_YORK) == date(2024, 1, 2)

    def test_aware_created_at_still_converted(self, registry):
        # 03:00 UTC is still the previous evening in New York
        record = {
            "id": "t1",
            "status": "offen",
            "created_at": "2024-01-02T03:00:00Z",
            "reminder_days": 1,
        }
        item = PipelineItem.from_record(record, registry.definition(PipelineKind.TRANSFER))
        assert item_target_date(item, self.NEW_YORK) == date(2024, 1, 2)
