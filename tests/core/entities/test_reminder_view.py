"""Tests for ReminderView."""

from datetime import date

from scoutboard.core.entities.reminder import ReminderView


class TestReminderViewFromRecord:
    """Tests for building views from stored reminder rows."""

    def test_full_row(self):
        view = ReminderView.from_record(
            {
                "id": "r1",
                "title": "Berater anrufen",
                "due_date": "2024-06-20",
                "completed": False,
                "source_type": "transfer",
                "source_id": "t1",
                "player_name": "Jonas Müller",
                "club_name": "SC Freiburg",
            }
        )

        assert view is not None
        assert view.target_date == date(2024, 6, 20)
        assert view.subtitle == "Jonas Müller"
        assert view.synthesized is False
        assert view.source_ref is not None
        assert view.source_ref.kind == "transfer"
        assert view.source_ref.context == {"club_name": "SC Freiburg"}

    def test_without_source(self):
        view = ReminderView.from_record({"id": 7, "title": "x", "due_date": "2024-06-20"})
        assert view is not None
        assert view.id == "7"
        assert view.source_ref is None
        assert view.subtitle is None

    def test_without_due_date(self):
        assert ReminderView.from_record({"id": "r1", "title": "x"}) is None

    def test_completed_row(self):
        view = ReminderView.from_record(
            {
                "id": "r1",
                "title": "x",
                "due_date": "2024-06-10",
                "completed": True,
                "completed_at": "2024-06-15T07:00:00Z",
            }
        )
        assert view is not None
        assert view.completed
        assert view.completed_at is not None
