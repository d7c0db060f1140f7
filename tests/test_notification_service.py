# tests/test_notification_service.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fleetcheck.services import notification_service
from fleetcheck.utils.errors import NotFoundError


class TestVisibility:
    def test_supervisor_sees_broadcast_and_own(self, db, supervisor, driver):
        notification_service.notify(db, "Broadcast", "to supervisors", "damage")
        notification_service.notify(db, "Mine", "for supervisor", "system", user_id=supervisor.id)
        notification_service.notify(db, "Driver", "for driver", "checklist", user_id=driver.id)

        titles = {n.title for n in notification_service.list_for(db, supervisor)}
        assert titles == {"Broadcast", "Mine"}

    def test_driver_sees_only_own(self, db, supervisor, driver):
        notification_service.notify(db, "Broadcast", "to supervisors", "damage")
        notification_service.notify(db, "Driver", "for driver", "checklist", user_id=driver.id)
        assert [n.title for n in notification_service.list_for(db, driver)] == ["Driver"]

    def test_feed_is_capped_at_five(self, db, supervisor):
        for i in range(7):
            notification_service.notify(db, f"n{i}", "msg", "system")
        assert len(notification_service.list_for(db, supervisor)) == 5
        assert notification_service.unread_count(db, supervisor) == 7

    def test_unknown_type(self, db):
        with pytest.raises(ValueError):
            notification_service.notify(db, "x", "y", "party")


class TestMarkRead:
    def test_mark_one_and_all(self, db, supervisor):
        first = notification_service.notify(db, "a", "msg", "system")
        notification_service.notify(db, "b", "msg", "system")

        notification_service.mark_read(db, supervisor, first.id)
        assert notification_service.unread_count(db, supervisor) == 1
        assert notification_service.mark_all_read(db, supervisor) == 1
        assert notification_service.unread_count(db, supervisor) == 0

    def test_driver_cannot_mark_broadcast(self, db, driver):
        note = notification_service.notify(db, "a", "msg", "system")
        with pytest.raises(NotFoundError):
            notification_service.mark_read(db, driver, note.id)


class TestBadge:
    def test_badge_label(self):
        assert notification_service.badge_label(0) is None
        assert notification_service.badge_label(7) == "7"
        assert notification_service.badge_label(99) == "99"
        assert notification_service.badge_label(150) == "99+"
