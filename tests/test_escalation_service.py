# tests/test_escalation_service.py
"""Damage reminder selection and actions."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from datetime import datetime, timedelta
from urllib.parse import unquote
from fleetcheck.services.escalation_service import (
    acknowledge,
    due_at,
    messaging_link,
    next_check_at,
    pick_escalation,
)
from fleetcheck.utils.errors import ValidationFailedError

NOW = datetime(2026, 3, 10, 12, 0, 0)


def make_damage(id, priority, age_days, status="pending"):
    vehicle = MagicMock(brand="Ford", model="Ranger", plate="XYZ-9876")
    return MagicMock(id=id, priority=priority, status=status, description="Air conditioning not cooling",
                     created_at=NOW - timedelta(days=age_days), vehicle=vehicle)


class TestPickEscalation:
    def test_overdue_high_beats_older_lower_priorities(self):
        damages = [
            make_damage("low", "low", 30),
            make_damage("medium", "medium", 10),
            make_damage("high", "high", 2),
        ]
        assert pick_escalation(damages, set(), NOW).id == "high"

    def test_oldest_wins_within_a_priority(self):
        damages = [make_damage("newer", "medium", 5), make_damage("older", "medium", 9)]
        assert pick_escalation(damages, set(), NOW).id == "older"

    def test_not_yet_due_is_skipped(self):
        damages = [make_damage("fresh-high", "high", 0.5), make_damage("old-low", "low", 8)]
        assert pick_escalation(damages, set(), NOW).id == "old-low"

    def test_thresholds(self):
        assert pick_escalation([make_damage("m", "medium", 3)], set(), NOW) is None
        assert pick_escalation([make_damage("m", "medium", 4)], set(), NOW).id == "m"
        assert pick_escalation([make_damage("l", "low", 6)], set(), NOW) is None

    def test_ignored_and_resolved_are_skipped(self):
        damages = [make_damage("done", "high", 5, status="resolved"), make_damage("seen", "high", 5)]
        assert pick_escalation(damages, {"seen"}, NOW) is None

    def test_next_check_at_is_earliest_future_due_time(self):
        damages = [make_damage("a", "low", 1), make_damage("b", "medium", 1), make_damage("c", "high", 3)]
        assert next_check_at(damages, set(), NOW) == due_at(damages[1])

    def test_next_check_at_none_when_nothing_upcoming(self):
        assert next_check_at([make_damage("c", "high", 3)], set(), NOW) is None


class TestAcknowledge:
    def test_close_only_ignores(self):
        ignored = set()
        result = acknowledge(ignored, make_damage("d1", "high", 2), "close")
        assert ignored == {"d1"}
        assert result["link"] is None and result["navigate_to"] is None

    def test_notify_builds_messaging_link(self):
        result = acknowledge(set(), make_damage("d1", "high", 2), "notify")
        assert result["link"].startswith("https://wa.me/?text=")
        text = unquote(result["link"].split("text=", 1)[1])
        assert "XYZ-9876" in text and "HIGH" in text

    def test_resolve_navigates_to_damages(self):
        assert acknowledge(set(), make_damage("d1", "low", 9), "resolve")["navigate_to"] == "damages"

    def test_unknown_action(self):
        with pytest.raises(ValidationFailedError):
            acknowledge(set(), make_damage("d1", "low", 9), "snooze")

    def test_link_without_vehicle(self):
        damage = make_damage("d1", "low", 9)
        damage.vehicle = None
        assert "a%20vehicle" in messaging_link(damage)
