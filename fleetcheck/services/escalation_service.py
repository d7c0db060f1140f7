# fleetcheck/services/escalation_service.py
"""
Recurring damage reminder (supervisor popup).

A pending damage becomes due a fixed number of days after it was reported:
  high → 1 day, medium → 4 days, low → 7 days   (ESCALATION_*_DAYS)
The popup shows the highest-priority due damage (oldest first within a
priority) that the supervisor has not acknowledged in this session.
Acknowledging (close / notify / resolve) adds it to the session's ignore
set. Candidates are always read from live rows.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional
from urllib.parse import quote

from fleetcheck.config import settings
from fleetcheck.models.damage import Damage
from fleetcheck.utils.errors import ValidationFailedError

PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}
ACTIONS = ("close", "notify", "resolve")


def due_at(damage: Damage) -> datetime:
    days = settings.ESCALATION_DAYS.get(damage.priority, settings.ESCALATION_LOW_DAYS)
    return damage.created_at + timedelta(days=days)


def _open(damages: Iterable[Damage], ignored: set) -> list[Damage]:
    return [d for d in damages if d.status == "pending" and d.id not in ignored]


def pick_escalation(damages: Iterable[Damage], ignored: set,
                    now: Optional[datetime] = None) -> Optional[Damage]:
    now = now or datetime.utcnow()
    due = [d for d in _open(damages, ignored) if due_at(d) <= now]
    if not due:
        return None
    return min(due, key=lambda d: (PRIORITY_RANK.get(d.priority, len(PRIORITY_RANK)), d.created_at))


def next_check_at(damages: Iterable[Damage], ignored: set,
                  now: Optional[datetime] = None) -> Optional[datetime]:
    """When the next not-yet-due damage becomes due, for the client's timer."""
    now = now or datetime.utcnow()
    upcoming = [due_at(d) for d in _open(damages, ignored) if due_at(d) > now]
    return min(upcoming) if upcoming else None


def messaging_link(damage: Damage) -> str:
    vehicle = damage.vehicle
    vehicle_text = f"{vehicle.brand} {vehicle.model} ({vehicle.plate})" if vehicle else "a vehicle"
    text = (
        f"Reminder: {damage.priority.upper()} priority damage on {vehicle_text} "
        f"reported on {damage.created_at:%Y-%m-%d} is still pending: {damage.description}"
    )
    return f"{settings.MESSAGING_LINK_BASE}?text={quote(text)}"


def acknowledge(ignored: set, damage: Damage, action: str) -> dict:
    """Hide `damage` for the rest of the session and return what the client should do next."""
    if action not in ACTIONS:
        raise ValidationFailedError(f"Unknown action '{action}'. Use close, notify or resolve.")
    ignored.add(damage.id)
    result = {"damage_id": damage.id, "action": action, "link": None, "navigate_to": None}
    if action == "notify":
        result["link"] = messaging_link(damage)
    elif action == "resolve":
        result["navigate_to"] = "damages"
    return result
