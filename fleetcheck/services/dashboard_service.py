# fleetcheck/services/dashboard_service.py
"""
Role-specific landing data.

Supervisor: fleet counters, bar chart series, latest damages, every
checklist split pending/resolved, user list.
Driver: quick actions, fleet availability, own checklist history.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from fleetcheck.models.damage import Damage
from fleetcheck.models.profile import Profile
from fleetcheck.models.vehicle import Vehicle
from fleetcheck.services import checklist_service, damage_service, user_admin_service

RECENT_DAMAGES_LIMIT = 5
RECENT_CHECKLIST_DAYS = 7

QUICK_ACTIONS = (
    {"id": "checklist", "label": "New checklist", "tab": "checklist"},
    {"id": "damage", "label": "Report damage", "tab": "damages"},
    {"id": "fuel", "label": "Log fuel", "tab": "fuel"},
)


def fleet_stats(db: Session, now: Optional[datetime] = None) -> dict:
    total = db.query(Vehicle).count()
    active = db.query(Vehicle).filter(Vehicle.status == "active").count()
    return {
        "total_vehicles": total,
        "active_vehicles": active,
        "pending_damages": db.query(Damage).filter(Damage.status == "pending").count(),
        "recent_checklists": checklist_service.count_since(db, RECENT_CHECKLIST_DAYS, now),
    }


def chart_data(stats: dict) -> list[dict]:
    return [
        {"name": "Active", "value": stats["active_vehicles"], "color": "#10b981"},
        {"name": "Maintenance", "value": stats["total_vehicles"] - stats["active_vehicles"], "color": "#f59e0b"},
        {"name": "Damages", "value": stats["pending_damages"], "color": "#ef4444"},
    ]


def supervisor_dashboard(db: Session, now: Optional[datetime] = None) -> dict:
    stats = fleet_stats(db, now)
    return {
        "stats": stats,
        "chart": chart_data(stats),
        "recent_damages": damage_service.list_damages(db, limit=RECENT_DAMAGES_LIMIT),
        "checklists": checklist_service.split_by_status(checklist_service.list_checklists(db)),
        "users": user_admin_service.list_users(db),
    }


def driver_dashboard(db: Session, profile: Profile, now: Optional[datetime] = None) -> dict:
    available = checklist_service.available_vehicles(db, profile, now)
    active_total = db.query(Vehicle).filter(Vehicle.status == "active").count()
    return {
        "quick_actions": list(QUICK_ACTIONS),
        "availability": {
            "available": len(available),
            "active": active_total,
            "vehicles": available,
        },
        "my_checklists": checklist_service.list_checklists(db, driver_id=profile.id),
    }
