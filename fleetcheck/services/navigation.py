# fleetcheck/services/navigation.py
"""Role-gated navigation. Tabs are in-memory ids; there is no URL routing."""

from dataclasses import dataclass

from fleetcheck.models.profile import Role


@dataclass(frozen=True)
class NavItem:
    id: str
    label: str
    icon: str
    roles: tuple


NAV_ITEMS = (
    NavItem("dashboard", "Dashboard", "layout-dashboard", (Role.DRIVER, Role.SUPERVISOR)),
    NavItem("vehicles", "Vehicles", "car", (Role.SUPERVISOR,)),
    NavItem("checklist", "Checklist", "clipboard-check", (Role.DRIVER,)),
    NavItem("damages", "Damages", "alert-triangle", (Role.DRIVER, Role.SUPERVISOR)),
    NavItem("fuel", "Fuel", "fuel", (Role.DRIVER,)),
)

DEFAULT_TAB = "dashboard"


def items_for(role: Role) -> list[NavItem]:
    return [item for item in NAV_ITEMS if role in item.roles]


def resolve_tab(role: Role, requested: str) -> str:
    """Unknown or forbidden tabs fall back to the dashboard."""
    allowed = {item.id for item in items_for(role)}
    return requested if requested in allowed else DEFAULT_TAB
