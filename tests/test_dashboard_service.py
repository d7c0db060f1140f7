# tests/test_dashboard_service.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fleetcheck.models.damage import Damage
from fleetcheck.models.fuel_log import FuelLog
from fleetcheck.models.profile import Profile
from fleetcheck.models.vehicle import Vehicle
from fleetcheck.services import dashboard_service
from fleetcheck.services.checklist_service import CHECKLIST_ITEMS, ItemAnswer, submit_checklist
from fleetcheck.services.seed_service import seed_demo_data


class TestSeed:
    def test_seed_populates_sample_fleet_once(self, db):
        assert seed_demo_data(db) is True
        assert db.query(Vehicle).count() == 4
        assert db.query(Damage).count() == 2
        assert db.query(FuelLog).count() == 1
        assert {p.role for p in db.query(Profile).all()} == {"driver", "supervisor"}
        assert seed_demo_data(db) is False


class TestSupervisorDashboard:
    def test_stats_and_chart(self, db):
        seed_demo_data(db)
        data = dashboard_service.supervisor_dashboard(db)

        assert data["stats"] == {
            "total_vehicles": 4,
            "active_vehicles": 2,
            "pending_damages": 2,
            "recent_checklists": 0,
        }
        assert [(c["name"], c["value"]) for c in data["chart"]] == [
            ("Active", 2), ("Maintenance", 2), ("Damages", 2),
        ]
        assert [d.description for d in data["recent_damages"]] == ["Flat tire", "Air conditioning not cooling"]
        assert len(data["users"]) == 2

    def test_checklists_split(self, db, driver, vehicle, make_vehicle):
        submit_checklist(db, driver, vehicle.id, {})
        second = make_vehicle(plate="KJH-4422")
        submit_checklist(db, driver, second.id, {CHECKLIST_ITEMS[0]: ItemAnswer(ok=False, notes="low")})

        data = dashboard_service.supervisor_dashboard(db)
        assert len(data["checklists"]["pending"]) == 1
        assert len(data["checklists"]["resolved"]) == 1
        assert data["stats"]["recent_checklists"] == 2


class TestDriverDashboard:
    def test_availability_and_history(self, db, driver, vehicle, make_vehicle):
        make_vehicle(plate="KJH-4422")
        make_vehicle(plate="OFF-0001", status="inactive")
        submit_checklist(db, driver, vehicle.id, {})

        data = dashboard_service.driver_dashboard(db, driver)
        assert data["availability"]["available"] == 1
        assert data["availability"]["active"] == 2
        assert len(data["my_checklists"]) == 1
        assert [a["tab"] for a in data["quick_actions"]] == ["checklist", "damages", "fuel"]
