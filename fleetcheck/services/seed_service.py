# fleetcheck/services/seed_service.py
"""
Demo data for running without a configured platform.

When DATABASE_URL / API_KEY are not set the app runs on an in-memory
database; startup calls seed_demo_data() so the screens have something
to show and the demo accounts below can sign in.
"""

from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from fleetcheck.models.damage import Damage
from fleetcheck.models.fuel_log import FuelLog
from fleetcheck.models.profile import Profile
from fleetcheck.models.vehicle import Vehicle
from fleetcheck.services.user_admin_service import create_user
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

DEMO_PASSWORD = "fleet123"

DEMO_USERS = [
    {"username": "supervisor", "full_name": "Carla Mendes", "role": "supervisor", "phone": "+55 11 90000-0001"},
    {"username": "driver", "full_name": "João Silva", "role": "driver", "phone": "+55 11 90000-0002"},
]

DEMO_VEHICLES = [
    {"brand": "Toyota", "model": "Corolla", "year": 2022, "plate": "ABC-1234", "mileage": 15000, "status": "active"},
    {"brand": "Ford", "model": "Ranger", "year": 2021, "plate": "XYZ-9876", "mileage": 45000, "status": "maintenance"},
    {"brand": "Volkswagen", "model": "Gol", "year": 2020, "plate": "KJH-4422", "mileage": 80000, "status": "active"},
    {"brand": "Fiat", "model": "Strada", "year": 2023, "plate": "FRT-9090", "mileage": 5000, "status": "inactive"},
]


def seed_demo_data(db: Session) -> bool:
    """Populate an empty database. Returns False if data already exists."""
    if db.query(Profile).first() or db.query(Vehicle).first():
        logger.info("[SEED] Database not empty, skipping demo data")
        return False

    profiles = {u["role"]: create_user(db, password=DEMO_PASSWORD, **u) for u in DEMO_USERS}
    driver = profiles["driver"]

    now = datetime.utcnow()
    vehicles = []
    for i, data in enumerate(DEMO_VEHICLES):
        vehicle = Vehicle(**data, created_at=now - timedelta(days=30 - i))
        db.add(vehicle)
        vehicles.append(vehicle)
    db.commit()

    corolla, ranger = vehicles[0], vehicles[1]
    db.add_all([
        Damage(
            vehicle_id=ranger.id,
            reported_by=driver.id,
            description="Air conditioning not cooling",
            priority="medium",
            status="pending",
            created_at=now - timedelta(days=5),
            updated_at=now - timedelta(days=5),
        ),
        Damage(
            vehicle_id=corolla.id,
            reported_by=driver.id,
            description="Flat tire",
            priority="high",
            status="pending",
            created_at=now - timedelta(days=2),
            updated_at=now - timedelta(days=2),
        ),
        FuelLog(
            vehicle_id=corolla.id,
            driver_id=driver.id,
            mileage=14500,
            liters=45.0,
            value=250.0,
            date=(now - timedelta(days=3)).date(),
            created_at=now - timedelta(days=3),
        ),
    ])
    db.commit()
    logger.info(
        f"[SEED] Demo data ready: {len(DEMO_USERS)} users, {len(vehicles)} vehicles "
        f"(sign in as 'supervisor' or 'driver', password '{DEMO_PASSWORD}')"
    )
    return True
