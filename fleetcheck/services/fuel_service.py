# fleetcheck/services/fuel_service.py
"""
Fuel logs: driver refueling entries.
Each entry also moves the vehicle's recorded mileage to the logged value.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from fleetcheck.models.fuel_log import FuelLog
from fleetcheck.models.profile import Profile
from fleetcheck.services.notification_service import notify
from fleetcheck.services.vehicle_service import get_vehicle
from fleetcheck.utils.errors import ValidationFailedError
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

HISTORY_LIMIT = 5


def log_fuel(db: Session, driver: Profile, vehicle_id: str, mileage: int, liters: float,
             value: float, log_date: Optional[date] = None) -> FuelLog:
    vehicle = get_vehicle(db, vehicle_id)
    if mileage is None or mileage <= 0:
        raise ValidationFailedError("Mileage must be greater than zero.")
    if liters is None or liters <= 0:
        raise ValidationFailedError("Liters must be greater than zero.")
    if value is None or value <= 0:
        raise ValidationFailedError("Value must be greater than zero.")

    fuel_log = FuelLog(
        vehicle_id=vehicle.id,
        driver_id=driver.id,
        mileage=mileage,
        liters=liters,
        value=value,
        date=log_date or datetime.utcnow().date(),
        created_at=datetime.utcnow(),
    )
    db.add(fuel_log)
    db.commit()

    vehicle.mileage = mileage
    db.commit()

    notify(
        db, "Fuel logged",
        f"Driver {driver.full_name} logged {liters:.1f} L on vehicle {vehicle.plate} at {mileage} km.",
        type="fuel",
    )
    logger.info(f"[FUEL] {driver.full_name} → {vehicle.plate}: {liters} L, {value:.2f}, {mileage} km")
    return fuel_log


def recent_logs(db: Session, driver_id: str, limit: int = HISTORY_LIMIT) -> list[FuelLog]:
    return (
        db.query(FuelLog)
        .filter(FuelLog.driver_id == driver_id)
        .order_by(FuelLog.created_at.desc())
        .limit(limit)
        .all()
    )
