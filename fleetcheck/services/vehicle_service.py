# fleetcheck/services/vehicle_service.py
"""
Vehicle grid: search/filter, status badges, supervisor CRUD and photos.
"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from datetime import datetime

from fleetcheck.models.vehicle import Vehicle, VEHICLE_STATUSES
from fleetcheck.services import storage_service
from fleetcheck.services.realtime import record_change
from fleetcheck.utils.errors import ConflictError, NotFoundError, ValidationFailedError
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = ("brand", "model", "year", "plate", "mileage", "status")

STATUS_BADGES = {
    "in_use": {"label": "In use", "color": "blue"},
    "active": {"label": "Active", "color": "green"},
    "maintenance": {"label": "Maintenance", "color": "amber"},
    "inactive": {"label": "Inactive", "color": "gray"},
}


def status_badge(vehicle: Vehicle) -> dict:
    """An active vehicle claimed by a driver shows as 'in use'."""
    key = "in_use" if vehicle.current_driver and vehicle.status == "active" else vehicle.status
    return {"key": key, **STATUS_BADGES.get(key, {"label": key, "color": "gray"})}


def get_vehicle(db: Session, vehicle_id: str) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if not vehicle:
        raise NotFoundError("Vehicle not found")
    return vehicle


def list_vehicles(db: Session, search: Optional[str] = None, status: Optional[str] = None) -> list[Vehicle]:
    """Newest first; `search` matches brand, model or plate case-insensitively."""
    q = db.query(Vehicle)
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        q = q.filter(or_(
            Vehicle.brand.ilike(term),
            Vehicle.model.ilike(term),
            Vehicle.plate.ilike(term),
        ))
    if status:
        if status == "in_use":
            q = q.filter(Vehicle.status == "active", Vehicle.current_driver.isnot(None))
        else:
            q = q.filter(Vehicle.status == status)
    return q.order_by(Vehicle.created_at.desc()).all()


def _clean(fields: dict) -> dict:
    data = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS and v is not None}
    for key in ("brand", "model", "plate"):
        if key in data:
            data[key] = str(data[key]).strip()
            if not data[key]:
                raise ValidationFailedError(f"{key.capitalize()} is required.")
    if "plate" in data:
        data["plate"] = data["plate"].upper()
    if "status" in data and data["status"] not in VEHICLE_STATUSES:
        raise ValidationFailedError(f"Invalid status '{data['status']}'.")
    if "mileage" in data and data["mileage"] < 0:
        raise ValidationFailedError("Mileage cannot be negative.")
    return data


def create_vehicle(db: Session, **fields) -> Vehicle:
    data = _clean(fields)
    missing = [k for k in ("brand", "model", "plate", "year") if k not in data]
    if missing:
        raise ValidationFailedError(f"Missing fields: {', '.join(missing)}")
    vehicle = Vehicle(**data, created_at=datetime.utcnow())
    db.add(vehicle)
    db.commit()
    logger.info(f"[VEHICLE] Created {vehicle.label}")
    return vehicle


def update_vehicle(db: Session, vehicle_id: str, **fields) -> Vehicle:
    vehicle = get_vehicle(db, vehicle_id)
    for key, value in _clean(fields).items():
        setattr(vehicle, key, value)
    db.commit()
    logger.info(f"[VEHICLE] Updated {vehicle.label}")
    return vehicle


def delete_vehicle(db: Session, vehicle_id: str) -> None:
    vehicle = get_vehicle(db, vehicle_id)
    label = vehicle.label
    photo_url = vehicle.photo_url
    db.delete(vehicle)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(
            f"{label} has checklists, damages or fuel logs and cannot be deleted. "
            "Set it to inactive instead."
        )
    storage_service.remove_url("vehicle-photos", photo_url)
    logger.info(f"[VEHICLE] Deleted {label}")


def set_photo(db: Session, vehicle_id: str, data: bytes, filename: str, content_type: str) -> Vehicle:
    vehicle = get_vehicle(db, vehicle_id)
    key = storage_service.upload_image("vehicle-photos", data, filename, content_type)
    old_url = vehicle.photo_url
    vehicle.photo_url = storage_service.get_public_url("vehicle-photos", key)
    db.commit()
    storage_service.remove_url("vehicle-photos", old_url)
    return vehicle


def rename_driver_claims(db: Session, old_name: str, new_name: str) -> int:
    """Keep current_driver in step with a driver's renamed profile; caller commits."""
    if not old_name or old_name == new_name:
        return 0
    count = (
        db.query(Vehicle)
        .filter(Vehicle.current_driver == old_name)
        .update({Vehicle.current_driver: new_name}, synchronize_session=False)
    )
    if count:
        record_change(db, "vehicles", "UPDATE", None)
    return count
