# fleetcheck/services/damage_service.py
"""
Damage reports.
Drivers report (with optional photo) and may edit their own reports while
pending; supervisors edit, resolve and delete any report. Creation notifies
the supervisors, resolution notifies the reporter.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from fleetcheck.models.damage import Damage, DAMAGE_PRIORITIES
from fleetcheck.models.profile import Profile
from fleetcheck.services import storage_service
from fleetcheck.services.notification_service import notify
from fleetcheck.services.vehicle_service import get_vehicle
from fleetcheck.utils.errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = ("vehicle_id", "description", "priority")


def _check_priority(priority: str) -> str:
    if priority not in DAMAGE_PRIORITIES:
        raise ValidationFailedError(f"Invalid priority '{priority}'. Use low, medium or high.")
    return priority


def get_damage(db: Session, damage_id: str) -> Damage:
    damage = db.query(Damage).filter(Damage.id == damage_id).first()
    if not damage:
        raise NotFoundError("Damage report not found")
    return damage


def list_damages(db: Session, status: Optional[str] = None, priority: Optional[str] = None,
                 limit: Optional[int] = None) -> list[Damage]:
    q = db.query(Damage)
    if status:
        q = q.filter(Damage.status == status)
    if priority:
        q = q.filter(Damage.priority == priority)
    q = q.order_by(Damage.created_at.desc())
    if limit:
        q = q.limit(limit)
    return q.all()


def pending_damages(db: Session) -> list[Damage]:
    return db.query(Damage).filter(Damage.status == "pending").all()


def report_damage(db: Session, reporter: Profile, vehicle_id: str, description: str,
                  priority: str = "medium", photo: Optional[tuple] = None) -> Damage:
    """`photo` is (bytes, filename, content_type) from the upload, if any."""
    vehicle = get_vehicle(db, vehicle_id)
    description = (description or "").strip()
    if not description:
        raise ValidationFailedError("Describe the damage.")
    _check_priority(priority)

    photo_url = None
    if photo:
        key = storage_service.upload_image("damage-photos", *photo)
        photo_url = storage_service.get_public_url("damage-photos", key)

    now = datetime.utcnow()
    damage = Damage(
        vehicle_id=vehicle.id,
        reported_by=reporter.id,
        description=description,
        priority=priority,
        photo_url=photo_url,
        status="pending",
        created_at=now,
        updated_at=now,
    )
    db.add(damage)
    db.commit()

    notify(
        db, "New damage reported",
        f"Driver {reporter.full_name} reported damage on vehicle {vehicle.plate}.",
        type="damage",
    )
    logger.info(f"[DAMAGE] {reporter.full_name} reported {priority} damage on {vehicle.plate}")
    return damage


def update_damage(db: Session, editor: Profile, damage_id: str, **fields) -> Damage:
    damage = get_damage(db, damage_id)
    if not editor.is_supervisor:
        if damage.reported_by != editor.id:
            raise PermissionDeniedError("You can only edit your own damage reports.")
        if damage.status != "pending":
            raise PermissionDeniedError("Resolved reports can no longer be edited.")

    data = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS and v is not None}
    if "priority" in data:
        _check_priority(data["priority"])
    if "description" in data:
        data["description"] = data["description"].strip()
        if not data["description"]:
            raise ValidationFailedError("Describe the damage.")
    if "vehicle_id" in data:
        get_vehicle(db, data["vehicle_id"])
    for key, value in data.items():
        setattr(damage, key, value)
    damage.updated_at = datetime.utcnow()
    db.commit()
    return damage


def set_photo(db: Session, editor: Profile, damage_id: str, data: bytes, filename: str,
              content_type: str) -> Damage:
    damage = get_damage(db, damage_id)
    if not editor.is_supervisor and damage.reported_by != editor.id:
        raise PermissionDeniedError("You can only edit your own damage reports.")
    key = storage_service.upload_image("damage-photos", data, filename, content_type)
    old_url = damage.photo_url
    damage.photo_url = storage_service.get_public_url("damage-photos", key)
    damage.updated_at = datetime.utcnow()
    db.commit()
    storage_service.remove_url("damage-photos", old_url)
    return damage


def resolve_damage(db: Session, supervisor: Profile, damage_id: str) -> Damage:
    damage = get_damage(db, damage_id)
    if damage.status == "resolved":
        return damage
    damage.status = "resolved"
    damage.updated_at = datetime.utcnow()
    db.commit()

    plate = damage.vehicle.plate if damage.vehicle else "unknown"
    if damage.reported_by:
        notify(
            db, "Damage resolved",
            f"The damage you reported on vehicle {plate} was fixed by {supervisor.full_name}.",
            type="damage", user_id=damage.reported_by,
        )
    logger.info(f"[DAMAGE] {damage.id} on {plate} resolved by {supervisor.full_name}")
    return damage


def delete_damage(db: Session, damage_id: str) -> None:
    damage = get_damage(db, damage_id)
    photo_url = damage.photo_url
    db.delete(damage)
    db.commit()
    storage_service.remove_url("damage-photos", photo_url)
    logger.info(f"[DAMAGE] Deleted {damage_id}")
