# fleetcheck/services/checklist_service.py
"""
Vehicle checklists: driver submission wizard + supervisor repair flow.

Submission (driver):
  selecting-vehicle → filling-items → submitted
  On submit the vehicle is re-checked for a checklist created today; if one
  exists the submission is refused with a conflict. Then the checklist row,
  its 12 item rows, the vehicle claim and a supervisor broadcast are written
  one after another. The first failure stops the sequence; earlier writes
  are not undone.

Repair (supervisor):
  Only failed items are offered. Every item update must hit a row. When all
  12 items are ok the checklist is resolved and, once no other checklist
  on it is pending, the vehicle released; otherwise the driver is told
  what is still pending.

The claim check is optimistic: two simultaneous submissions can both pass
it. Only a uniqueness constraint in the database would close that gap.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy.orm import Session

from fleetcheck.models.checklist import Checklist, ChecklistItem
from fleetcheck.models.profile import Profile
from fleetcheck.models.vehicle import Vehicle
from fleetcheck.services.notification_service import notify
from fleetcheck.services.realtime import record_change
from fleetcheck.services.vehicle_service import get_vehicle
from fleetcheck.utils.errors import (
    ConflictError,
    NotFoundError,
    RowNotAffectedError,
    ValidationFailedError,
)
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

CHECKLIST_ITEMS = [
    "Engine oil level",
    "Radiator coolant level",
    "Tire pressure",
    "Tire condition (tread)",
    "Lights (headlights, indicators, brake lights)",
    "Windshield wipers",
    "Parking brake",
    "Seat belts",
    "Fire extinguisher",
    "Spare tire and tools",
    "Interior/exterior cleanliness",
    "Vehicle documents",
]

CLAIMED_TODAY_MESSAGE = (
    "This vehicle was just claimed by another driver. "
    "Refresh the page and select another vehicle."
)


def today_start(now: Optional[datetime] = None) -> datetime:
    """Start of the current UTC day; 'today' for every same-day rule."""
    now = now or datetime.utcnow()
    return datetime(now.year, now.month, now.day)


# ── Availability ─────────────────────────────────────────────────────────────
def vehicle_ids_checked_today(db: Session, now: Optional[datetime] = None) -> set[str]:
    rows = db.query(Checklist.vehicle_id).filter(Checklist.created_at >= today_start(now)).all()
    return {vehicle_id for (vehicle_id,) in rows}


def is_available_for(vehicle: Vehicle, driver_name: str, checked_today: set[str]) -> bool:
    if vehicle.status != "active":
        return False
    # Any checklist today takes the vehicle off the list for everyone
    if vehicle.id in checked_today:
        return False
    return not vehicle.current_driver or vehicle.current_driver == driver_name


def available_vehicles(db: Session, profile: Profile, now: Optional[datetime] = None) -> list[Vehicle]:
    checked_today = vehicle_ids_checked_today(db, now)
    vehicles = db.query(Vehicle).order_by(Vehicle.brand, Vehicle.model).all()
    return [v for v in vehicles if is_available_for(v, profile.full_name, checked_today)]


# ── Submission wizard ────────────────────────────────────────────────────────
class WizardStep(str, enum.Enum):
    SELECTING_VEHICLE = "selecting-vehicle"
    FILLING_ITEMS = "filling-items"
    SUBMITTED = "submitted"


@dataclass
class ItemAnswer:
    ok: bool = True
    notes: str = ""


@dataclass
class ChecklistWizard:
    step: WizardStep = WizardStep.SELECTING_VEHICLE
    vehicle_id: Optional[str] = None
    items: Dict[str, ItemAnswer] = field(default_factory=dict)
    checklist: Optional[Checklist] = None

    def select_vehicle(self, vehicle_id: str) -> None:
        if self.step is not WizardStep.SELECTING_VEHICLE:
            raise ValidationFailedError("Go back to the first step to change the vehicle.")
        self.vehicle_id = vehicle_id

    def continue_to_items(self) -> None:
        if self.step is not WizardStep.SELECTING_VEHICLE or not self.vehicle_id:
            raise ValidationFailedError("Select a vehicle first.")
        self.items = {name: ItemAnswer() for name in CHECKLIST_ITEMS}
        self.step = WizardStep.FILLING_ITEMS

    def back(self) -> None:
        if self.step is WizardStep.FILLING_ITEMS:
            self.step = WizardStep.SELECTING_VEHICLE

    def mark(self, item_name: str, ok: bool, notes: str = "") -> None:
        if self.step is not WizardStep.FILLING_ITEMS:
            raise ValidationFailedError("Checklist items can only be marked after selecting a vehicle.")
        if item_name not in self.items:
            raise ValidationFailedError(f"Unknown checklist item: {item_name}")
        self.items[item_name] = ItemAnswer(ok=ok, notes="" if ok else (notes or "").strip())

    @property
    def all_ok(self) -> bool:
        return all(answer.ok for answer in self.items.values())

    def submit(self, db: Session, driver: Profile) -> Checklist:
        if self.step is not WizardStep.FILLING_ITEMS:
            raise ValidationFailedError("Nothing to submit yet.")
        self.checklist = submit_checklist(db, driver, self.vehicle_id, self.items)
        self.step = WizardStep.SUBMITTED
        return self.checklist

    def reset(self) -> None:
        self.step = WizardStep.SELECTING_VEHICLE
        self.vehicle_id = None
        self.items = {}
        self.checklist = None


def submit_checklist(db: Session, driver: Profile, vehicle_id: str,
                     items: Dict[str, ItemAnswer], now: Optional[datetime] = None) -> Checklist:
    now = now or datetime.utcnow()
    unknown = set(items) - set(CHECKLIST_ITEMS)
    if unknown:
        raise ValidationFailedError(f"Unknown checklist item: {sorted(unknown)[0]}")
    items = {name: items.get(name, ItemAnswer()) for name in CHECKLIST_ITEMS}
    vehicle = get_vehicle(db, vehicle_id)
    if vehicle.status != "active":
        raise ValidationFailedError(f"{vehicle.label} is not active and cannot be checked out.")
    if vehicle.current_driver and vehicle.current_driver != driver.full_name:
        raise ConflictError(CLAIMED_TODAY_MESSAGE)

    # 0. Last-moment re-check: someone may have claimed it since the list was loaded
    existing = (
        db.query(Checklist.id)
        .filter(Checklist.vehicle_id == vehicle.id, Checklist.created_at >= today_start(now))
        .first()
    )
    if existing:
        logger.warning(f"[CHECKLIST] {driver.full_name} lost the race for {vehicle.plate}")
        raise ConflictError(CLAIMED_TODAY_MESSAGE)

    # 1. Overall result decides the initial status
    all_ok = all(answer.ok for answer in items.values())

    # 2. Checklist row
    checklist = Checklist(
        vehicle_id=vehicle.id,
        driver_id=driver.id,
        status="resolved" if all_ok else "pending",
        created_at=now,
    )
    db.add(checklist)
    db.commit()

    # 3. Item rows, in the fixed order
    db.add_all([
        ChecklistItem(
            checklist_id=checklist.id,
            item_name=name,
            position=CHECKLIST_ITEMS.index(name),
            is_ok=items[name].ok,
            notes="" if items[name].ok else items[name].notes,
        )
        for name in CHECKLIST_ITEMS
    ])
    db.commit()

    # 4. Claim the vehicle while issues are open; a clean checklist only holds it for today
    if not all_ok:
        vehicle.current_driver = driver.full_name
        db.commit()

    # 5. Tell the supervisors
    failed = sum(1 for answer in items.values() if not answer.ok)
    message = f"Driver {driver.full_name} submitted a checklist and took vehicle {vehicle.plate}."
    if failed:
        message += f" {failed} item(s) need attention."
    notify(db, "New checklist received", message, type="checklist")

    logger.info(f"[CHECKLIST] {driver.full_name} → {vehicle.plate} status={checklist.status} failed={failed}")
    return checklist


def wizard_from_payload(vehicle_id: str, answers: Dict[str, ItemAnswer]) -> ChecklistWizard:
    """Walk the wizard up to the submit step; items missing from `answers` stay ok."""
    wizard = ChecklistWizard()
    wizard.select_vehicle(vehicle_id)
    wizard.continue_to_items()
    for name, answer in answers.items():
        wizard.mark(name, answer.ok, answer.notes)
    return wizard


# ── Queries ──────────────────────────────────────────────────────────────────
def get_checklist(db: Session, checklist_id: str) -> Checklist:
    checklist = db.query(Checklist).filter(Checklist.id == checklist_id).first()
    if not checklist:
        raise NotFoundError("Checklist not found")
    return checklist


def list_checklists(db: Session, driver_id: Optional[str] = None, limit: Optional[int] = None) -> list[Checklist]:
    q = db.query(Checklist)
    if driver_id:
        q = q.filter(Checklist.driver_id == driver_id)
    q = q.order_by(Checklist.created_at.desc())
    if limit:
        q = q.limit(limit)
    return q.all()


def split_by_status(checklists: list[Checklist]) -> dict:
    return {
        "pending": [c for c in checklists if c.status == "pending"],
        "resolved": [c for c in checklists if c.status == "resolved"],
    }


def count_since(db: Session, days: int, now: Optional[datetime] = None) -> int:
    since = (now or datetime.utcnow()) - timedelta(days=days)
    return db.query(Checklist).filter(Checklist.created_at >= since).count()


# ── Supervisor repair flow ───────────────────────────────────────────────────
def failed_items(db: Session, checklist_id: str) -> list[ChecklistItem]:
    get_checklist(db, checklist_id)
    return (
        db.query(ChecklistItem)
        .filter(ChecklistItem.checklist_id == checklist_id, ChecklistItem.is_ok.is_(False))
        .order_by(ChecklistItem.position)
        .all()
    )


def release_vehicle(db: Session, vehicle_id: str) -> bool:
    """Clear the vehicle claim unless another checklist on it is still pending."""
    still_pending = (
        db.query(Checklist)
        .filter(Checklist.vehicle_id == vehicle_id, Checklist.status == "pending")
        .count()
    )
    if still_pending:
        logger.info(f"[CHECKLIST] Vehicle {vehicle_id} kept claimed, {still_pending} pending checklist(s)")
        return False

    affected = (
        db.query(Vehicle)
        .filter(Vehicle.id == vehicle_id)
        .update({Vehicle.current_driver: None}, synchronize_session=False)
    )
    if affected < 1:
        db.rollback()
        raise RowNotAffectedError("The vehicle could not be released.")
    record_change(db, "vehicles", "UPDATE", vehicle_id)
    db.commit()
    return True


def resolve_items(db: Session, supervisor: Profile, checklist_id: str,
                  updates: Dict[str, ItemAnswer]) -> dict:
    """
    Apply the supervisor's per-item fixes, then resolve the checklist and
    release the vehicle if nothing is left failing.
    Returns {"checklist", "resolved", "remaining"}.
    """
    checklist = get_checklist(db, checklist_id)
    if checklist.status == "resolved":
        raise ValidationFailedError("This checklist is already resolved.")
    if not updates:
        raise ValidationFailedError("No item changes to save.")

    for item_id, answer in updates.items():
        affected = (
            db.query(ChecklistItem)
            .filter(ChecklistItem.id == item_id, ChecklistItem.checklist_id == checklist.id)
            .update({
                ChecklistItem.is_ok: answer.ok,
                ChecklistItem.notes: "" if answer.ok else (answer.notes or "").strip(),
            }, synchronize_session=False)
        )
        if affected < 1:
            db.rollback()
            raise RowNotAffectedError(
                "Item update was not applied. It may have been removed or you lack permission."
            )
        record_change(db, "checklist_items", "UPDATE", item_id)
        db.commit()

    remaining = (
        db.query(ChecklistItem)
        .filter(ChecklistItem.checklist_id == checklist.id, ChecklistItem.is_ok.is_(False))
        .count()
    )
    vehicle = checklist.vehicle
    plate = vehicle.plate if vehicle else "unknown"

    if remaining:
        notify(
            db, "Checklist in progress",
            f"{supervisor.full_name} fixed some issues on vehicle {plate}. "
            f"{remaining} item(s) still pending.",
            type="checklist", user_id=checklist.driver_id,
        )
        logger.info(f"[CHECKLIST] {checklist.id} partially repaired, {remaining} left")
        db.refresh(checklist)
        return {"checklist": checklist, "resolved": False, "remaining": remaining}

    affected = (
        db.query(Checklist)
        .filter(Checklist.id == checklist.id)
        .update({Checklist.status: "resolved"}, synchronize_session=False)
    )
    if affected < 1:
        db.rollback()
        raise RowNotAffectedError("The checklist could not be marked as resolved.")
    record_change(db, "checklists", "UPDATE", checklist.id)
    db.commit()

    release_vehicle(db, checklist.vehicle_id)

    notify(
        db, "Checklist resolved",
        f"All issues on vehicle {plate} were fixed by {supervisor.full_name}.",
        type="checklist", user_id=checklist.driver_id,
    )
    logger.info(f"[CHECKLIST] {checklist.id} resolved by {supervisor.full_name}")
    db.expire_all()
    return {"checklist": get_checklist(db, checklist.id), "resolved": True, "remaining": 0}


def delete_checklist(db: Session, checklist_id: str) -> None:
    """Items go first, then the checklist; a pending checklist also releases its vehicle."""
    checklist = get_checklist(db, checklist_id)
    was_pending = checklist.status == "pending"
    vehicle_id = checklist.vehicle_id

    db.query(ChecklistItem).filter(ChecklistItem.checklist_id == checklist.id).delete(synchronize_session=False)
    record_change(db, "checklist_items", "DELETE", None)
    db.commit()

    db.query(Checklist).filter(Checklist.id == checklist_id).delete(synchronize_session=False)
    record_change(db, "checklists", "DELETE", checklist_id)
    db.commit()

    if was_pending:
        release_vehicle(db, vehicle_id)
    db.expire_all()
    logger.info(f"[CHECKLIST] Deleted {checklist_id} (was_pending={was_pending})")
