# fleetcheck/routers/checklists.py
"""
Checklist submission (driver) and repair / deletion (supervisor).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleetcheck.auth.session import SessionContext, get_session, require_driver, require_supervisor
from fleetcheck.database import get_db
from fleetcheck.routers.vehicles import vehicle_out
from fleetcheck.schemas.checklist import ChecklistItemOut, ChecklistOut, ChecklistSubmit, RepairRequest
from fleetcheck.schemas.vehicle import VehicleOut
from fleetcheck.services import checklist_service
from fleetcheck.services.checklist_service import ItemAnswer
from fleetcheck.utils.errors import PermissionDeniedError

router = APIRouter()


@router.get("/checklists/items", response_model=list[str], summary="The fixed inspection items, in order")
def checklist_items():
    return checklist_service.CHECKLIST_ITEMS


@router.get("/checklists/available-vehicles", response_model=list[VehicleOut],
            summary="Vehicles this driver may check out today")
def available_vehicles(ctx: SessionContext = Depends(require_driver), db: Session = Depends(get_db)):
    return [vehicle_out(v) for v in checklist_service.available_vehicles(db, ctx.profile)]


@router.get("/checklists", summary="Checklists split pending / resolved")
def list_checklists(ctx: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    """Supervisors see every checklist; drivers only their own."""
    driver_id = None if ctx.is_supervisor else ctx.profile.id
    split = checklist_service.split_by_status(checklist_service.list_checklists(db, driver_id=driver_id))
    return {k: [ChecklistOut.model_validate(c) for c in v] for k, v in split.items()}


@router.post("/checklists", status_code=201, summary="Submit a checklist and claim the vehicle")
def submit_checklist(body: ChecklistSubmit, ctx: SessionContext = Depends(require_driver),
                     db: Session = Depends(get_db)):
    answers = {name: ItemAnswer(ok=a.ok, notes=a.notes) for name, a in body.items.items()}
    wizard = checklist_service.wizard_from_payload(body.vehicle_id, answers)
    checklist = wizard.submit(db, ctx.profile)
    db.refresh(checklist)
    message = (
        "Checklist submitted successfully!" if checklist.status == "resolved"
        else "Checklist submitted. Supervisors were told about the failed items."
    )
    return {"checklist": ChecklistOut.model_validate(checklist), "toast": ctx.toast(message)}


@router.get("/checklists/{checklist_id}", response_model=ChecklistOut, summary="One checklist with its items")
def get_checklist(checklist_id: str, ctx: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    checklist = checklist_service.get_checklist(db, checklist_id)
    if not ctx.is_supervisor and checklist.driver_id != ctx.profile.id:
        raise PermissionDeniedError("You can only view your own checklists.")
    return checklist


@router.get("/checklists/{checklist_id}/repair", response_model=list[ChecklistItemOut],
            summary="Failed items awaiting repair")
def repair_items(checklist_id: str, ctx: SessionContext = Depends(require_supervisor),
                 db: Session = Depends(get_db)):
    return checklist_service.failed_items(db, checklist_id)


@router.post("/checklists/{checklist_id}/repair", summary="Save item fixes; resolves when all are ok")
def repair(checklist_id: str, body: RepairRequest, ctx: SessionContext = Depends(require_supervisor),
           db: Session = Depends(get_db)):
    updates = {item_id: ItemAnswer(ok=a.ok, notes=a.notes) for item_id, a in body.items.items()}
    result = checklist_service.resolve_items(db, ctx.profile, checklist_id, updates)
    if result["resolved"]:
        toast = ctx.toast("Checklist resolved and vehicle released!")
    else:
        toast = ctx.toast(f"Changes saved. {result['remaining']} item(s) still pending.", "info")
    return {
        "checklist": ChecklistOut.model_validate(result["checklist"]),
        "resolved": result["resolved"],
        "remaining": result["remaining"],
        "toast": toast,
    }


@router.delete("/checklists/{checklist_id}", summary="Delete a checklist and its items")
def delete_checklist(checklist_id: str, ctx: SessionContext = Depends(require_supervisor),
                     db: Session = Depends(get_db)):
    checklist_service.delete_checklist(db, checklist_id)
    return {"status": "deleted", "id": checklist_id, "toast": ctx.toast("Checklist deleted.")}
