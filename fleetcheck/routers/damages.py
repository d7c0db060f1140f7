# fleetcheck/routers/damages.py
"""Damage reports: list, report (with optional photo), edit, resolve, delete."""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from fleetcheck.auth.session import SessionContext, get_session, require_driver, require_supervisor
from fleetcheck.database import get_db
from fleetcheck.schemas.damage import DamageOut, DamageUpdate
from fleetcheck.services import damage_service
from typing import Optional

router = APIRouter()


@router.get("/damages", response_model=list[DamageOut], summary="Damage reports, newest first")
def list_damages(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    limit: Optional[int] = None,
    ctx: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    return damage_service.list_damages(db, status=status, priority=priority, limit=limit)


@router.post("/damages", status_code=201, summary="Report damage on a vehicle")
def report_damage(
    vehicle_id: str = Form(...),
    description: str = Form(...),
    priority: str = Form("medium"),
    photo: Optional[UploadFile] = File(None),
    ctx: SessionContext = Depends(require_driver),
    db: Session = Depends(get_db),
):
    """Multipart form so the photo can travel with the report."""
    upload = None
    if photo is not None and photo.filename:
        upload = (photo.file.read(), photo.filename, photo.content_type)
    damage = damage_service.report_damage(db, ctx.profile, vehicle_id, description, priority, upload)
    return {"damage": DamageOut.model_validate(damage), "toast": ctx.toast("Damage reported successfully!")}


@router.put("/damages/{damage_id}", summary="Edit a damage report")
def update_damage(damage_id: str, body: DamageUpdate, ctx: SessionContext = Depends(get_session),
                  db: Session = Depends(get_db)):
    damage = damage_service.update_damage(db, ctx.profile, damage_id, **body.model_dump(exclude_unset=True))
    return {"damage": DamageOut.model_validate(damage), "toast": ctx.toast("Damage report updated.")}


@router.post("/damages/{damage_id}/photo", summary="Replace a damage photo")
def upload_photo(damage_id: str, photo: UploadFile = File(...), ctx: SessionContext = Depends(get_session),
                 db: Session = Depends(get_db)):
    damage = damage_service.set_photo(db, ctx.profile, damage_id, photo.file.read(),
                                      photo.filename, photo.content_type)
    return {"damage": DamageOut.model_validate(damage), "toast": ctx.toast("Photo uploaded.")}


@router.post("/damages/{damage_id}/resolve", summary="Mark a damage as resolved")
def resolve_damage(damage_id: str, ctx: SessionContext = Depends(require_supervisor),
                   db: Session = Depends(get_db)):
    damage = damage_service.resolve_damage(db, ctx.profile, damage_id)
    return {"damage": DamageOut.model_validate(damage), "toast": ctx.toast("Damage marked as resolved!")}


@router.delete("/damages/{damage_id}", summary="Delete a damage report")
def delete_damage(damage_id: str, ctx: SessionContext = Depends(require_supervisor),
                  db: Session = Depends(get_db)):
    damage_service.delete_damage(db, damage_id)
    return {"status": "deleted", "id": damage_id, "toast": ctx.toast("Damage report deleted.")}
