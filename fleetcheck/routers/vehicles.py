# fleetcheck/routers/vehicles.py
"""Vehicle list (any signed-in user) and supervisor CRUD + photo upload."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session
from fleetcheck.auth.session import SessionContext, get_session, require_supervisor
from fleetcheck.database import get_db
from fleetcheck.models.vehicle import Vehicle
from fleetcheck.schemas.vehicle import VehicleCreate, VehicleOut, VehicleUpdate
from fleetcheck.services import vehicle_service
from typing import Optional

router = APIRouter()


def vehicle_out(vehicle: Vehicle) -> VehicleOut:
    out = VehicleOut.model_validate(vehicle)
    out.badge = vehicle_service.status_badge(vehicle)
    return out


@router.get("/vehicles", response_model=list[VehicleOut], summary="List vehicles — search + status filter")
def list_vehicles(
    search: Optional[str] = None,
    status: Optional[str] = None,
    ctx: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    """`search` matches brand, model or plate; `status` accepts active, maintenance, inactive or in_use."""
    return [vehicle_out(v) for v in vehicle_service.list_vehicles(db, search, status)]


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="One vehicle")
def get_vehicle(vehicle_id: str, ctx: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    return vehicle_out(vehicle_service.get_vehicle(db, vehicle_id))


@router.post("/vehicles", status_code=201, summary="Register a vehicle")
def create_vehicle(body: VehicleCreate, ctx: SessionContext = Depends(require_supervisor),
                   db: Session = Depends(get_db)):
    vehicle = vehicle_service.create_vehicle(db, **body.model_dump())
    return {"vehicle": vehicle_out(vehicle), "toast": ctx.toast("Vehicle registered successfully!")}


@router.put("/vehicles/{vehicle_id}", summary="Edit a vehicle")
def update_vehicle(vehicle_id: str, body: VehicleUpdate, ctx: SessionContext = Depends(require_supervisor),
                   db: Session = Depends(get_db)):
    vehicle = vehicle_service.update_vehicle(db, vehicle_id, **body.model_dump(exclude_unset=True))
    return {"vehicle": vehicle_out(vehicle), "toast": ctx.toast("Vehicle updated successfully!")}


@router.delete("/vehicles/{vehicle_id}", summary="Delete a vehicle")
def delete_vehicle(vehicle_id: str, ctx: SessionContext = Depends(require_supervisor),
                   db: Session = Depends(get_db)):
    vehicle_service.delete_vehicle(db, vehicle_id)
    return {"status": "deleted", "id": vehicle_id, "toast": ctx.toast("Vehicle deleted.")}


@router.post("/vehicles/{vehicle_id}/photo", summary="Upload a vehicle photo")
def upload_photo(vehicle_id: str, photo: UploadFile = File(...),
                 ctx: SessionContext = Depends(require_supervisor), db: Session = Depends(get_db)):
    vehicle = vehicle_service.set_photo(db, vehicle_id, photo.file.read(), photo.filename, photo.content_type)
    return {"vehicle": vehicle_out(vehicle), "toast": ctx.toast("Photo uploaded.")}
