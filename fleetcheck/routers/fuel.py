# fleetcheck/routers/fuel.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleetcheck.auth.session import SessionContext, require_driver
from fleetcheck.database import get_db
from fleetcheck.schemas.fuel import FuelLogCreate, FuelLogOut
from fleetcheck.services import fuel_service

router = APIRouter()


@router.get("/fuel", response_model=list[FuelLogOut], summary="The driver's most recent fuel logs")
def recent_logs(ctx: SessionContext = Depends(require_driver), db: Session = Depends(get_db)):
    return fuel_service.recent_logs(db, ctx.profile.id)


@router.post("/fuel", status_code=201, summary="Log a refueling")
def log_fuel(body: FuelLogCreate, ctx: SessionContext = Depends(require_driver), db: Session = Depends(get_db)):
    fuel_log = fuel_service.log_fuel(db, ctx.profile, body.vehicle_id, body.mileage,
                                     body.liters, body.value, body.date)
    return {"fuel_log": FuelLogOut.model_validate(fuel_log), "toast": ctx.toast("Fuel logged successfully!")}
