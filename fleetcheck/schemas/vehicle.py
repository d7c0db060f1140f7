# fleetcheck/schemas/vehicle.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class VehicleBrief(BaseModel):
    id: str
    brand: str
    model: str
    plate: str

    class Config:
        from_attributes = True


class VehicleCreate(BaseModel):
    brand: str
    model: str
    year: int
    plate: str
    mileage: int = 0
    status: str = "active"        # active | maintenance | inactive


class VehicleUpdate(BaseModel):
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    plate: Optional[str] = None
    mileage: Optional[int] = None
    status: Optional[str] = None


class VehicleOut(BaseModel):
    id: str
    brand: str
    model: str
    year: int
    plate: str
    mileage: int
    status: str
    current_driver: Optional[str]
    photo_url: Optional[str]
    created_at: datetime
    badge: Optional[dict] = None   # filled from vehicle_service.status_badge()

    class Config:
        from_attributes = True
