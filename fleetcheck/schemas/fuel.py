# fleetcheck/schemas/fuel.py
from pydantic import BaseModel
from datetime import date as Date, datetime
from typing import Optional
from fleetcheck.schemas.vehicle import VehicleBrief


class FuelLogCreate(BaseModel):
    vehicle_id: str
    mileage: int
    liters: float
    value: float
    date: Optional[Date] = None       # defaults to today


class FuelLogOut(BaseModel):
    id: str
    vehicle_id: str
    driver_id: str
    mileage: int
    liters: float
    value: float
    date: Date
    created_at: datetime
    vehicle: Optional[VehicleBrief] = None

    class Config:
        from_attributes = True
