# fleetcheck/schemas/damage.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from fleetcheck.schemas.user import ProfileBrief
from fleetcheck.schemas.vehicle import VehicleBrief


class DamageUpdate(BaseModel):
    vehicle_id: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None    # low | medium | high


class DamageOut(BaseModel):
    id: str
    vehicle_id: str
    reported_by: Optional[str]
    description: str
    photo_url: Optional[str]
    priority: str
    status: str                       # pending | resolved
    created_at: datetime
    updated_at: Optional[datetime]
    vehicle: Optional[VehicleBrief] = None
    reporter: Optional[ProfileBrief] = None

    class Config:
        from_attributes = True
