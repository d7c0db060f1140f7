# fleetcheck/schemas/checklist.py
from pydantic import BaseModel
from datetime import datetime
from typing import Dict, Optional
from fleetcheck.schemas.user import ProfileBrief
from fleetcheck.schemas.vehicle import VehicleBrief


class ItemAnswerIn(BaseModel):
    ok: bool = True
    notes: str = ""


class ChecklistSubmit(BaseModel):
    vehicle_id: str
    items: Dict[str, ItemAnswerIn] = {}   # item name -> answer; missing names count as ok


class RepairRequest(BaseModel):
    items: Dict[str, ItemAnswerIn]        # checklist_item id -> new answer


class ChecklistItemOut(BaseModel):
    id: str
    item_name: str
    position: int
    is_ok: bool
    notes: Optional[str]

    class Config:
        from_attributes = True


class ChecklistOut(BaseModel):
    id: str
    vehicle_id: str
    driver_id: str
    status: str                   # pending | resolved
    created_at: datetime
    vehicle: Optional[VehicleBrief] = None
    driver: Optional[ProfileBrief] = None
    items: list[ChecklistItemOut] = []

    class Config:
        from_attributes = True
