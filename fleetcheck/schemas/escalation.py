# fleetcheck/schemas/escalation.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from fleetcheck.schemas.damage import DamageOut


class EscalationOut(BaseModel):
    damage: Optional[DamageOut]
    due_at: Optional[datetime]
    next_check_at: Optional[datetime]


class EscalationAction(BaseModel):
    action: str                       # close | notify | resolve
