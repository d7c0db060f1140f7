# fleetcheck/schemas/toast.py
from pydantic import BaseModel


class ToastOut(BaseModel):
    id: str
    type: str                         # success | error | info | warning
    message: str
    duration_ms: int
