# fleetcheck/schemas/notification.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class NotificationOut(BaseModel):
    id: str
    user_id: Optional[str]            # None = broadcast to supervisors
    title: str
    message: str
    type: str
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationFeed(BaseModel):
    items: list[NotificationOut]
    unread: int
    badge: Optional[str]
