# fleetcheck/models/notification.py
"""
Notifications table.
user_id = NULL means a broadcast to every supervisor; otherwise the row
targets one user (e.g. the driver whose checklist was resolved).
"""

from sqlalchemy import Column, String, DateTime, Text, Boolean
from fleetcheck.database import Base
from fleetcheck.models.base import new_id

NOTIFICATION_TYPES = ("checklist", "damage", "fuel", "system")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), default="system", nullable=False)   # checklist | damage | fuel | system
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Notification {self.id} type={self.type} read={self.read}>"
