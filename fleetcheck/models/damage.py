# fleetcheck/models/damage.py
"""
Damage reports table.
Created by drivers, edited/resolved/deleted by supervisors. Pending
damages feed the supervisor escalation popup by priority.
"""

from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from fleetcheck.database import Base
from fleetcheck.models.base import new_id

DAMAGE_PRIORITIES = ("low", "medium", "high")


class Damage(Base):
    __tablename__ = "damages"

    id = Column(String(36), primary_key=True, default=new_id)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id"), nullable=False, index=True)
    reported_by = Column(String(36), ForeignKey("profiles.id"), index=True)
    description = Column(Text, nullable=False)
    photo_url = Column(String(500))
    priority = Column(String(10), default="medium", nullable=False)   # low | medium | high
    status = Column(String(20), default="pending", nullable=False)    # pending | resolved
    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime)

    vehicle = relationship("Vehicle")
    reporter = relationship("Profile")

    def __repr__(self):
        return f"<Damage {self.id} priority={self.priority} status={self.status}>"
