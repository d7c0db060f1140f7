# fleetcheck/models/checklist.py
"""
Checklists + their 12 inspection items.
A checklist is created by a driver claiming a vehicle; it starts resolved
when every item is ok, pending otherwise, and a supervisor resolves it
by fixing the flagged items.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship
from fleetcheck.database import Base
from fleetcheck.models.base import new_id


class Checklist(Base):
    __tablename__ = "checklists"

    id = Column(String(36), primary_key=True, default=new_id)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id"), nullable=False, index=True)
    driver_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    status = Column(String(20), default="pending", nullable=False)   # pending | resolved
    created_at = Column(DateTime, nullable=False, index=True)

    vehicle = relationship("Vehicle")
    driver = relationship("Profile")
    items = relationship("ChecklistItem", order_by="ChecklistItem.position")

    def __repr__(self):
        return f"<Checklist {self.id} vehicle={self.vehicle_id} status={self.status}>"


class ChecklistItem(Base):
    __tablename__ = "checklist_items"

    id = Column(String(36), primary_key=True, default=new_id)
    checklist_id = Column(String(36), ForeignKey("checklists.id"), nullable=False, index=True)
    item_name = Column(String(200), nullable=False)
    position = Column(Integer, nullable=False, default=0)   # index in CHECKLIST_ITEMS
    is_ok = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, default="")

    def __repr__(self):
        return f"<ChecklistItem {self.item_name} ok={self.is_ok}>"
