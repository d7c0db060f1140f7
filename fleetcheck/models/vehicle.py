# fleetcheck/models/vehicle.py
"""
Fleet vehicles table.
current_driver holds the name of the driver whose unresolved checklist
claims the vehicle; it is cleared when that checklist is resolved.
"""

from sqlalchemy import Column, Integer, String, DateTime
from fleetcheck.database import Base
from fleetcheck.models.base import new_id

VEHICLE_STATUSES = ("active", "maintenance", "inactive")


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=new_id)
    brand = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    plate = Column(String(20), nullable=False, index=True)   # unique in practice, not enforced
    mileage = Column(Integer, default=0, nullable=False)
    status = Column(String(20), default="active", nullable=False)   # active | maintenance | inactive
    current_driver = Column(String(200))
    photo_url = Column(String(500))
    created_at = Column(DateTime, nullable=False, index=True)

    @property
    def label(self) -> str:
        return f"{self.brand} {self.model} ({self.plate})"

    def __repr__(self):
        return f"<Vehicle {self.plate} status={self.status} driver={self.current_driver}>"
