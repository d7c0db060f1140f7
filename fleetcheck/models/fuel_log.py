# fleetcheck/models/fuel_log.py
"""Refueling records. Each log also advances the vehicle's recorded mileage."""

from sqlalchemy import Column, Integer, Float, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from fleetcheck.database import Base
from fleetcheck.models.base import new_id


class FuelLog(Base):
    __tablename__ = "fuel_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id"), nullable=False, index=True)
    driver_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    mileage = Column(Integer, nullable=False)
    liters = Column(Float, nullable=False)
    value = Column(Float, nullable=False)    # amount paid
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)

    vehicle = relationship("Vehicle")

    def __repr__(self):
        return f"<FuelLog {self.id} vehicle={self.vehicle_id} liters={self.liters}>"
