# fleetcheck/models/profile.py
"""
Profiles table: the application identity layered over auth_users.
Role drives every view/action gate: driver or supervisor.
"""

import enum

from sqlalchemy import Column, String, DateTime, ForeignKey
from fleetcheck.database import Base


class Role(str, enum.Enum):
    DRIVER = "driver"
    SUPERVISOR = "supervisor"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), ForeignKey("auth_users.id", ondelete="CASCADE"), primary_key=True)
    full_name = Column(String(200), nullable=False)
    username = Column(String(100), unique=True, index=True)
    phone = Column(String(50))
    avatar_url = Column(String(500))
    role = Column(String(20), nullable=False, default=Role.DRIVER.value)   # driver | supervisor
    created_at = Column(DateTime, nullable=False)

    @property
    def is_supervisor(self) -> bool:
        return self.role == Role.SUPERVISOR.value

    def __repr__(self):
        return f"<Profile {self.full_name} role={self.role}>"
