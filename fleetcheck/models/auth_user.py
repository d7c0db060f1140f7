# fleetcheck/models/auth_user.py
"""
Platform identity tables.
auth_users holds the sign-in identity (email + password hash); one Profile
row shares its id. auth_sessions tracks issued tokens so sign-out can
revoke them.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from fleetcheck.database import Base
from fleetcheck.models.base import new_id


class AuthUser(Base):
    __tablename__ = "auth_users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<AuthUser {self.id} email={self.email}>"


class AuthSession(Base):
    __tablename__ = "auth_sessions"

    id = Column(String(36), primary_key=True, default=new_id)   # token jti
    user_id = Column(String(36), ForeignKey("auth_users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime)

    def __repr__(self):
        return f"<AuthSession {self.id} user={self.user_id} revoked={self.revoked_at is not None}>"
