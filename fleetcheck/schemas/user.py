# fleetcheck/schemas/user.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ProfileBrief(BaseModel):
    id: str
    full_name: str

    class Config:
        from_attributes = True


class ProfileOut(BaseModel):
    id: str
    full_name: str
    username: Optional[str]
    phone: Optional[str]
    avatar_url: Optional[str]
    role: str                     # driver | supervisor
    created_at: datetime

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    username: str
    password: str
    full_name: Optional[str] = None
    role: str = "driver"
    phone: Optional[str] = None


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    role: Optional[str] = None
    phone: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None   # blank keeps the current password


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
