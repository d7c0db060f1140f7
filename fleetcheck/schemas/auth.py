# fleetcheck/schemas/auth.py
from pydantic import BaseModel
from datetime import datetime
from fleetcheck.schemas.user import ProfileOut


class SignInRequest(BaseModel):
    username: str
    password: str


class SessionOut(BaseModel):
    user_id: str
    email: str
    role: str
    profile: ProfileOut


class SignInResponse(SessionOut):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
