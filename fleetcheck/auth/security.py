# fleetcheck/auth/security.py
"""
Password hashing and bearer tokens.
Tokens are JWTs whose jti must match a live auth_sessions row, so
sign-out (revocation) takes effect immediately.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from fleetcheck.config import settings
from fleetcheck.utils.errors import AuthenticationError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def username_to_email(username: str) -> str:
    """'Ana Souza ' -> 'ana.souza@fleetcheck.local'; full addresses pass through."""
    cleaned = username.strip().lower()
    if "@" in cleaned:
        return cleaned
    return f"{'.'.join(cleaned.split())}@{settings.LOGIN_EMAIL_DOMAIN}"


def create_access_token(user_id: str, role: str, jti: Optional[str] = None,
                        ttl_minutes: Optional[int] = None) -> tuple[str, str, datetime]:
    """Returns (token, jti, expires_at as naive UTC)."""
    now = datetime.now(tz=timezone.utc)
    expires = now + timedelta(minutes=ttl_minutes or settings.SESSION_TTL_MINUTES)
    jti = jti or str(uuid.uuid4())
    payload = {
        "sub": user_id,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
        "jti": jti,
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, jti, expires.replace(tzinfo=None)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expired. Please sign in again.")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid session token.")
