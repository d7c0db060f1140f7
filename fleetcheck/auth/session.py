# fleetcheck/auth/session.py
"""
Session/identity context.

sign_in() checks credentials and opens an auth_sessions row; every request
then resolves its bearer token to a SessionContext (identity + fresh
profile row + per-session mutable state). Role-gated handlers depend on
require_role(...), so no handler runs before the session is resolved.

Per-session state that never touches the database (toast queue, ignored
escalation damages) lives in SessionStore, keyed by token jti. It is
created on first use, torn down on sign-out and swept on every sign-in.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Set

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from fleetcheck.auth.security import (
    create_access_token,
    decode_token,
    username_to_email,
    verify_password,
)
from fleetcheck.database import get_db
from fleetcheck.models.auth_user import AuthSession, AuthUser
from fleetcheck.models.profile import Profile, Role
from fleetcheck.utils.errors import AuthenticationError, PermissionDeniedError
from fleetcheck.utils.logger import get_logger
from fleetcheck.utils.toast import ToastQueue

logger = get_logger(__name__)

http_bearer = HTTPBearer(auto_error=False)


@dataclass
class SessionState:
    toasts: ToastQueue = field(default_factory=ToastQueue)
    ignored_damages: Set[str] = field(default_factory=set)


class SessionStore:
    def __init__(self):
        self._states: Dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def get(self, jti: str) -> SessionState:
        with self._lock:
            state = self._states.get(jti)
            if state is None:
                state = self._states[jti] = SessionState()
            return state

    def drop(self, jti: str) -> None:
        with self._lock:
            self._states.pop(jti, None)

    def retain(self, live: Set[str]) -> int:
        """Forget state of every session not in `live`; returns how many were dropped."""
        with self._lock:
            stale = [jti for jti in self._states if jti not in live]
            for jti in stale:
                del self._states[jti]
        return len(stale)

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, jti: str) -> bool:
        return jti in self._states


store = SessionStore()


@dataclass
class SessionContext:
    jti: str
    user: AuthUser
    profile: Profile
    state: SessionState

    @property
    def role(self) -> Role:
        return Role(self.profile.role)

    @property
    def is_supervisor(self) -> bool:
        return self.role is Role.SUPERVISOR

    def toast(self, message: str, type: str = "success") -> dict:
        return self.state.toasts.add(message, type).as_dict()


def sign_in(db: Session, username: str, password: str) -> tuple[str, SessionContext]:
    """Password sign-in. Returns (bearer token, context)."""
    if not username or not password:
        raise AuthenticationError("Username and password are required.")
    email = username_to_email(username)
    user = db.query(AuthUser).filter(AuthUser.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        logger.info(f"[AUTH] Failed sign-in for {email}")
        raise AuthenticationError("Invalid username or password.")
    profile = db.query(Profile).filter(Profile.id == user.id).first()
    if not profile:
        raise AuthenticationError("No profile is linked to this account. Contact a supervisor.")

    token, jti, expires_at = create_access_token(user.id, profile.role)
    db.add(AuthSession(id=jti, user_id=user.id, created_at=datetime.utcnow(), expires_at=expires_at))
    db.commit()
    sweep_sessions(db)
    logger.info(f"[AUTH] {profile.full_name} signed in as {profile.role}")
    return token, SessionContext(jti=jti, user=user, profile=profile, state=store.get(jti))


def sweep_sessions(db: Session) -> int:
    """Drop in-memory state of sessions that expired or were revoked."""
    live = {
        jti for (jti,) in db.query(AuthSession.id).filter(
            AuthSession.revoked_at.is_(None), AuthSession.expires_at >= datetime.utcnow()
        )
    }
    dropped = store.retain(live)
    if dropped:
        logger.debug(f"[AUTH] Swept {dropped} stale session state(s)")
    return dropped


def resolve_token(db: Session, token: Optional[str]) -> SessionContext:
    if not token:
        raise AuthenticationError("Not signed in.")
    claims = decode_token(token)
    jti = claims.get("jti")
    row = db.query(AuthSession).filter(AuthSession.id == jti).first()
    if not row or row.revoked_at is not None or row.expires_at < datetime.utcnow():
        store.drop(jti)
        raise AuthenticationError("Session expired. Please sign in again.")
    user = db.query(AuthUser).filter(AuthUser.id == row.user_id).first()
    profile = db.query(Profile).filter(Profile.id == row.user_id).first()
    if not user or not profile:
        raise AuthenticationError("Account no longer exists.")
    return SessionContext(jti=jti, user=user, profile=profile, state=store.get(jti))


def sign_out(db: Session, ctx: SessionContext) -> None:
    db.query(AuthSession).filter(AuthSession.id == ctx.jti).update(
        {AuthSession.revoked_at: datetime.utcnow()}, synchronize_session=False
    )
    db.commit()
    store.drop(ctx.jti)
    logger.info(f"[AUTH] {ctx.profile.full_name} signed out")


def revoke_user_sessions(db: Session, user_id: str) -> int:
    """Revoke every open session of a user (used when an account is deleted)."""
    rows = db.query(AuthSession).filter(AuthSession.user_id == user_id, AuthSession.revoked_at.is_(None)).all()
    for row in rows:
        row.revoked_at = datetime.utcnow()
        store.drop(row.id)
    return len(rows)


# ── FastAPI dependencies ─────────────────────────────────────────────────────
def get_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
    db: Session = Depends(get_db),
) -> SessionContext:
    ctx = resolve_token(db, credentials.credentials if credentials else None)
    # Lets the error handler queue its toast on this session
    request.state.fleet_session = ctx
    return ctx


def require_role(*roles: Role):
    allowed = {Role(r) for r in roles}

    def dependency(ctx: SessionContext = Depends(get_session)) -> SessionContext:
        if ctx.role not in allowed:
            raise PermissionDeniedError("You do not have permission to perform this action.")
        return ctx

    return dependency


require_supervisor = require_role(Role.SUPERVISOR)
require_driver = require_role(Role.DRIVER)
