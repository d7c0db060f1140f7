# fleetcheck/services/user_admin_service.py
"""
Privileged account functions: create / update / delete user identities.

Identity rows (auth_users) are never written by ordinary endpoints; only
these functions touch them, and invoke_function() only runs them for a
supervisor. The HTTP layer exposes them both as /users CRUD and under
/functions/{name}.
"""

from datetime import datetime
from typing import Callable, Dict, Optional

from sqlalchemy.orm import Session

from fleetcheck.auth.security import get_password_hash, username_to_email
from fleetcheck.auth.session import revoke_user_sessions
from fleetcheck.models.auth_user import AuthUser
from fleetcheck.models.checklist import Checklist
from fleetcheck.models.damage import Damage
from fleetcheck.models.fuel_log import FuelLog
from fleetcheck.models.notification import Notification
from fleetcheck.models.profile import Profile, Role
from fleetcheck.services import storage_service
from fleetcheck.services.vehicle_service import rename_driver_claims
from fleetcheck.utils.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def _check_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailedError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters.")


def _check_role(role: str) -> str:
    try:
        return Role(role).value
    except ValueError:
        raise ValidationFailedError(f"Invalid role '{role}'. Use driver or supervisor.")


def _normalize_username(username: str) -> str:
    cleaned = ".".join((username or "").strip().lower().split())
    if not cleaned:
        raise ValidationFailedError("Username is required.")
    return cleaned


def _ensure_username_free(db: Session, username: str, exclude_id: Optional[str] = None) -> None:
    q = db.query(Profile).filter(Profile.username == username)
    if exclude_id:
        q = q.filter(Profile.id != exclude_id)
    email_q = db.query(AuthUser).filter(AuthUser.email == username_to_email(username))
    if exclude_id:
        email_q = email_q.filter(AuthUser.id != exclude_id)
    if q.first() or email_q.first():
        raise ConflictError(f"Username '{username}' is already taken.")


def get_profile(db: Session, user_id: str) -> Profile:
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise NotFoundError("User not found")
    return profile


def list_users(db: Session) -> list[Profile]:
    return db.query(Profile).order_by(Profile.full_name).all()


def create_user(db: Session, username: str, password: str, full_name: Optional[str] = None,
                role: str = "driver", phone: Optional[str] = None) -> Profile:
    username = _normalize_username(username)
    _check_password(password)
    role = _check_role(role)
    _ensure_username_free(db, username)

    now = datetime.utcnow()
    user = AuthUser(email=username_to_email(username), password_hash=get_password_hash(password), created_at=now)
    db.add(user)
    db.flush()
    profile = Profile(
        id=user.id,
        full_name=(full_name or "").strip() or username,
        username=username,
        phone=(phone or "").strip() or None,
        role=role,
        created_at=now,
    )
    db.add(profile)
    db.commit()
    logger.info(f"[USERS] Created {role} account '{username}'")
    return profile


def update_user(db: Session, user_id: str, full_name: Optional[str] = None, role: Optional[str] = None,
                phone: Optional[str] = None, username: Optional[str] = None,
                password: Optional[str] = None) -> Profile:
    profile = get_profile(db, user_id)
    user = db.query(AuthUser).filter(AuthUser.id == user_id).first()
    if full_name is not None:
        if not full_name.strip():
            raise ValidationFailedError("Name cannot be empty.")
        rename_driver_claims(db, profile.full_name, full_name.strip())
        profile.full_name = full_name.strip()
    if role is not None:
        profile.role = _check_role(role)
    if phone is not None:
        profile.phone = phone.strip() or None
    if username is not None:
        username = _normalize_username(username)
        if username != profile.username:
            _ensure_username_free(db, username, exclude_id=user_id)
            profile.username = username
            if user:
                user.email = username_to_email(username)
    if password:
        _check_password(password)
        if user:
            user.password_hash = get_password_hash(password)
    db.commit()
    logger.info(f"[USERS] Updated account '{profile.username}'")
    return profile


def delete_user(db: Session, acting: Profile, user_id: str) -> None:
    if acting.id == user_id:
        raise PermissionDeniedError("You cannot delete your own account.")
    profile = get_profile(db, user_id)
    has_history = (
        db.query(Checklist.id).filter(Checklist.driver_id == user_id).first()
        or db.query(FuelLog.id).filter(FuelLog.driver_id == user_id).first()
    )
    if has_history:
        raise ConflictError(
            f"{profile.full_name} has checklists or fuel logs on record and cannot be deleted."
        )

    db.query(Damage).filter(Damage.reported_by == user_id).update(
        {Damage.reported_by: None}, synchronize_session=False
    )
    db.query(Notification).filter(Notification.user_id == user_id).delete(synchronize_session=False)
    revoke_user_sessions(db, user_id)
    username, avatar_url = profile.username, profile.avatar_url
    db.delete(profile)
    db.flush()
    db.query(AuthUser).filter(AuthUser.id == user_id).delete(synchronize_session=False)
    db.commit()
    storage_service.remove_url("avatars", avatar_url)
    logger.info(f"[USERS] Deleted account '{username}'")


# ── Function invocation ──────────────────────────────────────────────────────
def _fn_create(db: Session, caller: Profile, body: dict):
    return create_user(db, body.get("username"), body.get("password"), body.get("full_name"),
                       body.get("role", "driver"), body.get("phone"))


def _fn_update(db: Session, caller: Profile, body: dict):
    user_id = body.get("user_id") or body.get("id")
    if not user_id:
        raise ValidationFailedError("user_id is required.")
    return update_user(db, user_id, body.get("full_name"), body.get("role"), body.get("phone"),
                       body.get("username"), body.get("password"))


def _fn_delete(db: Session, caller: Profile, body: dict):
    user_id = body.get("user_id") or body.get("id")
    if not user_id:
        raise ValidationFailedError("user_id is required.")
    delete_user(db, caller, user_id)
    return None


FUNCTIONS: Dict[str, Callable] = {
    "create-user": _fn_create,
    "update-user": _fn_update,
    "delete-user": _fn_delete,
}


def invoke_function(db: Session, caller: Profile, name: str, body: Optional[dict] = None):
    fn = FUNCTIONS.get(name)
    if fn is None:
        raise NotFoundError(f"Function '{name}' not found")
    if not caller.is_supervisor:
        raise PermissionDeniedError("Only supervisors may manage user accounts.")
    logger.info(f"[FUNCTIONS] {caller.full_name} invoked {name}")
    return fn(db, caller, body or {})
