# fleetcheck/services/profile_service.py
"""Self-service profile edits from the layout's profile modal."""

from typing import Optional

from sqlalchemy.orm import Session

from fleetcheck.auth.security import get_password_hash
from fleetcheck.models.auth_user import AuthUser
from fleetcheck.models.profile import Profile
from fleetcheck.services import storage_service
from fleetcheck.services.vehicle_service import rename_driver_claims
from fleetcheck.services.user_admin_service import MIN_PASSWORD_LENGTH
from fleetcheck.utils.errors import ValidationFailedError
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)


def update_own_profile(db: Session, profile: Profile, full_name: Optional[str] = None,
                       phone: Optional[str] = None, password: Optional[str] = None) -> Profile:
    if full_name is not None:
        if not full_name.strip():
            raise ValidationFailedError("Name cannot be empty.")
        rename_driver_claims(db, profile.full_name, full_name.strip())
        profile.full_name = full_name.strip()
    if phone is not None:
        profile.phone = phone.strip() or None
    if password:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailedError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters.")
        user = db.query(AuthUser).filter(AuthUser.id == profile.id).first()
        user.password_hash = get_password_hash(password)
    db.commit()
    logger.info(f"[PROFILE] {profile.full_name} updated their profile")
    return profile


def set_avatar(db: Session, profile: Profile, data: bytes, filename: str, content_type: str) -> Profile:
    key = storage_service.upload_image("avatars", data, filename, content_type)
    old_url = profile.avatar_url
    profile.avatar_url = storage_service.get_public_url("avatars", key)
    db.commit()
    storage_service.remove_url("avatars", old_url)
    return profile
