# fleetcheck/services/notification_service.py
"""
Shared notification creation + the layout's notification bell.
Used by checklist_service, damage_service and fuel_service as a side
effect of driver/supervisor actions.

Visibility: supervisors see broadcasts (user_id NULL) plus rows targeted
at them; drivers only see rows targeted at them.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from fleetcheck.config import settings
from fleetcheck.models.notification import Notification, NOTIFICATION_TYPES
from fleetcheck.models.profile import Profile
from fleetcheck.utils.errors import NotFoundError
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

UNREAD_BADGE_CAP = 99


def notify(db: Session, title: str, message: str, type: str = "system",
           user_id: Optional[str] = None) -> Notification:
    """Create and persist a notification. Always commits immediately."""
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")
    notification = Notification(user_id=user_id, title=title, message=message,
                                type=type, read=False, created_at=datetime.utcnow())
    db.add(notification)
    db.commit()
    target = user_id or "supervisors"
    logger.info(f"[NOTIFY][{type.upper()}] → {target}: {title}")
    return notification


def _visible_to(profile: Profile):
    if profile.is_supervisor:
        return or_(Notification.user_id.is_(None), Notification.user_id == profile.id)
    return Notification.user_id == profile.id


def list_for(db: Session, profile: Profile, limit: Optional[int] = None) -> list[Notification]:
    """Newest notifications visible to `profile` (bell dropdown)."""
    return (
        db.query(Notification)
        .filter(_visible_to(profile))
        .order_by(Notification.created_at.desc())
        .limit(limit or settings.NOTIFICATION_FEED_LIMIT)
        .all()
    )


def unread_count(db: Session, profile: Profile) -> int:
    return db.query(Notification).filter(_visible_to(profile), Notification.read.is_(False)).count()


def badge_label(count: int) -> Optional[str]:
    """Bell badge text: nothing at zero, '99+' above the cap."""
    if count <= 0:
        return None
    return f"{UNREAD_BADGE_CAP}+" if count > UNREAD_BADGE_CAP else str(count)


def mark_read(db: Session, profile: Profile, notification_id: str) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, _visible_to(profile))
        .first()
    )
    if not notification:
        raise NotFoundError("Notification not found")
    notification.read = True
    db.commit()
    return notification


def mark_all_read(db: Session, profile: Profile) -> int:
    rows = db.query(Notification).filter(_visible_to(profile), Notification.read.is_(False)).all()
    for row in rows:
        row.read = True
    db.commit()
    return len(rows)
