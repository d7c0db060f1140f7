# fleetcheck/routers/layout.py
"""
Layout shell: role-gated navigation, notification bell, own-profile modal
and the session's toast queue.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session
from fleetcheck.auth.session import SessionContext, get_session
from fleetcheck.database import get_db
from fleetcheck.schemas.notification import NotificationFeed, NotificationOut
from fleetcheck.schemas.toast import ToastOut
from fleetcheck.schemas.user import ProfileOut, ProfileUpdate
from fleetcheck.services import navigation, notification_service, profile_service
from fleetcheck.utils.errors import NotFoundError
from typing import Optional

router = APIRouter()


# ── Navigation ───────────────────────────────────────────────────────────────
@router.get("/navigation", summary="Tabs visible to the current role")
def get_navigation(tab: Optional[str] = None, ctx: SessionContext = Depends(get_session)):
    """`tab` is the requested tab; forbidden or unknown ids fall back to the dashboard."""
    return {
        "role": ctx.role.value,
        "items": [{"id": i.id, "label": i.label, "icon": i.icon} for i in navigation.items_for(ctx.role)],
        "active_tab": navigation.resolve_tab(ctx.role, tab or navigation.DEFAULT_TAB),
    }


# ── Notifications ────────────────────────────────────────────────────────────
@router.get("/notifications", response_model=NotificationFeed, summary="Notification bell")
def get_notifications(ctx: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    unread = notification_service.unread_count(db, ctx.profile)
    return {
        "items": notification_service.list_for(db, ctx.profile),
        "unread": unread,
        "badge": notification_service.badge_label(unread),
    }


@router.post("/notifications/read-all", summary="Mark every visible notification read")
def mark_all_read(ctx: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    count = notification_service.mark_all_read(db, ctx.profile)
    return {"marked": count}


@router.post("/notifications/{notification_id}/read", response_model=NotificationOut,
             summary="Mark one notification read")
def mark_read(notification_id: str, ctx: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    return notification_service.mark_read(db, ctx.profile, notification_id)


# ── Own profile ──────────────────────────────────────────────────────────────
@router.get("/profile", response_model=ProfileOut, summary="Own profile")
def get_profile(ctx: SessionContext = Depends(get_session)):
    return ctx.profile


@router.put("/profile", summary="Edit own name, phone or password")
def update_profile(body: ProfileUpdate, ctx: SessionContext = Depends(get_session),
                   db: Session = Depends(get_db)):
    profile = profile_service.update_own_profile(db, ctx.profile, body.full_name, body.phone, body.password)
    return {"profile": ProfileOut.model_validate(profile), "toast": ctx.toast("Profile updated successfully!")}


@router.post("/profile/avatar", summary="Upload own avatar")
def upload_avatar(photo: UploadFile = File(...), ctx: SessionContext = Depends(get_session),
                  db: Session = Depends(get_db)):
    profile = profile_service.set_avatar(db, ctx.profile, photo.file.read(), photo.filename, photo.content_type)
    return {"profile": ProfileOut.model_validate(profile), "toast": ctx.toast("Avatar updated.")}


# ── Toasts ───────────────────────────────────────────────────────────────────
@router.get("/toasts", response_model=list[ToastOut], summary="Toasts still on screen")
def active_toasts(ctx: SessionContext = Depends(get_session)):
    return [t.as_dict() for t in ctx.state.toasts.active()]


@router.delete("/toasts/{toast_id}", summary="Dismiss a toast")
def dismiss_toast(toast_id: str, ctx: SessionContext = Depends(get_session)):
    if not ctx.state.toasts.dismiss(toast_id):
        raise NotFoundError("Toast not found")
    return {"status": "dismissed", "id": toast_id}
