# fleetcheck/routers/auth.py
"""Password sign-in, current session, sign-out."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleetcheck.auth import session as auth_session
from fleetcheck.auth.session import SessionContext, get_session
from fleetcheck.database import get_db
from fleetcheck.models.auth_user import AuthSession
from fleetcheck.schemas.auth import SessionOut, SignInRequest, SignInResponse
from fleetcheck.schemas.user import ProfileOut

router = APIRouter()


def _session_payload(ctx: SessionContext) -> dict:
    return {
        "user_id": ctx.user.id,
        "email": ctx.user.email,
        "role": ctx.role.value,
        "profile": ProfileOut.model_validate(ctx.profile),
    }


@router.post("/auth/sign-in", response_model=SignInResponse, summary="Sign in with username + password")
def sign_in(body: SignInRequest, db: Session = Depends(get_db)):
    token, ctx = auth_session.sign_in(db, body.username, body.password)
    row = db.query(AuthSession).filter(AuthSession.id == ctx.jti).first()
    return {**_session_payload(ctx), "access_token": token, "expires_at": row.expires_at}


@router.get("/auth/session", response_model=SessionOut, summary="Current identity + profile")
def current_session(ctx: SessionContext = Depends(get_session)):
    return _session_payload(ctx)


@router.post("/auth/sign-out", summary="Revoke the current token")
def sign_out(ctx: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    auth_session.sign_out(db, ctx)
    return {"status": "signed_out"}
