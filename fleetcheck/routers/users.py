# fleetcheck/routers/users.py
"""
Supervisor user management.
/users is the REST face; /functions/{name} runs the same privileged
functions by name (create-user, update-user, delete-user).
"""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session
from fleetcheck.auth.session import SessionContext, get_session, require_supervisor
from fleetcheck.database import get_db
from fleetcheck.models.profile import Profile
from fleetcheck.schemas.user import ProfileOut, UserCreate, UserUpdate
from fleetcheck.services import user_admin_service

router = APIRouter()


@router.get("/users", response_model=list[ProfileOut], summary="All user profiles")
def list_users(ctx: SessionContext = Depends(require_supervisor), db: Session = Depends(get_db)):
    return user_admin_service.list_users(db)


@router.post("/users", status_code=201, summary="Create a driver or supervisor account")
def create_user(body: UserCreate, ctx: SessionContext = Depends(require_supervisor),
                db: Session = Depends(get_db)):
    profile = user_admin_service.create_user(db, **body.model_dump())
    return {"user": ProfileOut.model_validate(profile), "toast": ctx.toast("User created successfully!")}


@router.put("/users/{user_id}", summary="Edit an account")
def update_user(user_id: str, body: UserUpdate, ctx: SessionContext = Depends(require_supervisor),
                db: Session = Depends(get_db)):
    profile = user_admin_service.update_user(db, user_id, **body.model_dump(exclude_unset=True))
    return {"user": ProfileOut.model_validate(profile), "toast": ctx.toast("User updated successfully!")}


@router.delete("/users/{user_id}", summary="Delete an account")
def delete_user(user_id: str, ctx: SessionContext = Depends(require_supervisor),
                db: Session = Depends(get_db)):
    user_admin_service.delete_user(db, ctx.profile, user_id)
    return {"status": "deleted", "id": user_id, "toast": ctx.toast("User deleted.")}


@router.post("/functions/{name}", summary="Invoke a privileged function by name")
def invoke_function(name: str, body: dict = Body(default={}), ctx: SessionContext = Depends(get_session),
                    db: Session = Depends(get_db)):
    result = user_admin_service.invoke_function(db, ctx.profile, name, body)
    data = ProfileOut.model_validate(result) if isinstance(result, Profile) else result
    return {"function": name, "data": data, "toast": ctx.toast("Done.")}
