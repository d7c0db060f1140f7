# fleetcheck/routers/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleetcheck.auth.session import SessionContext, get_session
from fleetcheck.database import get_db
from fleetcheck.routers.vehicles import vehicle_out
from fleetcheck.schemas.checklist import ChecklistOut
from fleetcheck.schemas.damage import DamageOut
from fleetcheck.schemas.user import ProfileOut
from fleetcheck.services import dashboard_service

router = APIRouter()


@router.get("/dashboard", summary="Role-specific dashboard")
def get_dashboard(ctx: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    if ctx.is_supervisor:
        data = dashboard_service.supervisor_dashboard(db)
        return {
            "role": ctx.role.value,
            "stats": data["stats"],
            "chart": data["chart"],
            "recent_damages": [DamageOut.model_validate(d) for d in data["recent_damages"]],
            "checklists": {
                k: [ChecklistOut.model_validate(c) for c in v] for k, v in data["checklists"].items()
            },
            "users": [ProfileOut.model_validate(p) for p in data["users"]],
        }

    data = dashboard_service.driver_dashboard(db, ctx.profile)
    availability = data["availability"]
    return {
        "role": ctx.role.value,
        "quick_actions": data["quick_actions"],
        "availability": {
            "available": availability["available"],
            "active": availability["active"],
            "vehicles": [vehicle_out(v) for v in availability["vehicles"]],
        },
        "my_checklists": [ChecklistOut.model_validate(c) for c in data["my_checklists"]],
    }
