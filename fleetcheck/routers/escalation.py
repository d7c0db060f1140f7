# fleetcheck/routers/escalation.py
"""
Supervisor damage reminder popup.
The client polls /escalation/next (or re-checks at next_check_at) and
answers the popup with close / notify / resolve.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleetcheck.auth.session import SessionContext, require_supervisor
from fleetcheck.database import get_db
from fleetcheck.schemas.damage import DamageOut
from fleetcheck.schemas.escalation import EscalationAction, EscalationOut
from fleetcheck.services import damage_service, escalation_service

router = APIRouter()


@router.get("/escalation/next", response_model=EscalationOut, summary="Next overdue damage to remind about")
def next_escalation(ctx: SessionContext = Depends(require_supervisor), db: Session = Depends(get_db)):
    damages = damage_service.pending_damages(db)
    ignored = ctx.state.ignored_damages
    damage = escalation_service.pick_escalation(damages, ignored)
    return {
        "damage": DamageOut.model_validate(damage) if damage else None,
        "due_at": escalation_service.due_at(damage) if damage else None,
        "next_check_at": escalation_service.next_check_at(damages, ignored),
    }


@router.post("/escalation/{damage_id}", summary="Answer the reminder: close, notify or resolve")
def acknowledge(damage_id: str, body: EscalationAction, ctx: SessionContext = Depends(require_supervisor),
                db: Session = Depends(get_db)):
    damage = damage_service.get_damage(db, damage_id)
    return escalation_service.acknowledge(ctx.state.ignored_damages, damage, body.action)
