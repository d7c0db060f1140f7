# fleetcheck/routers/realtime.py
"""
WS /api/v1/realtime?token=<bearer>&tables=vehicles,checklists

Pushes {"table", "type", "id"} for every committed change to the
subscribed tables. Clients treat each message as "re-fetch this view".
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from typing import Optional
from fleetcheck.auth.session import resolve_token
from fleetcheck.database import SessionLocal, Base
from fleetcheck.services.realtime import hub
from fleetcheck.utils.errors import AuthenticationError
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def parse_tables(raw: Optional[str]) -> set[str]:
    """Comma-separated table names; empty means every table."""
    known = set(Base.metadata.tables)
    if not raw:
        return known
    return {t.strip() for t in raw.split(",") if t.strip() in known}


@router.websocket("/realtime")
async def realtime(websocket: WebSocket, token: Optional[str] = None, tables: Optional[str] = None):
    db = SessionLocal()
    try:
        ctx = resolve_token(db, token)
        who = ctx.profile.full_name
    except AuthenticationError:
        await websocket.close(code=4401)
        return
    finally:
        db.close()

    subscribed = parse_tables(tables)
    await websocket.accept()
    await hub.subscribe(websocket, subscribed)
    logger.info(f"[REALTIME] {who} subscribed to {sorted(subscribed)}")

    try:
        while True:
            data = await websocket.receive_text()
            if data and data.strip().lower() in {"ping", "keepalive"}:
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        logger.info(f"[REALTIME] {who} disconnected")
    finally:
        await hub.unsubscribe(websocket)
