# fleetcheck/services/realtime.py
"""
Row-level change notifications.

Every committed insert/update/delete is published as
{"table", "type", "id"} to WebSocket clients subscribed to that table.
Messages are re-fetch triggers only; clients reload the whole view, so
duplicate or out-of-order delivery is harmless.

Sync route handlers run in worker threads, so commits are handed to the
hub's event loop with call_soon_threadsafe.
"""

import asyncio
from typing import Dict, Set, Optional

from fastapi import WebSocket
from sqlalchemy import event
from sqlalchemy.orm import Session

from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

PENDING_KEY = "fleetcheck_pending_changes"


class ChangeHub:
    def __init__(self) -> None:
        # table name -> set of WebSocket connections
        self._subscribers: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        # Running broadcasts; the loop only keeps weak references to tasks
        self._tasks: Set[asyncio.Task] = set()

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    async def subscribe(self, ws: WebSocket, tables: Set[str]) -> None:
        async with self._lock:
            for table in tables:
                self._subscribers.setdefault(table, set()).add(ws)

    async def unsubscribe(self, ws: WebSocket) -> None:
        async with self._lock:
            for table in list(self._subscribers):
                conns = self._subscribers[table]
                conns.discard(ws)
                if not conns:
                    self._subscribers.pop(table, None)

    def subscriber_count(self, table: str) -> int:
        return len(self._subscribers.get(table, ()))

    async def broadcast(self, table: str, change_type: str, row_id: Optional[str]) -> None:
        data = {"table": table, "type": change_type, "id": row_id}
        async with self._lock:
            targets = list(self._subscribers.get(table, set()))
        for ws in targets:
            try:
                await ws.send_json(data)
            except Exception as e:
                # Dead socket; it is dropped when its receive loop ends
                logger.debug(f"[REALTIME] send to subscriber failed: {e}")

    def publish(self, table: str, change_type: str, row_id: Optional[str]) -> None:
        """Thread-safe fire-and-forget publish; a no-op until a loop is bound."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._spawn_broadcast, table, change_type, row_id)

    def _spawn_broadcast(self, table: str, change_type: str, row_id: Optional[str]) -> None:
        task = asyncio.ensure_future(self.broadcast(table, change_type, row_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending_broadcasts(self) -> int:
        return len(self._tasks)


hub = ChangeHub()


def record_change(db: Session, table: str, change_type: str, row_id: Optional[str]) -> None:
    """Queue a change for publication on the next commit (bulk updates bypass flush events)."""
    db.info.setdefault(PENDING_KEY, []).append((table, change_type, row_id))


@event.listens_for(Session, "after_flush")
def _collect_changes(session, flush_context):
    pending = session.info.setdefault(PENDING_KEY, [])
    for obj, change_type in (
        *((o, "INSERT") for o in session.new),
        *((o, "UPDATE") for o in session.dirty if session.is_modified(o)),
        *((o, "DELETE") for o in session.deleted),
    ):
        table = getattr(obj, "__tablename__", None)
        if table:
            pending.append((table, change_type, getattr(obj, "id", None)))


@event.listens_for(Session, "after_commit")
def _publish_changes(session):
    for table, change_type, row_id in session.info.pop(PENDING_KEY, []):
        hub.publish(table, change_type, row_id)


@event.listens_for(Session, "after_rollback")
def _drop_changes(session):
    session.info.pop(PENDING_KEY, None)
