# tests/test_realtime.py
"""Change hub fan-out and commit-time publication."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import pytest
from unittest.mock import AsyncMock, patch
from fleetcheck.services import realtime
from fleetcheck.services.realtime import ChangeHub, record_change


class TestChangeHub:
    @pytest.mark.asyncio
    async def test_broadcast_reaches_only_subscribed_tables(self):
        hub = ChangeHub()
        vehicles_ws, damages_ws = AsyncMock(), AsyncMock()
        await hub.subscribe(vehicles_ws, {"vehicles"})
        await hub.subscribe(damages_ws, {"damages"})

        await hub.broadcast("vehicles", "UPDATE", "v1")

        vehicles_ws.send_json.assert_called_once_with({"table": "vehicles", "type": "UPDATE", "id": "v1"})
        damages_ws.send_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_dead_socket_does_not_stop_fanout(self):
        hub = ChangeHub()
        dead, alive = AsyncMock(), AsyncMock()
        dead.send_json.side_effect = RuntimeError("closed")
        await hub.subscribe(dead, {"damages"})
        await hub.subscribe(alive, {"damages"})

        await hub.broadcast("damages", "INSERT", "d1")
        alive.send_json.assert_called_once()

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        hub = ChangeHub()
        ws = AsyncMock()
        await hub.subscribe(ws, {"vehicles", "checklists"})
        await hub.unsubscribe(ws)
        assert hub.subscriber_count("vehicles") == 0
        assert hub.subscriber_count("checklists") == 0

    @pytest.mark.asyncio
    async def test_publish_from_worker_thread(self):
        hub = ChangeHub()
        hub.bind_loop(asyncio.get_running_loop())
        ws = AsyncMock()
        await hub.subscribe(ws, {"fuel_logs"})

        await asyncio.to_thread(hub.publish, "fuel_logs", "INSERT", "f1")
        for _ in range(10):
            if ws.send_json.called:
                break
            await asyncio.sleep(0.01)
        ws.send_json.assert_called_once_with({"table": "fuel_logs", "type": "INSERT", "id": "f1"})

    @pytest.mark.asyncio
    async def test_broadcast_task_held_until_done(self):
        hub = ChangeHub()
        hub.bind_loop(asyncio.get_running_loop())
        sent = asyncio.Event()
        release = asyncio.Event()

        async def slow_send(data):
            sent.set()
            await release.wait()

        ws = AsyncMock()
        ws.send_json.side_effect = slow_send
        await hub.subscribe(ws, {"damages"})

        hub.publish("damages", "INSERT", "d1")
        await asyncio.wait_for(sent.wait(), 1)
        assert hub.pending_broadcasts == 1

        release.set()
        for _ in range(10):
            if not hub.pending_broadcasts:
                break
            await asyncio.sleep(0.01)
        assert hub.pending_broadcasts == 0

    def test_publish_without_loop_is_noop(self):
        ChangeHub().publish("vehicles", "UPDATE", "v1")


class TestCommitHooks:
    def test_committed_update_is_published(self, db, vehicle):
        with patch.object(realtime.hub, "publish") as publish:
            vehicle.mileage = 20000
            db.commit()
        publish.assert_any_call("vehicles", "UPDATE", vehicle.id)

    def test_bulk_change_recorded_then_published(self, db):
        with patch.object(realtime.hub, "publish") as publish:
            record_change(db, "vehicles", "UPDATE", None)
            db.commit()
        publish.assert_called_once_with("vehicles", "UPDATE", None)

    def test_rollback_drops_pending_changes(self, db, vehicle):
        with patch.object(realtime.hub, "publish") as publish:
            vehicle.mileage = 1
            db.flush()
            record_change(db, "vehicles", "UPDATE", None)
            db.rollback()
            db.commit()
        publish.assert_not_called()
