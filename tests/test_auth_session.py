# tests/test_auth_session.py
"""Sign-in, token resolution, sign-out and role gates."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta
from unittest.mock import MagicMock
from fleetcheck.auth import session as auth_session
from fleetcheck.auth.security import create_access_token, username_to_email
from fleetcheck.auth.session import require_driver, require_supervisor, resolve_token, sign_in, sign_out
from fleetcheck.models.auth_user import AuthSession
from fleetcheck.models.profile import Role
from fleetcheck.utils.errors import AuthenticationError, PermissionDeniedError

TEST_PASSWORD = "secret123"


class TestUsernameToEmail:
    def test_spaces_become_dots(self):
        assert username_to_email("  Ana  Souza ") == "ana.souza@fleetcheck.local"

    def test_addresses_pass_through(self):
        assert username_to_email("William@FleetCheck.local") == "william@fleetcheck.local"


class TestSignIn:
    def test_sign_in_and_resolve(self, db, driver):
        token, ctx = sign_in(db, "joao", TEST_PASSWORD)
        assert ctx.role is Role.DRIVER

        resolved = resolve_token(db, token)
        assert resolved.profile.id == driver.id
        assert resolved.state is ctx.state

    def test_wrong_password(self, db, driver):
        with pytest.raises(AuthenticationError, match="Invalid username or password."):
            sign_in(db, "joao", "wrong-password")

    def test_missing_token(self, db):
        with pytest.raises(AuthenticationError):
            resolve_token(db, None)

    def test_token_without_session_row(self, db, driver):
        token, _, _ = create_access_token(driver.id, "driver")
        with pytest.raises(AuthenticationError):
            resolve_token(db, token)

    def test_sign_out_revokes_and_drops_state(self, db, driver):
        token, ctx = sign_in(db, "joao", TEST_PASSWORD)
        ctx.toast("hello")
        sign_out(db, ctx)

        assert ctx.jti not in auth_session.store
        with pytest.raises(AuthenticationError):
            resolve_token(db, token)


    def test_sign_in_sweeps_expired_and_revoked_state(self, db, driver, supervisor):
        _, expired = sign_in(db, "joao", TEST_PASSWORD)
        _, revoked = sign_in(db, "carla", TEST_PASSWORD)
        expired.toast("left behind")
        db.query(AuthSession).filter(AuthSession.id == expired.jti).update(
            {AuthSession.expires_at: datetime.utcnow() - timedelta(hours=1)}
        )
        db.query(AuthSession).filter(AuthSession.id == revoked.jti).update(
            {AuthSession.revoked_at: datetime.utcnow()}
        )
        db.commit()

        _, fresh = sign_in(db, "joao", TEST_PASSWORD)

        assert expired.jti not in auth_session.store
        assert revoked.jti not in auth_session.store
        assert fresh.jti in auth_session.store


class TestRoleGates:
    def _ctx(self, role):
        ctx = MagicMock()
        ctx.role = role
        return ctx

    def test_supervisor_gate(self):
        gate = require_supervisor
        assert gate(self._ctx(Role.SUPERVISOR)).role is Role.SUPERVISOR
        with pytest.raises(PermissionDeniedError):
            gate(self._ctx(Role.DRIVER))

    def test_driver_gate(self):
        with pytest.raises(PermissionDeniedError):
            require_driver(self._ctx(Role.SUPERVISOR))
