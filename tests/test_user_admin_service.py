# tests/test_user_admin_service.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fleetcheck.auth.security import verify_password
from fleetcheck.models.auth_user import AuthUser
from fleetcheck.models.damage import Damage
from fleetcheck.models.profile import Profile
from fleetcheck.services import profile_service, user_admin_service
from fleetcheck.services.checklist_service import CHECKLIST_ITEMS, ItemAnswer, submit_checklist
from fleetcheck.services.damage_service import report_damage
from fleetcheck.utils.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)


class TestCreateUser:
    def test_creates_identity_and_profile(self, db):
        profile = user_admin_service.create_user(db, "Ana Souza", "password123", "Ana Souza", "driver", "123")
        user = db.query(AuthUser).filter(AuthUser.id == profile.id).one()
        assert profile.username == "ana.souza"
        assert user.email == "ana.souza@fleetcheck.local"
        assert verify_password("password123", user.password_hash)

    def test_full_name_defaults_to_username(self, db):
        assert user_admin_service.create_user(db, "testuser22", "password123").full_name == "testuser22"

    def test_duplicate_username(self, db, driver):
        with pytest.raises(ConflictError):
            user_admin_service.create_user(db, "JOAO", "password123")

    def test_short_password_and_bad_role(self, db):
        with pytest.raises(ValidationFailedError):
            user_admin_service.create_user(db, "ana", "123")
        with pytest.raises(ValidationFailedError):
            user_admin_service.create_user(db, "ana", "password123", role="admin")


class TestUpdateUser:
    def test_rename_follows_vehicle_claim(self, db, driver, vehicle):
        items = {name: ItemAnswer() for name in CHECKLIST_ITEMS}
        items["Tire pressure"] = ItemAnswer(ok=False, notes="low")
        submit_checklist(db, driver, vehicle.id, items)

        user_admin_service.update_user(db, driver.id, full_name="João P. Silva")
        db.refresh(vehicle)
        assert vehicle.current_driver == "João P. Silva"

    def test_username_change_moves_login_email(self, db, driver):
        user_admin_service.update_user(db, driver.id, username="jsilva", password="newpass1")
        user = db.query(AuthUser).filter(AuthUser.id == driver.id).one()
        assert user.email == "jsilva@fleetcheck.local"
        assert verify_password("newpass1", user.password_hash)

    def test_role_change(self, db, driver):
        assert user_admin_service.update_user(db, driver.id, role="supervisor").is_supervisor

    def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            user_admin_service.update_user(db, "nobody", full_name="X")


class TestDeleteUser:
    def test_cannot_delete_self(self, db, supervisor):
        with pytest.raises(PermissionDeniedError):
            user_admin_service.delete_user(db, supervisor, supervisor.id)

    def test_user_with_checklists_is_kept(self, db, supervisor, driver, vehicle):
        submit_checklist(db, driver, vehicle.id, {})
        with pytest.raises(ConflictError):
            user_admin_service.delete_user(db, supervisor, driver.id)

    def test_delete_detaches_damage_reports(self, db, supervisor, driver, vehicle):
        damage = report_damage(db, driver, vehicle.id, "Dent")
        user_admin_service.delete_user(db, supervisor, driver.id)

        db.expire_all()
        assert db.query(Profile).filter(Profile.id == driver.id).first() is None
        assert db.query(AuthUser).filter(AuthUser.id == driver.id).first() is None
        assert db.query(Damage).filter(Damage.id == damage.id).one().reported_by is None


class TestInvokeFunction:
    def test_supervisor_can_create(self, db, supervisor):
        profile = user_admin_service.invoke_function(
            db, supervisor, "create-user", {"username": "testuser22", "password": "password123", "role": "driver"}
        )
        assert profile.role == "driver"

    def test_driver_is_refused(self, db, driver):
        with pytest.raises(PermissionDeniedError):
            user_admin_service.invoke_function(db, driver, "create-user", {"username": "x", "password": "password123"})

    def test_unknown_function(self, db, supervisor):
        with pytest.raises(NotFoundError):
            user_admin_service.invoke_function(db, supervisor, "drop-tables", {})

    def test_update_requires_user_id(self, db, supervisor):
        with pytest.raises(ValidationFailedError):
            user_admin_service.invoke_function(db, supervisor, "update-user", {"full_name": "X"})


class TestOwnProfile:
    def test_update_own_profile(self, db, driver):
        profile = profile_service.update_own_profile(db, driver, full_name=" João S. ", phone="", password="another1")
        assert profile.full_name == "João S."
        assert profile.phone is None

    def test_blank_name_rejected(self, db, driver):
        with pytest.raises(ValidationFailedError):
            profile_service.update_own_profile(db, driver, full_name="  ")

    def test_avatar(self, db, driver):
        profile = profile_service.set_avatar(db, driver, b"\x89PNG....", "me.png", "image/png")
        assert profile.avatar_url.startswith("/storage/avatars/")

    def test_new_avatar_replaces_old_file(self, db, driver, storage_dir):
        profile_service.set_avatar(db, driver, b"\x89PNG....", "me.png", "image/png")
        profile = profile_service.set_avatar(db, driver, b"\x89PNG....", "me2.png", "image/png")
        files = [p.name for p in (storage_dir / "avatars").iterdir()]
        assert files == [os.path.basename(profile.avatar_url)]
