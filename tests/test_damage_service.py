# tests/test_damage_service.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fleetcheck.models.notification import Notification
from fleetcheck.services import damage_service
from fleetcheck.utils.errors import NotFoundError, PermissionDeniedError, ValidationFailedError

PNG = b"\x89PNG\r\n\x1a\nfake-image-bytes"


class TestReportDamage:
    def test_report_defaults_to_medium_and_notifies_supervisors(self, db, driver, vehicle):
        damage = damage_service.report_damage(db, driver, vehicle.id, "  Flat tire  ")
        assert damage.priority == "medium"
        assert damage.status == "pending"
        assert damage.description == "Flat tire"
        note = db.query(Notification).one()
        assert note.user_id is None and note.type == "damage"
        assert "ABC-1234" in note.message

    def test_report_with_photo(self, db, driver, vehicle, storage_dir):
        damage = damage_service.report_damage(db, driver, vehicle.id, "Dent", "low",
                                              photo=(PNG, "dent.png", "image/png"))
        assert damage.photo_url.startswith("/storage/damage-photos/")
        assert len(list((storage_dir / "damage-photos").iterdir())) == 1

    def test_rejects_bad_priority_and_blank_description(self, db, driver, vehicle):
        with pytest.raises(ValidationFailedError):
            damage_service.report_damage(db, driver, vehicle.id, "Dent", "urgent")
        with pytest.raises(ValidationFailedError):
            damage_service.report_damage(db, driver, vehicle.id, "   ")

    def test_unknown_vehicle(self, db, driver):
        with pytest.raises(NotFoundError):
            damage_service.report_damage(db, driver, "missing", "Dent")


class TestEditAndResolve:
    def test_driver_edits_own_pending_report(self, db, driver, vehicle):
        damage = damage_service.report_damage(db, driver, vehicle.id, "Dent")
        updated = damage_service.update_damage(db, driver, damage.id, priority="high")
        assert updated.priority == "high"

    def test_driver_cannot_edit_someone_elses_report(self, db, driver, other_driver, vehicle):
        damage = damage_service.report_damage(db, driver, vehicle.id, "Dent")
        with pytest.raises(PermissionDeniedError):
            damage_service.update_damage(db, other_driver, damage.id, description="Scratch")

    def test_resolve_notifies_reporter(self, db, driver, supervisor, vehicle):
        damage = damage_service.report_damage(db, driver, vehicle.id, "Dent")
        resolved = damage_service.resolve_damage(db, supervisor, damage.id)
        assert resolved.status == "resolved"
        note = db.query(Notification).filter(Notification.user_id == driver.id).one()
        assert note.title == "Damage resolved"

    def test_driver_cannot_edit_resolved_report(self, db, driver, supervisor, vehicle):
        damage = damage_service.report_damage(db, driver, vehicle.id, "Dent")
        damage_service.resolve_damage(db, supervisor, damage.id)
        with pytest.raises(PermissionDeniedError):
            damage_service.update_damage(db, driver, damage.id, priority="low")

    def test_filters_and_delete(self, db, driver, vehicle):
        first = damage_service.report_damage(db, driver, vehicle.id, "Dent", "low")
        damage_service.report_damage(db, driver, vehicle.id, "Flat tire", "high")
        assert [d.description for d in damage_service.list_damages(db, priority="high")] == ["Flat tire"]
        damage_service.delete_damage(db, first.id)
        assert len(damage_service.list_damages(db)) == 1


class TestPhotoCleanup:
    def test_replacing_photo_removes_old_file(self, db, driver, vehicle, storage_dir):
        damage = damage_service.report_damage(db, driver, vehicle.id, "Dent",
                                              photo=(PNG, "dent.png", "image/png"))
        damage_service.set_photo(db, driver, damage.id, PNG, "dent2.png", "image/png")
        files = [p.name for p in (storage_dir / "damage-photos").iterdir()]
        assert files == [os.path.basename(damage.photo_url)]

    def test_delete_removes_photo(self, db, driver, vehicle, storage_dir):
        damage = damage_service.report_damage(db, driver, vehicle.id, "Dent",
                                              photo=(PNG, "dent.png", "image/png"))
        damage_service.delete_damage(db, damage.id)
        assert list((storage_dir / "damage-photos").iterdir()) == []
