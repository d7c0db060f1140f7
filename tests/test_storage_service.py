# tests/test_storage_service.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fleetcheck.config import settings
from fleetcheck.services import storage_service
from fleetcheck.utils.errors import ValidationFailedError


class TestStorage:
    def test_upload_and_remove(self, storage_dir):
        key = storage_service.upload_image("avatars", b"jpeg-bytes", "me.JPG", "image/jpeg")
        assert key.endswith(".jpg")
        assert (storage_dir / "avatars" / key).read_bytes() == b"jpeg-bytes"
        assert storage_service.get_public_url("avatars", key) == f"/storage/avatars/{key}"
        assert storage_service.remove("avatars", key) is True
        assert storage_service.remove("avatars", key) is False

    def test_extension_from_content_type(self):
        assert storage_service.build_key(None, "image/png").endswith(".png")

    def test_rejects_non_images(self):
        with pytest.raises(ValidationFailedError):
            storage_service.upload_image("avatars", b"%PDF", "doc.pdf", "application/pdf")

    def test_rejects_empty_and_oversized(self, monkeypatch):
        with pytest.raises(ValidationFailedError):
            storage_service.upload_image("avatars", b"", "a.png", "image/png")
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 4)
        with pytest.raises(ValidationFailedError):
            storage_service.upload_image("avatars", b"12345", "a.png", "image/png")

    def test_unknown_bucket(self):
        with pytest.raises(ValidationFailedError):
            storage_service.upload_image("secrets", b"x", "a.png", "image/png")

    def test_remove_url_only_touches_own_bucket(self, storage_dir):
        key = storage_service.upload_image("avatars", b"jpeg-bytes", "me.jpg", "image/jpeg")
        assert storage_service.remove_url("avatars", None) is False
        assert storage_service.remove_url("avatars", "https://example.com/car.jpg") is False
        assert storage_service.remove_url("vehicle-photos", f"/storage/avatars/{key}") is False
        assert storage_service.remove_url("avatars", f"/storage/avatars/{key}") is True
        assert not (storage_dir / "avatars" / key).exists()
