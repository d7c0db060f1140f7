# fleetcheck/services/storage_service.py
"""
File/object storage for vehicle photos, damage photos and avatars.

Objects are written under STORAGE_DIR/<bucket>/<key> and served by the
static mount at STORAGE_PUBLIC_URL (see main.py), so a public URL is
just the mount path plus bucket and key.
"""

import mimetypes
import os
import uuid
from datetime import datetime
from typing import Optional

from fleetcheck.config import settings
from fleetcheck.utils.errors import ValidationFailedError
from fleetcheck.utils.logger import get_logger

logger = get_logger(__name__)

BUCKETS = {"vehicle-photos", "damage-photos", "avatars"}
IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}


def _bucket_dir(bucket: str) -> str:
    if bucket not in BUCKETS:
        raise ValidationFailedError(f"Unknown storage bucket: {bucket}")
    path = os.path.join(settings.STORAGE_DIR, bucket)
    os.makedirs(path, exist_ok=True)
    return path


def build_key(filename: Optional[str], content_type: str) -> str:
    """Random object key keeping a sensible extension: 20260219_101500_<hex>.jpg"""
    ext = os.path.splitext(filename or "")[1].lower()
    if not ext:
        ext = mimetypes.guess_extension(content_type) or ""
    stamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    return f"{stamp}_{uuid.uuid4().hex[:12]}{ext}"


def upload_image(bucket: str, data: bytes, filename: Optional[str], content_type: Optional[str]) -> str:
    """Store an image upload and return its object key."""
    content_type = (content_type or "").lower()
    if content_type not in IMAGE_TYPES:
        raise ValidationFailedError("Only JPEG, PNG, WEBP or GIF images can be uploaded.")
    if not data:
        raise ValidationFailedError("The uploaded file is empty.")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationFailedError(
            f"File too large ({len(data) // 1024} KB, limit {settings.MAX_UPLOAD_BYTES // 1024} KB)."
        )

    key = build_key(filename, content_type)
    path = os.path.join(_bucket_dir(bucket), key)
    with open(path, "wb") as f:
        f.write(data)
    logger.info(f"[STORAGE] Saved {bucket}/{key} ({len(data)} bytes)")
    return key


def get_public_url(bucket: str, key: str) -> str:
    return f"{settings.STORAGE_PUBLIC_URL.rstrip('/')}/{bucket}/{key}"


def remove(bucket: str, key: str) -> bool:
    path = os.path.join(_bucket_dir(bucket), os.path.basename(key))
    if not os.path.exists(path):
        return False
    os.remove(path)
    logger.info(f"[STORAGE] Removed {bucket}/{key}")
    return True


def remove_url(bucket: str, url: Optional[str]) -> bool:
    """Remove the object behind a public URL; URLs outside the bucket are left alone."""
    prefix = get_public_url(bucket, "")
    if not url or not url.startswith(prefix):
        return False
    return remove(bucket, url[len(prefix):])
