# fleetcheck/utils/toast.py
"""
Timed, dismissible user messages ("toasts").
Each signed-in session owns one ToastQueue (see auth/session.py). Write
endpoints push a toast on success or failure and also return it inline.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from fleetcheck.config import settings

TOAST_TYPES = ("success", "error", "info", "warning")


@dataclass
class Toast:
    message: str
    type: str = "info"
    duration_ms: int = settings.TOAST_DURATION_MS
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def expires_at(self) -> datetime:
        return self.created_at + timedelta(milliseconds=self.duration_ms)

    def as_dict(self) -> dict:
        return {"id": self.id, "type": self.type, "message": self.message, "duration_ms": self.duration_ms}


class ToastQueue:
    def __init__(self):
        self._toasts: list[Toast] = []

    def add(self, message: str, type: str = "info", duration_ms: Optional[int] = None) -> Toast:
        if type not in TOAST_TYPES:
            raise ValueError(f"Unknown toast type: {type}")
        toast = Toast(message=message, type=type,
                      duration_ms=duration_ms if duration_ms is not None else settings.TOAST_DURATION_MS)
        self._prune(toast.created_at)
        self._toasts.append(toast)
        # Oldest go first once the queue is full
        del self._toasts[:-settings.TOAST_QUEUE_LIMIT]
        return toast

    def dismiss(self, toast_id: str) -> bool:
        before = len(self._toasts)
        self._toasts = [t for t in self._toasts if t.id != toast_id]
        return len(self._toasts) != before

    def active(self, now: Optional[datetime] = None) -> list[Toast]:
        """Toasts still on screen at `now`; expired ones are dropped."""
        self._prune(now or datetime.utcnow())
        return list(self._toasts)

    def _prune(self, now: datetime) -> None:
        self._toasts = [t for t in self._toasts if t.expires_at() > now]

    def __len__(self) -> int:
        return len(self._toasts)

    def clear(self):
        self._toasts.clear()
