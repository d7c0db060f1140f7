# fleetcheck/models/base.py
"""Column helpers shared by every table: UUID string keys like the platform's identities."""

import uuid


def new_id() -> str:
    return str(uuid.uuid4())
