# fleetcheck/utils/errors.py
"""
Application error taxonomy.
Every FleetError carries a user-facing message and the HTTP status the
exception handler in main.py answers with; the handler also turns the
message into an error toast.
"""


class FleetError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(FleetError):
    status_code = 401


class PermissionDeniedError(FleetError):
    status_code = 403


class NotFoundError(FleetError):
    status_code = 404


class ConflictError(FleetError):
    """Local conflict, e.g. a vehicle already claimed today."""
    status_code = 409


class RowNotAffectedError(FleetError):
    """An update matched no row: the row is gone or the caller may not touch it."""
    status_code = 409


class ValidationFailedError(FleetError):
    status_code = 422
