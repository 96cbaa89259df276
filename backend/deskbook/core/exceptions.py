"""
Error taxonomy shared by the domain layer and the API.

Domain code raises these; the FastAPI handlers registered in main.py turn them
into JSON bodies of the form {"message": ..., **extra}.
"""

from typing import Any, Optional


class DeskBookingError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def extra(self) -> dict[str, Any]:
        return {}


class ValidationError(DeskBookingError):
    """Malformed recurrence, invalid range, missing field."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def extra(self) -> dict[str, Any]:
        return {"field": self.field} if self.field else {}


class NotFoundError(DeskBookingError):
    status_code = 404


class ConflictError(DeskBookingError):
    """
    Requested dates collide with existing bookings.

    `conflicts` and `preview` are already-serializable payloads so the caller
    can pick one of the suggested alternatives without a second round trip.
    """

    status_code = 409

    def __init__(
        self,
        message: str,
        conflicts: Optional[list[Any]] = None,
        preview: Any = None,
    ):
        super().__init__(message)
        self.conflicts = conflicts
        self.preview = preview

    def extra(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.conflicts is not None:
            payload["conflicts"] = self.conflicts
        if self.preview is not None:
            payload["preview"] = self.preview
        return payload


class InternalError(DeskBookingError):
    """A broken invariant inside the engine. Never caused by user input."""

    status_code = 500
