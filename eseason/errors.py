"""
Service error taxonomy.

Every failure a caller can observe maps to one of these classes. The
HTTP layer renders them into the standard response envelope using the
class-level ``status_code``.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidInput(ServiceError):
    """Malformed or missing fields, bad formats."""

    status_code = 400


class Unauthenticated(ServiceError):
    """Bad credentials or a missing, invalid or expired token."""

    status_code = 401


class NotFound(ServiceError):
    """No record matches the requested id."""

    status_code = 404


class Conflict(ServiceError):
    """The request collides with existing state (duplicate email)."""

    status_code = 409


class InternalError(ServiceError):
    """Data-store failure or unexpected condition."""

    status_code = 500
