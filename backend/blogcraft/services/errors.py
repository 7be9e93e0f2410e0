"""Service-layer exceptions.

Rendered by the application as ``{"message": ...}`` with ``status_code``.
"""


class ServiceError(Exception):
    """Base class for errors raised by services for the API layer."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """Uniqueness violation (slug, email, code). Reported as a bad request."""

    status_code = 400


class PermissionDeniedError(ServiceError):
    status_code = 403
