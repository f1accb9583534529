class ServiceError(Exception):
    """Base error for booking and workshop operations.

    Carries the HTTP status the request boundary answers with and an
    optional list of ``{"field", "message"}`` details.
    """

    status_code = 500

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidInput(ServiceError):
    """Malformed ids or fields."""
    status_code = 400


class InvalidState(ServiceError):
    """Request is well formed but the store does not allow it (e.g. full slot)."""
    status_code = 400


class Unauthorized(ServiceError):
    status_code = 401


class Forbidden(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 409


class Gone(ServiceError):
    """Target was already soft-deleted."""
    status_code = 410


class InternalError(ServiceError):
    status_code = 500
