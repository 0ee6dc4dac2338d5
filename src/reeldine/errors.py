"""Application error taxonomy mapped to HTTP status codes."""


class ReelDineError(Exception):
    """Base error carrying a user-facing message."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ReelDineError):
    """Malformed or missing required input."""

    status_code = 400


class NotFoundError(ReelDineError):
    """A referenced entity does not exist."""

    status_code = 404


class ConflictError(ReelDineError):
    """The requested state change is already in effect."""

    status_code = 400


class UnauthorizedError(ReelDineError):
    """Missing or invalid caller identity."""

    status_code = 401
