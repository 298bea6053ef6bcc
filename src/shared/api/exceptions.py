"""Errors raised while talking to the marketplace backend."""


class ApiError(Exception):
    """The backend answered with a failure, or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, payload=None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ApiUnavailable(ApiError):
    """Network failure or timeout; no response was received."""


class ApiUnauthorized(ApiError):
    """The request lacked a valid bearer token or the role to use it."""
