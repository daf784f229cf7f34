"""Error types for the HTTP services the SDK talks to."""

from typing import Optional

from ..errors import GinkoError


class ApiError(GinkoError):
    """Base exception for HTTP service errors."""

    pass


class HttpError(ApiError):
    """HTTP/network error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"HTTP error: {message}")


class ServiceError(ApiError):
    """A service answered with a non-success status or an error payload.

    ``status`` is None when the HTTP exchange succeeded but the payload
    reported an error.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        self.message = message
        self.status = status
        if status is None:
            super().__init__(f"Service error: {message}")
        else:
            super().__init__(f"Service error (status {status}): {message}")


class NotFoundError(ApiError):
    """An identifier has no mapping."""

    def __init__(self, identifier: str, message: str = "no matching record"):
        self.identifier = identifier
        self.message = message
        super().__init__(f"Not found: {identifier}: {message}")


class DeserializeError(ApiError):
    """JSON deserialization error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Deserialization error: {message}")
