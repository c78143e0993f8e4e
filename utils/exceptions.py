"""
Custom exception classes for the booking engine.
Separates local validation failures from failures of the booking API.
"""

from typing import Optional


class BookingEngineError(Exception):
    """Base exception for booking engine operations."""

    pass


class ValidationError(BookingEngineError, ValueError):
    """Raised when input validation fails before any network call."""

    pass


class APIError(BookingEngineError):
    """Base exception for booking API calls."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class NetworkError(APIError):
    """Raised when the HTTP request could not be completed."""

    pass


class ServerError(APIError):
    """Raised when the booking API answers with a non-2xx status."""

    pass


class NotFoundError(ServerError):
    """Raised when a booking (or note) does not exist on the server."""

    def __init__(self, message: str = "Booking not found", status_code: Optional[int] = 404):
        super().__init__(message, status_code)
