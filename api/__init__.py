"""HTTP access to the booking CRM API."""

from .booking_api import BookingAPIClient, extract_error_message, get_api_client

__all__ = ["BookingAPIClient", "extract_error_message", "get_api_client"]
