"""Booking workflows built on the stores."""

from .booking_service import BookingService, is_past_booking

__all__ = ["BookingService", "is_past_booking"]
