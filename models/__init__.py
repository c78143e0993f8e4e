"""Pydantic models for data validation and serialization."""

from .agent import Agent
from .booking import (
    Booking,
    BookingStatus,
    ModificationFee,
    Note,
    TimelineChange,
    TimelineEntry,
    serialize_patch,
)
from .rental_company import RentalCompany

__all__ = [
    "Agent",
    "Booking",
    "BookingStatus",
    "ModificationFee",
    "Note",
    "RentalCompany",
    "TimelineChange",
    "TimelineEntry",
    "serialize_patch",
]
