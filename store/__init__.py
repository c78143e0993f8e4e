"""In-memory state for bookings, notes and rental companies."""

from .booking_store import BookingStore
from .note_manager import NoteManager, can_modify
from .rental_company_store import CompanyResolution, RentalCompanyStore
from .status import LoadingFlag, Operation, OperationStatus

__all__ = [
    "BookingStore",
    "CompanyResolution",
    "LoadingFlag",
    "NoteManager",
    "Operation",
    "OperationStatus",
    "RentalCompanyStore",
    "can_modify",
]
