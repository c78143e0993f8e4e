"""
Notes on a booking.

Notes have no identity outside their booking, so every action returns the
whole updated booking and that booking becomes the store's current one.
"""

from typing import Optional

from models.booking import Booking, Note
from store.booking_store import BookingStore
from utils.constants import MAX_NOTE_LENGTH
from utils.exceptions import ValidationError
from utils.logging_config import setup_logging
from utils.validation import require_text

logger = setup_logging(name=__name__)


def can_modify(note: Note, agent_id: Optional[str]) -> bool:
    """
    Whether the UI should offer edit/delete on a note.

    Advisory only: the server decides who may change a note.
    """
    return bool(agent_id) and note.created_by == agent_id


class NoteManager:
    """Add, edit and delete notes through the booking store."""

    def __init__(self, store: BookingStore):
        self.store = store

    async def add(self, booking_id: str, text: str) -> Booking:
        """
        Add a note; the server assigns its id and timestamps.

        Raises:
            ValidationError: If the text is blank (no request is sent)
        """
        booking_id = self._require_booking_id(booking_id)
        text = require_text(text, "Note text cannot be empty", max_length=MAX_NOTE_LENGTH)

        booking = await self.store.submit(
            self.store.api.add_note(booking_id, text), "Failed to add note"
        )
        logger.info(f"Added note to booking {booking_id}")
        return booking

    async def update(self, booking_id: str, note_id: str, text: str) -> Booking:
        """Replace a note's text."""
        booking_id = self._require_booking_id(booking_id)
        if not note_id:
            raise ValidationError("Note ID is required")
        text = require_text(text, "Note text cannot be empty", max_length=MAX_NOTE_LENGTH)

        booking = await self.store.submit(
            self.store.api.update_note(booking_id, note_id, text), "Failed to update note"
        )
        logger.info(f"Updated note {note_id} on booking {booking_id}")
        return booking

    async def delete(self, booking_id: str, note_id: str) -> Booking:
        """
        Delete a note.

        A note that is already gone is the server's concern; the call is
        not retried.
        """
        booking_id = self._require_booking_id(booking_id)
        if not note_id:
            raise ValidationError("Note ID is required")

        booking = await self.store.submit(
            self.store.api.delete_note(booking_id, note_id), "Failed to delete note"
        )
        logger.info(f"Deleted note {note_id} from booking {booking_id}")
        return booking

    @staticmethod
    def _require_booking_id(booking_id: str) -> str:
        if not booking_id:
            raise ValidationError("Booking ID is required")
        return booking_id
