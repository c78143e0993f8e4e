"""Booking models for car-rental reservations."""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ConfigDict, Field, model_validator

from models.common import Money, OptionalTimestamp, Timestamp, WireModel
from utils.exceptions import ValidationError
from utils.money import ZERO


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    BOOKED = "BOOKED"
    MODIFIED = "MODIFIED"
    CANCELLED = "CANCELLED"


class ModificationFee(WireModel):
    """One charge in the modification fee ledger."""

    model_config = ConfigDict(frozen=True)

    charge: str


class TimelineChange(WireModel):
    """
    A single field change inside a timeline entry.

    Stored as structured data; `text` is derived for display only.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def accept_text_only(cls, data: Any) -> Any:
        """Server-written entries only carry a sentence; keep it as the field label."""
        if isinstance(data, dict) and "field" not in data and "text" in data:
            return {"field": data["text"]}
        return data

    @property
    def text(self) -> str:
        if self.new_value is None and self.old_value is None:
            return self.field
        if self.old_value in (None, ""):
            return f'{self.field} set to "{self.new_value}"'
        return f'{self.field} updated from "{self.old_value}" to "{self.new_value}"'


class TimelineEntry(WireModel):
    """Immutable audit record of one booking mutation."""

    model_config = ConfigDict(frozen=True)

    date: Timestamp
    message: str
    agent_name: str
    changes: List[TimelineChange] = Field(default_factory=list)


class Note(WireModel):
    """Collaborative note attached to a booking."""

    id: Optional[str] = Field(default=None, alias="_id")
    text: str
    agent_name: str = ""
    created_by: Optional[str] = None
    created_at: OptionalTimestamp = None
    updated_at: OptionalTimestamp = None


class Booking(WireModel):
    """Booking model."""

    id: Optional[str] = Field(default=None, alias="_id")

    # Customer
    full_name: str = ""
    email: str = ""
    phone_number: str = ""
    date_of_birth: str = ""

    # Rental
    rental_company: str = ""
    confirmation_number: str = ""
    vehicle_image: str = ""
    total: Money = ZERO
    payable_at_pickup: Money = ZERO
    mco: Money = ZERO
    refund_amount: Money = ZERO

    # Schedule
    pickup_location: str = ""
    dropoff_location: str = ""
    pickup_date: str = ""
    dropoff_date: str = ""
    pickup_time: str = ""
    dropoff_time: str = ""

    # Payment
    card_last4: str = ""
    expiration: str = ""
    billing_address: str = ""

    # Lifecycle
    status: BookingStatus = BookingStatus.BOOKED
    sales_agent: str = ""
    agent_id: Optional[str] = None
    created_at: OptionalTimestamp = None
    updated_at: OptionalTimestamp = None

    modification_fee: List[ModificationFee] = Field(default_factory=list)
    timeline: List[TimelineEntry] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)

    def find_note(self, note_id: str) -> Optional[Note]:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    @property
    def latest_timeline_entry(self) -> Optional[TimelineEntry]:
        return self.timeline[-1] if self.timeline else None

    @property
    def last_modification_charge(self) -> Optional[str]:
        return self.modification_fee[-1].charge if self.modification_fee else None


def serialize_patch(patch: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert a partial update keyed by Booking attribute names to API JSON.

    Values go through the Booking field types, so Decimals become decimal
    strings and nested models become camelCase dicts.

    Raises:
        ValidationError: If a key is not a Booking field
    """
    unknown = [key for key in patch if key not in Booking.model_fields]
    if unknown:
        raise ValidationError(f"Unknown booking fields: {', '.join(sorted(unknown))}")

    # Validate through the model so the field serializers apply
    partial = Booking.model_validate(dict(patch))
    dumped = partial.model_dump(mode="json", by_alias=True, include=set(patch))
    return {Booking.wire_name(key): dumped[Booking.wire_name(key)] for key in patch}
