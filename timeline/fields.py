"""
Editable booking fields.

Each field the modification form can touch is listed here with its label,
form group, a reader and a formatter. Timeline text is built from this
table instead of looking attributes up by arbitrary strings.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple

from models.booking import Booking
from utils.money import format_money, to_decimal


def format_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def format_time(value: Any) -> str:
    """24-hour "HH:MM" to 12-hour "H:MM"; blank stays blank."""
    text = format_text(value)
    if not text:
        return ""
    hour_str, _, minute_str = text.partition(":")
    try:
        hour = int(hour_str)
    except ValueError:
        return text
    hour = hour % 12 or 12
    return f"{hour}:{minute_str or '00'}"


def format_amount(value: Any) -> str:
    return format_money(value)


class FieldGroup(str, Enum):
    """Sections of the modification form."""

    CUSTOMER = "Customer"
    VEHICLE = "Vehicle"
    LOCATIONS_AND_DATES = "Locations & Dates"
    PAYMENT = "Payment Info"


class EditableField(str, Enum):
    """Booking attributes an agent may select for modification."""

    FULL_NAME = "full_name"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    DATE_OF_BIRTH = "date_of_birth"
    RENTAL_COMPANY = "rental_company"
    CONFIRMATION_NUMBER = "confirmation_number"
    VEHICLE_IMAGE = "vehicle_image"
    PICKUP_LOCATION = "pickup_location"
    DROPOFF_LOCATION = "dropoff_location"
    PICKUP_DATE = "pickup_date"
    DROPOFF_DATE = "dropoff_date"
    PICKUP_TIME = "pickup_time"
    DROPOFF_TIME = "dropoff_time"
    TOTAL = "total"
    PAYABLE_AT_PICKUP = "payable_at_pickup"
    CARD_LAST4 = "card_last4"
    EXPIRATION = "expiration"
    BILLING_ADDRESS = "billing_address"

    @property
    def spec(self) -> "FieldSpec":
        return FIELD_SPECS[self]

    @property
    def label(self) -> str:
        return self.spec.label


class FieldSpec(NamedTuple):
    label: str
    group: FieldGroup
    read: Callable[[Booking], Any]
    format: Callable[[Any], str]
    # Converts form input to the Booking attribute type
    coerce: Callable[[Any], Any] = format_text


def _money(value: Any):
    return to_decimal(value)


FIELD_SPECS: Dict[EditableField, FieldSpec] = {
    EditableField.FULL_NAME: FieldSpec(
        "Full Name", FieldGroup.CUSTOMER, lambda b: b.full_name, format_text
    ),
    EditableField.EMAIL: FieldSpec(
        "Email", FieldGroup.CUSTOMER, lambda b: b.email, format_text
    ),
    EditableField.PHONE_NUMBER: FieldSpec(
        "Phone Number", FieldGroup.CUSTOMER, lambda b: b.phone_number, format_text
    ),
    EditableField.DATE_OF_BIRTH: FieldSpec(
        "Date of Birth", FieldGroup.CUSTOMER, lambda b: b.date_of_birth, format_text
    ),
    EditableField.RENTAL_COMPANY: FieldSpec(
        "Rental Company", FieldGroup.VEHICLE, lambda b: b.rental_company, format_text
    ),
    EditableField.CONFIRMATION_NUMBER: FieldSpec(
        "Confirmation Number", FieldGroup.VEHICLE, lambda b: b.confirmation_number, format_text
    ),
    EditableField.VEHICLE_IMAGE: FieldSpec(
        "Vehicle Image", FieldGroup.VEHICLE, lambda b: b.vehicle_image, format_text
    ),
    EditableField.PICKUP_LOCATION: FieldSpec(
        "Pickup Location", FieldGroup.LOCATIONS_AND_DATES, lambda b: b.pickup_location, format_text
    ),
    EditableField.DROPOFF_LOCATION: FieldSpec(
        "Dropoff Location", FieldGroup.LOCATIONS_AND_DATES, lambda b: b.dropoff_location, format_text
    ),
    EditableField.PICKUP_DATE: FieldSpec(
        "Pickup Date", FieldGroup.LOCATIONS_AND_DATES, lambda b: b.pickup_date, format_text
    ),
    EditableField.DROPOFF_DATE: FieldSpec(
        "Dropoff Date", FieldGroup.LOCATIONS_AND_DATES, lambda b: b.dropoff_date, format_text
    ),
    EditableField.PICKUP_TIME: FieldSpec(
        "Pickup Time", FieldGroup.LOCATIONS_AND_DATES, lambda b: b.pickup_time, format_time
    ),
    EditableField.DROPOFF_TIME: FieldSpec(
        "Dropoff Time", FieldGroup.LOCATIONS_AND_DATES, lambda b: b.dropoff_time, format_time
    ),
    EditableField.TOTAL: FieldSpec(
        "Total", FieldGroup.PAYMENT, lambda b: b.total, format_amount, _money
    ),
    EditableField.PAYABLE_AT_PICKUP: FieldSpec(
        "Payable at Pickup", FieldGroup.PAYMENT, lambda b: b.payable_at_pickup, format_amount, _money
    ),
    EditableField.CARD_LAST4: FieldSpec(
        "Card Last 4 Digits", FieldGroup.PAYMENT, lambda b: b.card_last4, format_text
    ),
    EditableField.EXPIRATION: FieldSpec(
        "Expiration", FieldGroup.PAYMENT, lambda b: b.expiration, format_text
    ),
    EditableField.BILLING_ADDRESS: FieldSpec(
        "Billing Address", FieldGroup.PAYMENT, lambda b: b.billing_address, format_text
    ),
}


def fields_in_group(group: FieldGroup) -> List[EditableField]:
    return [field for field, spec in FIELD_SPECS.items() if spec.group is group]
