"""
Booking workflows: create, modify and cancel.

Each workflow validates locally, derives the financial fields and the
timeline entry, resolves the rental company as its own step, and only
then hands a patch to the BookingStore.
"""

from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ledger import FeeLedger, RefundCalculator, creation_mco
from models.agent import Agent
from models.booking import Booking, BookingStatus, serialize_patch
from store.booking_store import BookingStore
from store.rental_company_store import RentalCompanyStore
from timeline import (
    EditableField,
    TimelineRecorder,
    changed_fields,
    describe_change,
    fee_change,
    mco_change,
)
from utils.constants import (
    CREATE_REQUIRED_FIELDS,
    NEW_BOOKING_MESSAGE,
    NEW_CANCELLATION_REQUIRED_FIELDS,
)
from utils.datetime_utils import is_before_today
from utils.exceptions import ValidationError
from utils.logging_config import setup_logging
from utils.money import ZERO, format_money
from utils.validation import missing_fields, validate_card_last4, validate_email

logger = setup_logging(name=__name__)

# Booking fields sent along with a cancellation for a customer not on file
_NEW_CANCELLATION_FIELDS = NEW_CANCELLATION_REQUIRED_FIELDS + (
    "email",
    "total",
    "payable_at_pickup",
    "pickup_time",
    "dropoff_time",
)


def is_past_booking(booking: Booking, today: Optional[date] = None) -> bool:
    """True when the pickup date is before today."""
    return is_before_today(booking.pickup_date, today)


def check_form(form: Booking, required: Sequence[str]) -> None:
    """
    Local checks before a booking form is sent.

    The rental company is checked separately when it is resolved.

    Raises:
        ValidationError: Missing required fields, malformed email or card digits
    """
    missing = missing_fields(form.model_dump(), [f for f in required if f != "rental_company"])
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if form.email and not validate_email(form.email):
        raise ValidationError(f"Invalid email address: {form.email}")
    if form.card_last4 and not validate_card_last4(form.card_last4):
        raise ValidationError("Card last 4 digits must be exactly 4 digits")


class BookingService:
    """Runs the create / modify / cancel flows for one agent session."""

    def __init__(
        self,
        store: BookingStore,
        companies: RentalCompanyStore,
        recorder: Optional[TimelineRecorder] = None,
    ):
        self.store = store
        self.companies = companies
        self.recorder = recorder or TimelineRecorder()

    async def create_booking(
        self, form: Booking, agent: Agent, add_new_company: bool = False
    ) -> Booking:
        """
        Create a booking from a filled-in form.

        MCO is derived as total minus payable at pickup; any MCO on the
        form is ignored.
        """
        check_form(form, CREATE_REQUIRED_FIELDS)

        resolution = await self.companies.resolve(form.rental_company, add_new_company)

        entry = self.recorder.record_message(agent.name, NEW_BOOKING_MESSAGE)
        booking = form.model_copy(
            update={
                "id": None,
                "rental_company": resolution.name,
                "mco": creation_mco(form.total, form.payable_at_pickup),
                "refund_amount": ZERO,
                "status": BookingStatus.BOOKED,
                "sales_agent": agent.name,
                "agent_id": agent.id,
                "modification_fee": [],
                "timeline": [entry],
                "notes": [],
            }
        )

        saved = await self.store.save(booking)
        logger.info(f"Booking {saved.id} created by {agent.name} (MCO {format_money(saved.mco)})")
        return saved

    async def modify_booking(
        self,
        booking_id: str,
        updates: Mapping[EditableField, Any],
        selected: Iterable[EditableField],
        agent: Agent,
        new_fees: Sequence[str] = (),
        add_new_company: bool = False,
    ) -> Booking:
        """
        Apply the agent's selected field edits and new modification fees.

        Only selected fields are considered. When nothing changed the call
        raises ValidationError and nothing is saved, and no company is
        created.
        """
        current = await self.store.fetch_by_id(booking_id)

        selected = [EditableField(field) for field in selected]
        updates = {EditableField(field): value for field, value in updates.items()}

        ledger = FeeLedger.from_booking(current)
        for charge in new_fees:
            ledger.append(charge)

        fields = changed_fields(current, updates, selected)
        changes = [describe_change(current, field, updates[field]) for field in fields]

        if ledger.has_new_charges:
            changes.append(fee_change(ledger.current_charge()))

        # Every modification save re-applies the current charge
        new_mco = ledger.apply_to_mco(current.mco)
        derived = [mco_change(current.mco, new_mco)] if new_mco != current.mco else []

        entry = self.recorder.record(agent.name, changes, derived)

        patch: Dict[str, Any] = {
            field.value: field.spec.coerce(updates[field]) for field in fields
        }
        if EditableField.RENTAL_COMPANY in fields:
            resolution = await self.companies.resolve(
                updates[EditableField.RENTAL_COMPANY], add_new_company
            )
            patch["rental_company"] = resolution.name

        patch.update(
            {
                "status": BookingStatus.MODIFIED,
                "sales_agent": agent.name,
                "modification_fee": ledger.entries,
                "mco": new_mco,
                # entries to append; the server keeps the existing timeline
                "timeline": [entry],
            }
        )

        saved = await self.store.save(patch, booking_id)
        logger.info(
            f"Booking {booking_id} modified by {agent.name}: {entry.message}, "
            f"MCO {format_money(current.mco)} -> {format_money(saved.mco)}"
        )
        return saved

    async def cancel_booking(
        self, booking_id: str, cancellation_fee: str, agent: Agent
    ) -> Booking:
        """
        Cancel a booking on file.

        The cancellation fee becomes the MCO and the rest of the prior MCO
        is refunded (never below zero).
        """
        if cancellation_fee is None or not str(cancellation_fee).strip():
            raise ValidationError("Cancellation fee is required")

        current = await self.store.fetch_by_id(booking_id)
        result = RefundCalculator.compute(current.mco, cancellation_fee)

        request = {
            "bookingId": booking_id,
            "email": current.email,
            "customerType": "existing",
            "refundAmount": format_money(result.refund),
            "salesAgent": agent.name,
            "mco": format_money(result.new_mco),
        }
        cancelled = await self.store.cancel(request)
        logger.info(
            f"Booking {booking_id} cancelled by {agent.name}: "
            f"fee {format_money(result.new_mco)}, refund {format_money(result.refund)}"
        )
        return cancelled

    async def cancel_new_customer(
        self,
        form: Booking,
        cancellation_fee: str,
        agent: Agent,
        add_new_company: bool = False,
    ) -> Booking:
        """
        Record a cancellation for a customer with no booking on file.

        The server creates the booking directly in CANCELLED state, so the
        full booking details must be present.
        """
        if cancellation_fee is None or not str(cancellation_fee).strip():
            raise ValidationError("Cancellation fee is required")

        form = form.model_copy(update={"sales_agent": agent.name})
        check_form(form, NEW_CANCELLATION_REQUIRED_FIELDS)

        result = RefundCalculator.compute(ZERO, cancellation_fee)
        resolution = await self.companies.resolve(form.rental_company, add_new_company)
        form = form.model_copy(update={"rental_company": resolution.name})

        request = serialize_patch(form.model_dump(include=set(_NEW_CANCELLATION_FIELDS)))
        request.update(
            {
                "customerType": "new",
                "refundAmount": format_money(result.refund),
                "mco": format_money(result.new_mco),
            }
        )
        cancelled = await self.store.cancel(request)
        logger.info(f"Cancellation recorded for new customer by {agent.name}")
        return cancelled
