"""
Unit tests for the create / modify / cancel workflows.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from models.agent import Agent
from models.booking import Booking, BookingStatus
from models.rental_company import RentalCompany
from services.booking_service import BookingService, is_past_booking
from store.booking_store import BookingStore
from store.rental_company_store import RentalCompanyStore
from timeline import EditableField, TimelineRecorder
from utils.exceptions import ServerError, ValidationError

FIXED_NOW = datetime(2030, 5, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def agent():
    return Agent(id="agent-1", name="Alex Agent")


@pytest.fixture
def service(mock_api):
    mock_api.list_rental_companies.return_value = [RentalCompany(id="c1", name="Hertz")]
    return BookingService(
        store=BookingStore(api=mock_api),
        companies=RentalCompanyStore(api=mock_api),
        recorder=TimelineRecorder(clock=lambda: FIXED_NOW),
    )


def echo_update(make_booking, **base):
    """update_booking double that answers with the patch applied to a booking."""

    async def update_booking(booking_id, payload):
        data = dict(base, _id=booking_id)
        data.update(payload)
        return make_booking(**data)

    return update_booking


class TestCreateBooking:
    """Test booking creation."""

    @pytest.mark.asyncio
    async def test_mco_derived_and_timeline_started(self, service, mock_api, make_booking, agent):
        form = make_booking(_id=None, total="300.00", payableAtPickup="100.00", mco="999.00")
        mock_api.create_booking.return_value = make_booking(_id="new-1")

        await service.create_booking(form, agent)

        payload = mock_api.create_booking.await_args.args[0]
        assert payload["mco"] == "200.00"
        assert payload["status"] == "BOOKED"
        assert payload["salesAgent"] == "Alex Agent"
        assert payload["agentId"] == "agent-1"
        assert payload["modificationFee"] == []
        assert len(payload["timeline"]) == 1
        assert payload["timeline"][0]["message"] == "New booking created"

    @pytest.mark.asyncio
    async def test_missing_fields_rejected(self, service, mock_api, agent):
        form = Booking(full_name="Jane", rental_company="Hertz")

        with pytest.raises(ValidationError, match="Missing required fields"):
            await service.create_booking(form, agent)

        mock_api.create_booking.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, service, mock_api, make_booking, agent):
        form = make_booking(_id=None, email="jane@")

        with pytest.raises(ValidationError, match="Invalid email address"):
            await service.create_booking(form, agent)

        mock_api.list_rental_companies.assert_not_called()

    @pytest.mark.asyncio
    async def test_new_company_created_before_save(self, service, mock_api, make_booking, agent):
        form = make_booking(_id=None, rentalCompany="Sixt")
        mock_api.create_rental_company.return_value = RentalCompany(id="c2", name="Sixt")
        mock_api.create_booking.return_value = make_booking(_id="new-1", rentalCompany="Sixt")

        await service.create_booking(form, agent, add_new_company=True)

        mock_api.create_rental_company.assert_awaited_once_with("Sixt")
        assert mock_api.create_booking.await_args.args[0]["rentalCompany"] == "Sixt"

    @pytest.mark.asyncio
    async def test_company_kept_when_save_fails(self, service, mock_api, make_booking, agent):
        form = make_booking(_id=None, rentalCompany="Sixt")
        mock_api.create_rental_company.return_value = RentalCompany(id="c2", name="Sixt")
        mock_api.create_booking.side_effect = ServerError("Failed to save booking")

        with pytest.raises(ServerError):
            await service.create_booking(form, agent, add_new_company=True)

        mock_api.create_rental_company.assert_awaited_once_with("Sixt")
        assert service.store.status.failed
        assert service.store.status.error == "Failed to save booking"


class TestModifyBooking:
    """Test booking modification."""

    @pytest.mark.asyncio
    async def test_fee_raises_mco_and_records_timeline(self, service, mock_api, make_booking, agent):
        mock_api.get_booking.return_value = make_booking(_id="b1", mco="200.00")
        mock_api.update_booking.side_effect = echo_update(make_booking)

        saved = await service.modify_booking(
            "b1",
            {EditableField.PICKUP_TIME: "11:00"},
            [EditableField.PICKUP_TIME],
            agent,
            new_fees=["25.00"],
        )

        booking_id, payload = mock_api.update_booking.await_args.args
        assert booking_id == "b1"
        assert payload["mco"] == "225.00"
        assert payload["pickupTime"] == "11:00"
        assert payload["status"] == "MODIFIED"
        assert payload["modificationFee"] == [{"charge": "25.00"}]
        entry = payload["timeline"][0]
        assert entry["message"] == "Updated 3 field(s)"
        assert [c["field"] for c in entry["changes"]] == ["Pickup Time", "Modification Fee", "MCO"]
        assert saved.mco == Decimal("225.00")

    @pytest.mark.asyncio
    async def test_no_changes_nothing_saved(self, service, mock_api, make_booking, agent):
        mock_api.get_booking.return_value = make_booking(_id="b1")

        with pytest.raises(ValidationError, match="No changes selected"):
            await service.modify_booking(
                "b1",
                {EditableField.FULL_NAME: "Jane Traveler", EditableField.RENTAL_COMPANY: "Sixt"},
                [EditableField.FULL_NAME],
                agent,
                add_new_company=True,
            )

        mock_api.update_booking.assert_not_called()
        mock_api.create_rental_company.assert_not_called()

    @pytest.mark.asyncio
    async def test_edit_reapplies_current_charge(self, service, mock_api, make_booking, agent):
        mock_api.get_booking.return_value = make_booking(
            _id="b1", mco="225.00", modificationFee=[{"charge": "25.00"}]
        )
        mock_api.update_booking.side_effect = echo_update(make_booking)

        await service.modify_booking(
            "b1", {EditableField.DROPOFF_LOCATION: "SJC"}, [EditableField.DROPOFF_LOCATION], agent
        )

        payload = mock_api.update_booking.await_args.args[1]
        assert payload["mco"] == "250.00"
        assert payload["modificationFee"] == [{"charge": "25.00"}]
        entry = payload["timeline"][0]
        assert entry["message"] == "Updated 2 field(s)"
        assert [c["field"] for c in entry["changes"]] == ["Dropoff Location", "MCO"]

    @pytest.mark.asyncio
    async def test_existing_fee_alone_is_not_a_change(self, service, mock_api, make_booking, agent):
        mock_api.get_booking.return_value = make_booking(
            _id="b1", mco="225.00", modificationFee=[{"charge": "25.00"}]
        )

        with pytest.raises(ValidationError, match="No changes selected"):
            await service.modify_booking("b1", {}, [], agent)

        mock_api.update_booking.assert_not_called()

    @pytest.mark.asyncio
    async def test_total_edit_does_not_touch_mco(self, service, mock_api, make_booking, agent):
        mock_api.get_booking.return_value = make_booking(_id="b1", mco="200.00")
        mock_api.update_booking.side_effect = echo_update(make_booking)

        await service.modify_booking("b1", {"total": "350"}, ["total"], agent)

        payload = mock_api.update_booking.await_args.args[1]
        assert payload["total"] == "350.00"
        assert payload["mco"] == "200.00"

    @pytest.mark.asyncio
    async def test_existing_company_duplicate_rejected(self, service, mock_api, make_booking, agent):
        mock_api.get_booking.return_value = make_booking(_id="b1", rentalCompany="Avis")

        with pytest.raises(ValidationError, match="already exists"):
            await service.modify_booking(
                "b1",
                {EditableField.RENTAL_COMPANY: "hertz"},
                [EditableField.RENTAL_COMPANY],
                agent,
                add_new_company=True,
            )

        mock_api.update_booking.assert_not_called()


class TestCancelBooking:
    """Test cancellations."""

    @pytest.mark.asyncio
    async def test_existing_customer_refund(self, service, mock_api, make_booking, agent):
        mock_api.get_booking.return_value = make_booking(_id="b1", mco="225.00")
        mock_api.cancel_booking.return_value = make_booking(
            _id="b1", status="CANCELLED", mco="50.00", refundAmount="175.00"
        )

        cancelled = await service.cancel_booking("b1", "50.00", agent)

        mock_api.cancel_booking.assert_called_once_with(
            {
                "bookingId": "b1",
                "email": "jane.traveler@example.com",
                "customerType": "existing",
                "refundAmount": "175.00",
                "salesAgent": "Alex Agent",
                "mco": "50.00",
            }
        )
        assert cancelled.status is BookingStatus.CANCELLED
        assert service.store.current_booking.refund_amount == Decimal("175.00")

    @pytest.mark.asyncio
    async def test_fee_required(self, service, mock_api, agent):
        with pytest.raises(ValidationError, match="Cancellation fee is required"):
            await service.cancel_booking("b1", " ", agent)
        mock_api.get_booking.assert_not_called()

    @pytest.mark.asyncio
    async def test_new_customer(self, service, mock_api, make_booking, agent):
        form = make_booking(_id=None)
        mock_api.cancel_booking.return_value = make_booking(_id="c-1", status="CANCELLED")

        await service.cancel_new_customer(form, "40", agent)

        request = mock_api.cancel_booking.await_args.args[0]
        assert request["customerType"] == "new"
        assert request["refundAmount"] == "0.00"
        assert request["mco"] == "40.00"
        assert request["fullName"] == "Jane Traveler"
        assert request["dateOfBirth"] == "1990-04-12"
        assert request["salesAgent"] == "Alex Agent"

    @pytest.mark.asyncio
    async def test_new_customer_missing_fields(self, service, mock_api, agent):
        with pytest.raises(ValidationError, match="Missing required fields"):
            await service.cancel_new_customer(Booking(full_name="Jane"), "40", agent)
        mock_api.cancel_booking.assert_not_called()


class TestIsPastBooking:
    def test_past_and_future(self, make_booking):
        today = date(2030, 6, 2)
        assert is_past_booking(make_booking(pickupDate="2030-06-01"), today)
        assert not is_past_booking(make_booking(pickupDate="2030-06-02"), today)
        assert not is_past_booking(make_booking(pickupDate=""), today)
