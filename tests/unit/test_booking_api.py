"""
Unit tests for the booking API client, using httpx.MockTransport.
"""

import httpx
import pytest

from api.booking_api import BookingAPIClient, extract_error_message
from utils.exceptions import NetworkError, NotFoundError, ServerError


def booking_body(**overrides):
    body = {"_id": "b1", "fullName": "Jane Traveler", "mco": "200.00", "status": "BOOKED"}
    body.update(overrides)
    return body


class TestExtractErrorMessage:
    """Test error message precedence."""

    def test_error_string(self):
        response = httpx.Response(400, json={"error": "Email is invalid", "message": "ignored"})
        assert extract_error_message(response, "Failed") == "Email is invalid"

    def test_error_object(self):
        response = httpx.Response(400, json={"error": {"message": "Bad pickup date"}})
        assert extract_error_message(response, "Failed") == "Bad pickup date"

    def test_message_field(self):
        response = httpx.Response(409, json={"message": "Already cancelled"})
        assert extract_error_message(response, "Failed") == "Already cancelled"

    def test_status_fallback(self):
        response = httpx.Response(401, json={})
        assert extract_error_message(response, "Failed") == "Unauthorized. Please login again."

    def test_default_fallback(self):
        response = httpx.Response(418, content=b"not json")
        assert extract_error_message(response, "Failed to save booking") == "Failed to save booking"


class TestBookingAPIClient:
    """Test request/response handling."""

    @pytest.mark.asyncio
    async def test_get_booking_wrapped(self, api_client, http_handler):
        http_handler.add("GET", "/api/bookings/b1", json_body={"booking": booking_body()})

        booking = await api_client.get_booking("b1")

        assert booking.id == "b1"
        assert booking.full_name == "Jane Traveler"

    @pytest.mark.asyncio
    async def test_get_booking_bare(self, api_client, http_handler):
        http_handler.add("GET", "/api/bookings/b1", json_body=booking_body())
        booking = await api_client.get_booking("b1")
        assert booking.id == "b1"

    @pytest.mark.asyncio
    async def test_get_booking_not_found(self, api_client, http_handler):
        http_handler.add("GET", "/api/bookings/nope", 404, {"error": "Booking not found"})

        with pytest.raises(NotFoundError, match="Booking not found"):
            await api_client.get_booking("nope")

    @pytest.mark.asyncio
    async def test_list_bookings(self, api_client, http_handler):
        http_handler.add(
            "GET", "/api/bookings", json_body={"bookings": [booking_body(), booking_body(_id="b2")]}
        )

        bookings = await api_client.list_bookings()

        assert [b.id for b in bookings] == ["b1", "b2"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"bookings": [{"_id": "b1"}]},
            {"data": {"bookings": [{"_id": "b1"}]}},
            {"data": [{"_id": "b1"}]},
            [{"_id": "b1"}],
        ],
    )
    async def test_list_bookings_envelopes(self, api_client, http_handler, body):
        http_handler.add("GET", "/api/bookings", json_body=body)

        bookings = await api_client.list_bookings()

        assert [b.id for b in bookings] == ["b1"]

    @pytest.mark.asyncio
    async def test_get_booking_data_envelope(self, api_client, http_handler):
        http_handler.add("GET", "/api/bookings/b1", json_body={"data": {"booking": booking_body()}})
        booking = await api_client.get_booking("b1")
        assert booking.full_name == "Jane Traveler"

    @pytest.mark.asyncio
    async def test_list_bookings_empty_body(self, api_client, http_handler):
        http_handler.add("GET", "/api/bookings", json_body={})
        assert await api_client.list_bookings() == []

    @pytest.mark.asyncio
    async def test_get_retries_server_errors(self, api_client, http_handler):
        http_handler.add("GET", "/api/bookings", 503, {"message": "Unavailable"})
        http_handler.add("GET", "/api/bookings", json_body={"bookings": []})

        assert await api_client.list_bookings() == []
        assert len(http_handler.requests) == 2

    @pytest.mark.asyncio
    async def test_get_gives_up_after_max_retries(self, api_client, http_handler):
        http_handler.add_error("GET", "/api/bookings", httpx.ConnectError("refused"))

        with pytest.raises(NetworkError):
            await api_client.list_bookings()
        assert len(http_handler.requests) == 3

    @pytest.mark.asyncio
    async def test_mutations_are_not_retried(self, api_client, http_handler):
        http_handler.add("PUT", "/api/bookings/b1", 500, {"error": "Database unavailable"})

        with pytest.raises(ServerError) as exc_info:
            await api_client.update_booking("b1", {"fullName": "Jane"})

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Database unavailable"
        assert len(http_handler.requests) == 1

    @pytest.mark.asyncio
    async def test_update_sends_json(self, api_client, http_handler):
        http_handler.add(
            "PUT", "/api/bookings/b1", json_body={"booking": booking_body(status="MODIFIED")}
        )

        booking = await api_client.update_booking("b1", {"status": "MODIFIED", "mco": "225.00"})

        assert booking.status.value == "MODIFIED"
        assert http_handler.body() == {"status": "MODIFIED", "mco": "225.00"}

    @pytest.mark.asyncio
    async def test_cancel_posts_to_cancel_endpoint(self, api_client, http_handler):
        http_handler.add(
            "POST", "/api/bookings/cancel", json_body={"booking": booking_body(status="CANCELLED")}
        )

        booking = await api_client.cancel_booking({"bookingId": "b1", "mco": "50.00"})

        assert booking.status.value == "CANCELLED"
        assert http_handler.body()["bookingId"] == "b1"

    @pytest.mark.asyncio
    async def test_delete_returns_id(self, api_client, http_handler):
        http_handler.add("DELETE", "/api/bookings/b1", json_body={"message": "Deleted"})
        assert await api_client.delete_booking("b1") == "b1"

    @pytest.mark.asyncio
    async def test_add_note(self, api_client, http_handler):
        http_handler.add(
            "POST",
            "/api/bookings/b1/notes",
            json_body={"booking": booking_body(notes=[{"_id": "n1", "text": "Hello"}])},
        )

        booking = await api_client.add_note("b1", "Hello")

        assert booking.notes[0].id == "n1"
        assert http_handler.body() == {"text": "Hello"}

    @pytest.mark.asyncio
    async def test_invalid_booking_data_is_server_error(self, api_client, http_handler):
        http_handler.add("GET", "/api/bookings/b1", json_body={"booking": {"mco": "lots"}})

        with pytest.raises(ServerError):
            await api_client.get_booking("b1")

    @pytest.mark.asyncio
    async def test_list_rental_companies(self, api_client, http_handler):
        http_handler.add(
            "GET",
            "/api/rental-companies",
            json_body={"success": True, "data": [{"_id": "c1", "name": "Hertz"}]},
        )

        companies = await api_client.list_rental_companies()

        assert [c.name for c in companies] == ["Hertz"]

    @pytest.mark.asyncio
    async def test_create_rental_company_failure(self, api_client, http_handler):
        http_handler.add(
            "POST",
            "/api/rental-companies",
            json_body={"success": False, "message": "Company already exists"},
        )

        with pytest.raises(ServerError, match="Company already exists"):
            await api_client.create_rental_company("Hertz")

    @pytest.mark.asyncio
    async def test_auth_token_sent_as_cookie(self, http_handler):
        http_handler.add("GET", "/api/bookings", json_body={"bookings": []})
        client = BookingAPIClient(
            base_url="https://crm.test/api",
            retry_delay=0,
            auth_token="secret",
            transport=httpx.MockTransport(http_handler),
        )

        async with client:
            await client.list_bookings()

        assert "token=secret" in http_handler.requests[0].headers["cookie"]
