"""
Pytest configuration and shared fixtures.
"""

import json
from typing import Any, Callable, Dict, List
from unittest.mock import MagicMock, patch

import httpx
import pytest

import config
from api.booking_api import BookingAPIClient
from models.booking import Booking


@pytest.fixture(autouse=True)
def mock_settings():
    """Test settings: no log files, no retry sleeps."""
    with patch.multiple(
        config.settings,
        booking_api_url="https://crm.test/api",
        api_retry_delay=0,
        api_auth_token="",
        log_to_file=False,
        environment="test",
    ):
        yield config.settings


def booking_payload(**overrides: Any) -> Dict[str, Any]:
    """Booking as the API returns it (camelCase, decimal strings)."""
    data = {
        "_id": "665f1c2e9b1e8a0012345678",
        "fullName": "Jane Traveler",
        "email": "jane.traveler@example.com",
        "phoneNumber": "+15551234567",
        "dateOfBirth": "1990-04-12",
        "rentalCompany": "Hertz",
        "confirmationNumber": "HZ-99812",
        "vehicleImage": "",
        "total": "300.00",
        "payableAtPickup": "100.00",
        "mco": "200.00",
        "refundAmount": "0.00",
        "pickupLocation": "LAX",
        "dropoffLocation": "SFO",
        "pickupDate": "2030-06-01",
        "dropoffDate": "2030-06-05",
        "pickupTime": "09:30",
        "dropoffTime": "17:00",
        "cardLast4": "4242",
        "expiration": "12/30",
        "billingAddress": "1 Main St, Springfield",
        "status": "BOOKED",
        "salesAgent": "Alex Agent",
        "agentId": "agent-1",
        "createdAt": "2030-05-01T10:00:00.000Z",
        "modificationFee": [],
        "timeline": [
            {
                "date": "2030-05-01T10:00:00.000Z",
                "message": "New booking created",
                "agentName": "Alex Agent",
                "changes": [],
            }
        ],
        "notes": [],
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_booking() -> Callable[..., Booking]:
    """Factory for Booking models built from API-shaped data."""

    def _make(**overrides: Any) -> Booking:
        return Booking.model_validate(booking_payload(**overrides))

    return _make


@pytest.fixture
def mock_api():
    """BookingAPIClient double; async methods become AsyncMocks."""
    return MagicMock(spec=BookingAPIClient)


class RecordingHandler:
    """httpx.MockTransport handler that replays canned responses and records requests."""

    def __init__(self):
        self.routes: Dict[tuple, List[httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json_body: Any = None) -> None:
        response = httpx.Response(status, json=json_body)
        self.routes.setdefault((method, path), []).append(response)

    def add_error(self, method: str, path: str, exc: Exception) -> None:
        self.routes.setdefault((method, path), []).append(exc)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"error": "No route"})
        result = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(result, Exception):
            raise result
        return result

    def body(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def http_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def api_client(http_handler) -> BookingAPIClient:
    """Real client wired to the recording handler, no retry delay."""
    return BookingAPIClient(
        base_url="https://crm.test/api",
        timeout=5.0,
        max_retries=3,
        retry_delay=0,
        auth_token="",
        transport=httpx.MockTransport(http_handler),
    )
