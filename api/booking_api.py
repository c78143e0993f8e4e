"""
HTTP client for the booking CRM API.

All endpoints speak JSON; money travels as decimal strings. Failures are
translated into NetworkError / ServerError / NotFoundError carrying the
server's message when it sends one.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from config import settings
from models.booking import Booking
from models.rental_company import RentalCompany
from utils.exceptions import NetworkError, NotFoundError, ServerError
from utils.logging_config import get_logger

logger = get_logger(__name__, log_file="booking_api.log")

_RETRY_BACKOFF = 2.0  # exponential backoff multiplier

# Status-based fallbacks when the body carries no message
_STATUS_MESSAGES = {
    401: "Unauthorized. Please login again.",
    403: "You don't have permission to perform this action.",
    500: "Server error. Please try again later.",
}


def extract_error_message(response: httpx.Response, default: str) -> str:
    """
    Pull a human-readable message out of an error response.

    Looks at `error` (string or {message}) then `message`, then falls back
    to a status-based text or `default`.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, str) and error:
            return error
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("message"):
            return str(data["message"])

    if response.status_code in _STATUS_MESSAGES:
        return _STATUS_MESSAGES[response.status_code]
    return default or "Something went wrong"


class BookingAPIClient:
    """Async client for the booking, notes, cancellation and company endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        auth_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. "https://crm.example.com/api"
            timeout: Request timeout in seconds
            max_retries: Attempts for GET requests
            retry_delay: Initial delay between GET attempts, in seconds
            auth_token: Session token sent as the "token" cookie
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = (base_url or settings.booking_api_url).rstrip("/")
        self.max_retries = max_retries if max_retries is not None else settings.api_max_retries
        self.retry_delay = retry_delay if retry_delay is not None else settings.api_retry_delay

        token = auth_token if auth_token is not None else settings.api_auth_token
        cookies = {"token": token} if token else None

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.api_timeout,
            headers={"Content-Type": "application/json"},
            cookies=cookies,
            transport=transport,
        )

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "BookingAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ========== Request Helpers ==========

    async def _request(
        self,
        method: str,
        path: str,
        default_error: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        GET requests are retried on transport errors and 5xx answers;
        mutating requests are sent exactly once.
        """
        attempts = self.max_retries if method == "GET" else 1
        delay = self.retry_delay

        for attempt in range(attempts):
            last_attempt = attempt == attempts - 1
            try:
                response = await self.client.request(method, path, json=json)
            except httpx.RequestError as e:
                if not last_attempt:
                    logger.warning(
                        f"Request error on {method} {path} "
                        f"(attempt {attempt + 1}/{attempts}): {e}. Retrying..."
                    )
                    await asyncio.sleep(delay)
                    delay *= _RETRY_BACKOFF
                    continue
                logger.error(f"Request error on {method} {path}: {e}")
                raise NetworkError(f"{default_error}: {e}") from e

            if response.status_code >= 500 and not last_attempt:
                logger.warning(
                    f"HTTP {response.status_code} on {method} {path} "
                    f"(attempt {attempt + 1}/{attempts}). Retrying..."
                )
                await asyncio.sleep(delay)
                delay *= _RETRY_BACKOFF
                continue

            return self._decode(response, method, path, default_error)

        # attempts is always >= 1, the loop returns or raises
        raise NetworkError(default_error)

    @staticmethod
    def _decode(response: httpx.Response, method: str, path: str, default_error: str) -> Any:
        if response.is_success:
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as e:
                raise ServerError(
                    f"{default_error}: invalid JSON response", response.status_code
                ) from e

        message = extract_error_message(response, default_error)
        logger.error(f"HTTP {response.status_code} on {method} {path}: {message}")
        if response.status_code == 404:
            raise NotFoundError(message)
        raise ServerError(message, response.status_code)

    @staticmethod
    def _unwrap(data: Any, key: str) -> Any:
        """
        Pull `key` out of a response body.

        Accepts `{key: ...}`, `{data: {key: ...}}`, `{data: ...}` and a bare
        body, in that order.
        """
        if not isinstance(data, dict):
            return data
        if key in data:
            return data[key]
        inner = data.get("data")
        if isinstance(inner, dict):
            return inner.get(key, inner)
        if inner is not None:
            return inner
        return data

    @classmethod
    def _booking_from(cls, data: Any, key: str = "booking") -> Booking:
        """Read a booking out of a response body, wrapped or bare."""
        payload = cls._unwrap(data, key)
        if not payload:
            raise NotFoundError("Booking not found")
        try:
            return Booking.model_validate(payload)
        except PydanticValidationError as e:
            raise ServerError(f"Invalid booking data from server: {e}") from e

    # ========== Booking Operations ==========

    async def list_bookings(self) -> List[Booking]:
        """GET /bookings"""
        data = await self._request("GET", "/bookings", "Failed to fetch bookings")
        items = (self._unwrap(data, "bookings") if data else None) or []
        if not isinstance(items, list):
            raise ServerError("Invalid booking list from server")
        try:
            return [Booking.model_validate(item) for item in items]
        except PydanticValidationError as e:
            raise ServerError(f"Invalid booking data from server: {e}") from e

    async def get_booking(self, booking_id: str) -> Booking:
        """
        GET /bookings/{id}

        Raises:
            NotFoundError: If the server has no such booking
        """
        data = await self._request("GET", f"/bookings/{booking_id}", "Failed to load booking")
        return self._booking_from(data)

    async def create_booking(self, payload: Dict[str, Any]) -> Booking:
        """POST /bookings; returns the stored booking."""
        data = await self._request("POST", "/bookings", "Failed to save booking", json=payload)
        return self._booking_from(data)

    async def update_booking(self, booking_id: str, payload: Dict[str, Any]) -> Booking:
        """PUT /bookings/{id}; returns the updated booking."""
        data = await self._request(
            "PUT", f"/bookings/{booking_id}", "Failed to save booking", json=payload
        )
        return self._booking_from(data)

    async def delete_booking(self, booking_id: str) -> str:
        """DELETE /bookings/{id}; returns the deleted id."""
        await self._request("DELETE", f"/bookings/{booking_id}", "Failed to delete booking")
        return booking_id

    async def cancel_booking(self, payload: Dict[str, Any]) -> Booking:
        """POST /bookings/cancel; the server moves the booking to CANCELLED."""
        data = await self._request(
            "POST", "/bookings/cancel", "Failed to process cancellation", json=payload
        )
        return self._booking_from(data)

    # ========== Note Operations ==========

    async def add_note(self, booking_id: str, text: str) -> Booking:
        data = await self._request(
            "POST", f"/bookings/{booking_id}/notes", "Failed to add note", json={"text": text}
        )
        return self._booking_from(data)

    async def update_note(self, booking_id: str, note_id: str, text: str) -> Booking:
        data = await self._request(
            "PUT",
            f"/bookings/{booking_id}/notes/{note_id}",
            "Failed to update note",
            json={"text": text},
        )
        return self._booking_from(data)

    async def delete_note(self, booking_id: str, note_id: str) -> Booking:
        data = await self._request(
            "DELETE", f"/bookings/{booking_id}/notes/{note_id}", "Failed to delete note"
        )
        return self._booking_from(data)

    # ========== Rental Company Operations ==========

    async def list_rental_companies(self) -> List[RentalCompany]:
        data = await self._request(
            "GET", "/rental-companies", "Failed to fetch rental companies"
        )
        self._check_success(data, "Failed to fetch rental companies")
        return [RentalCompany.model_validate(item) for item in data.get("data") or []]

    async def create_rental_company(self, name: str) -> RentalCompany:
        data = await self._request(
            "POST", "/rental-companies", "Failed to add company", json={"name": name}
        )
        self._check_success(data, "Failed to add company")
        return RentalCompany.model_validate(data.get("data"))

    @staticmethod
    def _check_success(data: Any, default_error: str) -> None:
        """Company endpoints wrap results as {success, data, message}."""
        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("message") if isinstance(data, dict) else None
            raise ServerError(message or default_error)


# Global API client instance
_api_client: Optional[BookingAPIClient] = None


def get_api_client() -> BookingAPIClient:
    """Get or create the shared API client instance."""
    global _api_client
    if _api_client is None:
        _api_client = BookingAPIClient()
    return _api_client
