"""
Canonical in-memory state for bookings.

BookingStore owns the booking currently being viewed or edited and the
dashboard list. Both are only replaced on the success path of a request;
readers always get copies.
"""

from typing import Any, Awaitable, List, Mapping, Optional, Union

from api.booking_api import BookingAPIClient, get_api_client
from models.booking import Booking, serialize_patch
from store.status import LoadingFlag, OperationStatus
from utils.exceptions import APIError, ValidationError
from utils.logging_config import for_booking, get_logger

logger = get_logger(__name__, log_file="booking_store.log")

_IDENTITY_KEYS = ("id", "_id")


class BookingStore:
    """
    State container for the current booking and the booking list.

    Concurrent calls of the same operation are not queued. The only guard
    is the fetch token: a newer fetch_by_id, save or clear() makes any
    in-flight single-booking fetch drop its response instead of committing.
    """

    def __init__(self, api: Optional[BookingAPIClient] = None):
        self.api = api or get_api_client()
        self.status = OperationStatus()
        self._current: Optional[Booking] = None
        self._bookings: List[Booking] = []
        self._fetch_token = 0

    # ========== Readers ==========

    @property
    def current_booking(self) -> Optional[Booking]:
        return self._current.model_copy(deep=True) if self._current else None

    @property
    def current_booking_id(self) -> Optional[str]:
        return self._current.id if self._current else None

    @property
    def bookings_list(self) -> List[Booking]:
        return [booking.model_copy(deep=True) for booking in self._bookings]

    # ========== Fetches ==========

    async def fetch_all(self) -> List[Booking]:
        """
        Replace the booking list with the server's.

        On failure the previous list is kept and `status.error` is set.
        """
        self.status.begin(LoadingFlag.LIST)
        try:
            bookings = await self.api.list_bookings()
        except APIError as e:
            self.status.fail(LoadingFlag.LIST, e.message or "Failed to fetch bookings")
            logger.error(f"Failed to fetch bookings: {e}")
            raise

        self._bookings = bookings
        self.status.succeed(LoadingFlag.LIST)
        logger.info(f"Loaded {len(bookings)} bookings")
        return self.bookings_list

    async def fetch_by_id(self, booking_id: str) -> Booking:
        """
        Load a booking into `current_booking`.

        Returns the resident copy without a network call when that booking
        is already loaded; that still counts as a newer fetch. A response
        that arrives after a newer fetch, a save or clear() is returned to
        its caller but not committed.
        """
        if not booking_id:
            raise ValidationError("Booking ID is required")

        log = for_booking(logger, booking_id)
        if self._current is not None and self._current.id == booking_id:
            log.debug("Already loaded, skipping fetch")
            # Any fetch still in flight is for another booking now
            self._fetch_token += 1
            self.status.succeed(LoadingFlag.LOADING)
            return self.current_booking

        self._fetch_token += 1
        token = self._fetch_token
        self.status.begin(LoadingFlag.LOADING)

        try:
            booking = await self.api.get_booking(booking_id)
        except APIError as e:
            if token != self._fetch_token:
                log.info(f"Dropping stale failure: {e}")
                raise
            self.status.fail(LoadingFlag.LOADING, e.message or "Failed to fetch booking")
            log.error(f"Failed to fetch: {e}")
            raise

        if token != self._fetch_token:
            log.info("Dropping stale response")
            return booking

        self._current = booking
        self.status.succeed(LoadingFlag.LOADING)
        return self.current_booking

    # ========== Mutations ==========

    async def save(
        self,
        patch: Union[Booking, Mapping[str, Any]],
        booking_id: Optional[str] = None,
    ) -> Booking:
        """
        Create (no id) or update (id given) a booking.

        `patch` is a Booking or a mapping keyed by Booking attribute names.
        The identity field is never sent. The server's record replaces
        `current_booking` as is; nothing is merged client-side.
        """
        payload = self._to_payload(patch)

        self._fetch_token += 1
        self.status.begin(LoadingFlag.LOADING, mutation=True)
        try:
            if booking_id:
                booking = await self.api.update_booking(booking_id, payload)
            else:
                booking = await self.api.create_booking(payload)
        except APIError as e:
            self.status.fail(
                LoadingFlag.LOADING, e.message or "Failed to save booking", mutation=True
            )
            for_booking(logger, booking_id).error(f"Failed to save: {e}")
            raise

        self._current = booking
        self.status.succeed(LoadingFlag.LOADING, mutation=True)
        for_booking(logger, booking.id).info(f"Saved ({booking.status.value})")
        return self.current_booking

    async def delete(self, booking_id: str) -> str:
        """Delete a booking; the list is only updated once the server confirms."""
        if not booking_id:
            raise ValidationError("Booking ID is required")

        self.status.begin(LoadingFlag.LIST, mutation=True)
        try:
            deleted_id = await self.api.delete_booking(booking_id)
        except APIError as e:
            self.status.fail(
                LoadingFlag.LIST, e.message or "Failed to delete booking", mutation=True
            )
            for_booking(logger, booking_id).error(f"Failed to delete: {e}")
            raise

        self._bookings = [b for b in self._bookings if b.id != deleted_id]
        self.status.succeed(LoadingFlag.LIST, mutation=True)
        for_booking(logger, deleted_id).info("Deleted")
        return deleted_id

    async def cancel(self, request: Mapping[str, Any]) -> Booking:
        """Submit a cancellation request; the returned record becomes current."""
        return await self.submit(
            self.api.cancel_booking(dict(request)),
            "Failed to process cancellation",
            flag=LoadingFlag.LOADING,
        )

    async def submit(
        self,
        request: Awaitable[Booking],
        default_error: str,
        flag: LoadingFlag = LoadingFlag.ACTION,
    ) -> Booking:
        """
        Await a request that answers with a full booking and commit it.

        Used for sub-resource actions (notes) and cancellations, which all
        return the whole parent booking.
        """
        self._fetch_token += 1
        self.status.begin(flag, mutation=True)
        try:
            booking = await request
        except APIError as e:
            self.status.fail(flag, e.message or default_error, mutation=True)
            logger.error(f"{default_error}: {e}")
            raise

        self._current = booking
        self.status.succeed(flag, mutation=True)
        return self.current_booking

    # ========== Resets ==========

    def clear(self) -> None:
        """Drop the current booking and status when its view goes away."""
        self._fetch_token += 1
        self._current = None
        self.status.reset()

    def clear_bookings_list(self) -> None:
        self._bookings = []

    def reset_operation_status(self) -> None:
        self.status.acknowledge()

    @staticmethod
    def _to_payload(patch: Union[Booking, Mapping[str, Any]]) -> dict:
        if isinstance(patch, Booking):
            return patch.to_payload(exclude={"id"})
        fields = {k: v for k, v in patch.items() if k not in _IDENTITY_KEYS}
        return serialize_patch(fields)
