"""Summary figures shown above the dashboard table."""

from datetime import date
from decimal import Decimal
from typing import NamedTuple, Optional, Sequence

from models.booking import Booking, BookingStatus
from utils.datetime_utils import utc_now
from utils.money import ZERO, round2


class DashboardStats(NamedTuple):
    today_revenue: Decimal
    booked: int
    modified: int
    cancelled: int

    @property
    def total(self) -> int:
        return self.booked + self.modified + self.cancelled


def compute_stats(
    bookings: Sequence[Booking],
    agent_id: Optional[str] = None,
    today: Optional[date] = None,
) -> DashboardStats:
    """
    Count bookings per status and sum today's MCO for one agent.

    Revenue only includes bookings created today (UTC) by `agent_id`.
    """
    today = today or utc_now().date()

    revenue = ZERO
    counts = {status: 0 for status in BookingStatus}
    for booking in bookings:
        counts[BookingStatus(booking.status)] += 1
        created = booking.created_at
        if agent_id and booking.agent_id == agent_id and created and created.date() == today:
            revenue += booking.mco

    return DashboardStats(
        today_revenue=round2(revenue),
        booked=counts[BookingStatus.BOOKED],
        modified=counts[BookingStatus.MODIFIED],
        cancelled=counts[BookingStatus.CANCELLED],
    )
