"""
Client-side sort, filter and pagination of the booking list.

Everything here is a pure function of its inputs: the same list, sort,
tab, search term and page always give the same rows in the same order.
"""

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from models.booking import Booking, BookingStatus
from utils.constants import DEFAULT_PAGE_SIZE
from utils.datetime_utils import try_parse_datetime


class SortKey(str, Enum):
    """Sortable dashboard columns."""

    CREATED_AT = "created_at"
    FULL_NAME = "full_name"
    RENTAL_COMPANY = "rental_company"
    MCO = "mco"
    PICKUP_DATE = "pickup_date"
    SALES_AGENT = "sales_agent"


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class StatusTab(str, Enum):
    """Dashboard tabs: everything, or one booking status."""

    ALL = "ALL"
    BOOKED = "BOOKED"
    MODIFIED = "MODIFIED"
    CANCELLED = "CANCELLED"

    def matches(self, status: BookingStatus) -> bool:
        return self is StatusTab.ALL or self.value == BookingStatus(status).value


_READERS: Dict[SortKey, Callable[[Booking], Any]] = {
    SortKey.CREATED_AT: lambda b: b.created_at,
    SortKey.FULL_NAME: lambda b: b.full_name,
    SortKey.RENTAL_COMPANY: lambda b: b.rental_company,
    SortKey.MCO: lambda b: b.mco,
    SortKey.PICKUP_DATE: lambda b: b.pickup_date,
    SortKey.SALES_AGENT: lambda b: b.sales_agent,
}


class SortConfig(NamedTuple):
    key: SortKey
    direction: SortDirection = SortDirection.ASCENDING

    def toggle(self, key: SortKey) -> "SortConfig":
        """Clicking the ascending column again flips it; any other click sorts ascending."""
        return toggle_sort(self, key)


def toggle_sort(current: Optional[SortConfig], key: SortKey) -> SortConfig:
    key = SortKey(key)
    if current is not None and current.key is key and current.direction is SortDirection.ASCENDING:
        return SortConfig(key, SortDirection.DESCENDING)
    return SortConfig(key, SortDirection.ASCENDING)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _column_key(values: Sequence[Any]) -> Callable[[Any], Any]:
    """
    Pick one comparison for the whole column.

    Dates when every value parses as a date, numbers when every value is
    numeric, otherwise case-insensitive text.
    """
    if values and all(try_parse_datetime(v) is not None for v in values):
        return try_parse_datetime
    if values and all(isinstance(v, (int, float, Decimal)) for v in values):
        return lambda v: v
    return lambda v: (str(v).casefold(), str(v))


def sort_bookings(bookings: Sequence[Booking], sort: Optional[SortConfig]) -> List[Booking]:
    """
    Sort a copy of the list.

    Missing values go last when ascending and first when descending. The
    descending order is the exact reverse of the ascending one, ties
    included.
    """
    if sort is None:
        return list(bookings)

    read = _READERS[SortKey(sort.key)]
    present = [b for b in bookings if not _is_missing(read(b))]
    missing = [b for b in bookings if _is_missing(read(b))]

    key = _column_key([read(b) for b in present])
    ascending = sorted(present, key=lambda b: key(read(b))) + missing

    if SortDirection(sort.direction) is SortDirection.DESCENDING:
        return ascending[::-1]
    return ascending


def matches_search(booking: Booking, search_term: str) -> bool:
    """Case-insensitive substring match on name, email or phone."""
    term = (search_term or "").casefold()
    if not term:
        return True
    return any(
        term in (value or "").casefold()
        for value in (booking.full_name, booking.email, booking.phone_number)
    )


def filter_bookings(
    bookings: Sequence[Booking], tab: StatusTab = StatusTab.ALL, search_term: str = ""
) -> List[Booking]:
    tab = StatusTab(tab)
    return [b for b in bookings if tab.matches(b.status) and matches_search(b, search_term)]


class DashboardPage(NamedTuple):
    rows: List[Booking]
    page: int
    page_size: int
    total_items: int
    total_pages: int


def paginate(
    bookings: Sequence[Booking], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
) -> DashboardPage:
    """Slice out one page (1-based). Pages past the end are empty."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    page = max(1, page)
    start = (page - 1) * page_size
    return DashboardPage(
        rows=list(bookings[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_items=len(bookings),
        total_pages=math.ceil(len(bookings) / page_size),
    )


def run_query(
    bookings: Sequence[Booking],
    sort: Optional[SortConfig] = None,
    tab: StatusTab = StatusTab.ALL,
    search_term: str = "",
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> DashboardPage:
    """Sort, then filter, then paginate."""
    ordered = sort_bookings(bookings, sort)
    visible = filter_bookings(ordered, tab, search_term)
    return paginate(visible, page, page_size)


class DashboardView:
    """
    Dashboard controls: sort column, tab, search box and current page.

    Changing the search term or the tab sends the view back to page 1.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.page_size = page_size
        self.sort: Optional[SortConfig] = None
        self.tab = StatusTab.ALL
        self.search_term = ""
        self.page = 1

    def set_search(self, term: str) -> None:
        if term != self.search_term:
            self.search_term = term
            self.page = 1

    def set_tab(self, tab: StatusTab) -> None:
        tab = StatusTab(tab)
        if tab is not self.tab:
            self.tab = tab
            self.page = 1

    def sort_by(self, key: SortKey) -> SortConfig:
        self.sort = toggle_sort(self.sort, key)
        return self.sort

    def go_to(self, page: int) -> None:
        self.page = max(1, page)

    def apply(self, bookings: Sequence[Booking]) -> DashboardPage:
        return run_query(
            bookings,
            sort=self.sort,
            tab=self.tab,
            search_term=self.search_term,
            page=self.page,
            page_size=self.page_size,
        )
