"""Dashboard table queries and summary statistics."""

from .query import (
    DashboardPage,
    DashboardView,
    SortConfig,
    SortDirection,
    SortKey,
    StatusTab,
    filter_bookings,
    paginate,
    run_query,
    sort_bookings,
    toggle_sort,
)
from .stats import DashboardStats, compute_stats

__all__ = [
    "DashboardPage",
    "DashboardStats",
    "DashboardView",
    "SortConfig",
    "SortDirection",
    "SortKey",
    "StatusTab",
    "compute_stats",
    "filter_bookings",
    "paginate",
    "run_query",
    "sort_bookings",
    "toggle_sort",
]
