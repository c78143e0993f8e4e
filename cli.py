"""
Command line access to the booking dashboard.

Usage:
    python cli.py dashboard --tab BOOKED --search smith --sort mco --desc
    python cli.py show <booking-id>
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from api.booking_api import BookingAPIClient
from config import settings
from dashboard import DashboardView, SortKey, StatusTab, compute_stats
from models.booking import Booking
from store.booking_store import BookingStore
from timeline import EditableField, FieldGroup, fields_in_group
from utils.exceptions import APIError, ValidationError
from utils.masking import mask_email, mask_phone
from utils.money import format_money


def format_row(booking: Booking) -> str:
    return (
        f"{(booking.id or '-')[:8]:<8}  {booking.status.value:<9}  "
        f"{booking.full_name[:24]:<24}  {booking.rental_company[:14]:<14}  "
        f"{booking.pickup_date:<10}  {format_money(booking.mco):>10}  {booking.sales_agent}"
    )


# Contact details are shown masked outside the edit form
_MASKED = {
    EditableField.EMAIL: mask_email,
    EditableField.PHONE_NUMBER: mask_phone,
}


def format_booking(booking: Booking) -> List[str]:
    lines = [f"Booking {booking.id} [{booking.status.value}]"]
    for group in FieldGroup:
        lines.append(f"  {group.value}")
        for field in fields_in_group(group):
            spec = field.spec
            value = spec.read(booking)
            shown = _MASKED[field](value) if field in _MASKED else spec.format(value)
            lines.append(f"    {spec.label + ':':<21} {shown}")

    lines.append(
        f"  MCO {format_money(booking.mco)} | refund {format_money(booking.refund_amount)}"
    )
    if booking.modification_fee:
        charges = ", ".join(fee.charge for fee in booking.modification_fee)
        lines.append(f"  Fees: {charges} (current {booking.last_modification_charge})")

    latest = booking.latest_timeline_entry
    if latest is not None:
        lines.append(f"  Last activity: {latest.message} by {latest.agent_name}")
    for entry in reversed(booking.timeline):
        lines.append(f"  - {entry.date:%Y-%m-%d %H:%M} {entry.agent_name}: {entry.message}")
        lines.extend(f"      {change.text}" for change in entry.changes)
    for note in booking.notes:
        lines.append(f"  * {note.agent_name}: {note.text}")
    return lines


async def show_dashboard(store: BookingStore, args: argparse.Namespace) -> None:
    bookings = await store.fetch_all()

    view = DashboardView(page_size=args.page_size or settings.dashboard_page_size)
    if args.sort:
        view.sort_by(SortKey(args.sort))
        if args.desc:
            view.sort_by(SortKey(args.sort))
    view.set_tab(StatusTab(args.tab))
    view.set_search(args.search)
    view.go_to(args.page)

    page = view.apply(bookings)
    for booking in page.rows:
        print(format_row(booking))
    print(f"\nPage {page.page}/{max(page.total_pages, 1)} ({page.total_items} bookings)")

    stats = compute_stats(bookings, agent_id=args.agent_id)
    print(
        f"Booked {stats.booked} | Modified {stats.modified} | Cancelled {stats.cancelled}"
        + (f" | Today's revenue ${format_money(stats.today_revenue)}" if args.agent_id else "")
    )


async def show_booking(store: BookingStore, booking_id: str) -> None:
    booking = await store.fetch_by_id(booking_id)
    print("\n".join(format_booking(booking)))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rental booking CRM dashboard")
    sub = parser.add_subparsers(dest="command", required=True)

    dash = sub.add_parser("dashboard", help="List bookings")
    dash.add_argument("--tab", choices=[tab.value for tab in StatusTab], default="ALL")
    dash.add_argument("--search", default="", help="Match name, email or phone")
    dash.add_argument("--sort", choices=[key.value for key in SortKey])
    dash.add_argument("--desc", action="store_true", help="Sort descending")
    dash.add_argument("--page", type=int, default=1)
    dash.add_argument("--page-size", type=int, default=None)
    dash.add_argument("--agent-id", default=None, help="Agent for today's revenue")

    show = sub.add_parser("show", help="Show one booking with its timeline")
    show.add_argument("booking_id")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings.validate_all_required()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    async with BookingAPIClient() as api:
        store = BookingStore(api)
        try:
            if args.command == "dashboard":
                await show_dashboard(store, args)
            else:
                await show_booking(store, args.booking_id)
        except (APIError, ValidationError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
