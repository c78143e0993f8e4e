"""
MCO ("amount collected") derivations.

MCO is never typed in by hand: it is derived from the booking's prices
at creation and grows with each modification fee.
"""

from decimal import Decimal

from utils.money import MoneyLike, floor_zero, round2, to_decimal


def creation_mco(total: MoneyLike, payable_at_pickup: MoneyLike) -> Decimal:
    """
    MCO for a new booking: total minus what the customer pays at pickup.

    Floored at 0.00 when the pickup amount exceeds the total.
    """
    difference = to_decimal(total, "total") - to_decimal(payable_at_pickup, "payable at pickup")
    return floor_zero(round2(difference))


def modification_mco(prior_mco: MoneyLike, charge: MoneyLike) -> Decimal:
    """MCO after a modification: prior MCO plus the newly appended fee."""
    return round2(to_decimal(prior_mco, "MCO") + to_decimal(charge, "modification fee"))
