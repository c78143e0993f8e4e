"""Refund calculation for cancellations."""

from decimal import Decimal
from typing import NamedTuple

from utils.exceptions import ValidationError
from utils.money import MoneyLike, floor_zero, round2, to_decimal


class RefundResult(NamedTuple):
    """Outcome of a cancellation: refund owed and the booking's new MCO."""

    refund: Decimal
    new_mco: Decimal


class RefundCalculator:
    """
    Derives the refund for a cancelled booking.

    The cancellation fee replaces the MCO; the customer gets back whatever
    was collected beyond that fee. A fee larger than the prior MCO yields a
    zero refund rather than an error.
    """

    @staticmethod
    def compute(prior_mco: MoneyLike, cancellation_fee: MoneyLike) -> RefundResult:
        mco = to_decimal(prior_mco, "MCO")
        fee = to_decimal(cancellation_fee, "cancellation fee")
        if mco < 0 or fee < 0:
            raise ValidationError("MCO and cancellation fee must not be negative")

        refund = floor_zero(round2(mco - fee))
        return RefundResult(refund=refund, new_mco=round2(fee))
