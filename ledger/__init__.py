"""Modification fee ledger and MCO / refund derivations."""

from .fee_ledger import FeeLedger
from .mco import creation_mco, modification_mco
from .refund import RefundCalculator, RefundResult

__all__ = [
    "FeeLedger",
    "RefundCalculator",
    "RefundResult",
    "creation_mco",
    "modification_mco",
]
