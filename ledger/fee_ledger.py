"""
Append-only ledger of modification fees.

Fees are only ever appended, or popped from the tail by an explicit undo.
Only the most recent charge feeds into the MCO.
"""

from decimal import Decimal
from typing import Iterable, List, Optional

from ledger.mco import modification_mco
from models.booking import ModificationFee
from utils.exceptions import ValidationError
from utils.logging_config import setup_logging
from utils.money import ZERO, format_money, to_decimal

logger = setup_logging(name=__name__)


class FeeLedger:
    """Working copy of a booking's modification fee list."""

    def __init__(self, entries: Optional[Iterable[ModificationFee]] = None):
        self._entries: List[ModificationFee] = list(entries or [])
        # Length of the ledger as loaded from the booking
        self._loaded_length = len(self._entries)

    @classmethod
    def from_booking(cls, booking) -> "FeeLedger":
        return cls(booking.modification_fee)

    def append(self, charge: str) -> ModificationFee:
        """
        Push a new fee onto the ledger.

        Raises:
            ValidationError: If the charge is blank, not a number or negative
        """
        if charge is None or not str(charge).strip():
            raise ValidationError("Modification fee charge cannot be empty")

        amount = to_decimal(charge, "modification fee")
        if amount < 0:
            raise ValidationError(f"Modification fee cannot be negative: {charge}")

        entry = ModificationFee(charge=format_money(amount))
        self._entries.append(entry)
        logger.debug(f"Appended modification fee {entry.charge} (ledger size {len(self)})")
        return entry

    def remove_last(self) -> Optional[ModificationFee]:
        """Pop the tail entry. Returns None on an empty ledger."""
        if not self._entries:
            return None
        removed = self._entries.pop()
        self._loaded_length = min(self._loaded_length, len(self._entries))
        return removed

    def current_charge(self) -> Decimal:
        """Charge of the last entry, or 0 when the ledger is empty."""
        if not self._entries:
            return ZERO
        return to_decimal(self._entries[-1].charge, "modification fee")

    @property
    def has_new_charges(self) -> bool:
        """True when fees were appended since the ledger was loaded."""
        return len(self._entries) > self._loaded_length

    @property
    def entries(self) -> List[ModificationFee]:
        return list(self._entries)

    def apply_to_mco(self, prior_mco) -> Decimal:
        """MCO after a modification save: prior MCO plus the current charge."""
        return modification_mco(prior_mco, self.current_charge())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def __repr__(self) -> str:
        charges = ", ".join(entry.charge for entry in self._entries)
        return f"FeeLedger([{charges}])"
