"""
Timeline recording for booking mutations.

Every successful modification appends exactly one TimelineEntry. Entries
are built here and never edited afterwards.
"""

from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from models.booking import Booking, TimelineChange, TimelineEntry
from timeline.fields import EditableField
from utils.constants import UNKNOWN_AGENT
from utils.datetime_utils import utc_now
from utils.exceptions import ValidationError
from utils.money import format_money

MODIFICATION_FEE_LABEL = "Modification Fee"
MCO_LABEL = "MCO"


def changed_fields(
    before: Booking,
    updates: Mapping[EditableField, Any],
    selected: Iterable[EditableField],
) -> List[EditableField]:
    """
    Selected fields whose formatted value differs from the booking's.

    Fields that are selected but absent from `updates` count as unchanged.
    """
    changed = []
    for field in selected:
        field = EditableField(field)
        if field not in updates or field in changed:
            continue
        spec = field.spec
        if spec.format(spec.read(before)) != spec.format(updates[field]):
            changed.append(field)
    return changed


def describe_change(before: Booking, field: EditableField, new_value: Any) -> TimelineChange:
    spec = EditableField(field).spec
    old_text = spec.format(spec.read(before))
    return TimelineChange(
        field=spec.label,
        old_value=old_text or None,
        new_value=spec.format(new_value),
    )


def diff_fields(
    before: Booking,
    updates: Mapping[EditableField, Any],
    selected: Iterable[EditableField],
) -> List[TimelineChange]:
    """Timeline changes for the selected fields that actually changed."""
    return [
        describe_change(before, field, updates[field])
        for field in changed_fields(before, updates, selected)
    ]


def fee_change(charge: Any) -> TimelineChange:
    return TimelineChange(field=MODIFICATION_FEE_LABEL, new_value=format_money(charge))


def mco_change(old_mco: Any, new_mco: Any) -> TimelineChange:
    return TimelineChange(
        field=MCO_LABEL,
        old_value=format_money(old_mco),
        new_value=format_money(new_mco),
    )


class TimelineRecorder:
    """Creates timeline entries for the acting agent."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utc_now

    def record(
        self,
        agent_name: str,
        field_changes: Sequence[TimelineChange],
        derived: Sequence[TimelineChange] = (),
    ) -> TimelineEntry:
        """
        Build the audit entry for one mutation.

        `derived` changes (the recomputed MCO) are listed after the edits but
        do not count as an edit on their own.

        Raises:
            ValidationError: If no field changed
        """
        if not field_changes:
            raise ValidationError(
                "No changes selected. Please select at least one field to update."
            )

        changes = [*field_changes, *derived]
        return TimelineEntry(
            date=self._clock(),
            message=f"Updated {len(changes)} field(s)",
            agent_name=(agent_name or "").strip() or UNKNOWN_AGENT,
            changes=changes,
        )

    def record_message(
        self,
        agent_name: str,
        message: str,
        field_changes: Sequence[TimelineChange] = (),
    ) -> TimelineEntry:
        """Entry with a fixed message, e.g. "New booking created"."""
        return TimelineEntry(
            date=self._clock(),
            message=message,
            agent_name=(agent_name or "").strip() or UNKNOWN_AGENT,
            changes=list(field_changes),
        )
