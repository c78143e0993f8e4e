"""Audit timeline for booking mutations."""

from .fields import FIELD_SPECS, EditableField, FieldGroup, fields_in_group
from .recorder import (
    TimelineRecorder,
    changed_fields,
    describe_change,
    diff_fields,
    fee_change,
    mco_change,
)

__all__ = [
    "FIELD_SPECS",
    "EditableField",
    "FieldGroup",
    "TimelineRecorder",
    "changed_fields",
    "describe_change",
    "diff_fields",
    "fee_change",
    "fields_in_group",
    "mco_change",
]
