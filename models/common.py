"""Shared pydantic types for the booking API wire format."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from utils.datetime_utils import to_iso_string
from utils.money import format_money, to_decimal


def _serialize_datetime(value: Optional[datetime]) -> Optional[str]:
    return to_iso_string(value) if value is not None else None


# Decimal in memory, "0.00"-style string on the wire
Money = Annotated[
    Decimal,
    BeforeValidator(to_decimal),
    PlainSerializer(format_money, return_type=str, when_used="json"),
]

Timestamp = Annotated[
    datetime,
    PlainSerializer(_serialize_datetime, return_type=str, when_used="json"),
]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalTimestamp = Annotated[
    Optional[Timestamp],
    BeforeValidator(_blank_to_none),
]


class WireModel(BaseModel):
    """Base for models exchanged with the booking API (camelCase JSON)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
        extra="ignore",
    )

    def to_payload(self, **kwargs: Any) -> dict:
        """JSON-ready dict with API field names."""
        kwargs.setdefault("exclude_none", True)
        return self.model_dump(mode="json", by_alias=True, **kwargs)

    @classmethod
    def wire_name(cls, field_name: str) -> str:
        """API key for a model attribute, e.g. 'full_name' -> 'fullName'."""
        field = cls.model_fields[field_name]
        return field.alias or to_camel(field_name)
