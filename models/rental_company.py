"""Rental company reference data."""

from typing import Optional

from pydantic import Field

from models.common import OptionalTimestamp, WireModel


class RentalCompany(WireModel):
    """Rental company known to the CRM."""

    id: Optional[str] = Field(default=None, alias="_id")
    name: str
    created_at: OptionalTimestamp = None
    updated_at: OptionalTimestamp = None
