"""Sales agent identity as returned by the auth service."""

from typing import Optional

from pydantic import Field

from models.common import WireModel


class Agent(WireModel):
    """The logged-in agent acting on bookings."""

    id: Optional[str] = Field(default=None, alias="_id")
    name: str
    email: Optional[str] = None
