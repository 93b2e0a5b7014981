"""
Pydantic models for user data.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Payload for creating a user.

    ``username`` is optional at the schema level so that a missing or
    blank value is reported by the service as a 400 with a readable
    message instead of a generic validation failure.
    """

    username: Optional[str] = Field(None, examples=["alice"])


class UserRead(BaseModel):
    """A persisted user."""

    id: str = Field(..., examples=["5f2b8e0c9d1a4b7e8c3f6a21"])
    username: str

    model_config = {
        "from_attributes": True,
    }
