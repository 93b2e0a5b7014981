"""
Pydantic models for exercises and exercise logs.

Request fields are loosely typed on purpose: ``duration`` may arrive as
a number or a numeric string, and the service decides what is valid.
All ``date`` fields in responses are human‑readable strings such as
``"Fri Jan 05 2024"``.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr


class ExerciseCreate(BaseModel):
    description: Optional[str] = Field(None, examples=["run"])
    # Strict members keep JSON true/false from turning into 1/0.
    duration: Optional[Union[StrictInt, StrictFloat, StrictStr, StrictBool]] = Field(None, examples=[30])
    date: Optional[str] = Field(None, examples=["2024-01-05"], description="YYYY-MM-DD; defaults to today (UTC)")


class ExerciseRead(BaseModel):
    """An exercise as returned after it is recorded, with its owner."""

    id: str
    username: str
    date: str
    duration: int
    description: str


class LogEntry(BaseModel):
    description: str
    duration: int
    date: str


class ExerciseLog(BaseModel):
    """A user's filtered exercise log.

    ``count`` is the number of exercises matching the date filters,
    regardless of how many entries ``limit`` let into ``log``.
    """

    id: str
    username: str
    count: int
    log: List[LogEntry]
