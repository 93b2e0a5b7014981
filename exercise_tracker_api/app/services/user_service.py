"""
Business logic for users and their exercise logs.

``UserService`` validates input, generates user ids and shapes the
rows returned by ``ExerciseStore`` into API schemas.  A missing user is
reported by returning ``None``; ``DuplicateUsername`` and
``StoreError`` from the store propagate unchanged.
"""

import logging
import re
import uuid
from typing import List, Optional, Union

from ..core import dates
from ..core.db import SQLITE_MAX_INTEGER, ExerciseStore
from ..core.exceptions import ValidationError
from ..schemas.exercise import ExerciseCreate, ExerciseLog, ExerciseRead, LogEntry
from ..schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)

USER_ID_LENGTH = 24

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def new_user_id() -> str:
    """Return a fresh 24‑character hex identifier."""
    return uuid.uuid4().hex[:USER_ID_LENGTH]


def _require_utf8(text: str, field: str) -> str:
    """Reject strings the database driver cannot encode (lone surrogates)."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValidationError(f"{field} must be valid UTF-8 text") from exc
    return text


def validate_username(data: UserCreate) -> str:
    username = (data.username or "").strip()
    if not username:
        raise ValidationError("Username is required")
    return _require_utf8(username, "Username")


def parse_duration(value: Union[int, float, str]) -> int:
    """Convert ``value`` to a positive whole number of minutes.

    Accepts ints, integral floats and strings of digits up to the
    largest value an SQLite INTEGER column holds.
    """
    if isinstance(value, bool):
        raise ValidationError("Duration must be a positive number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError("Duration must be a positive number")
        minutes = int(value)
    elif isinstance(value, int):
        minutes = value
    else:
        text = str(value).strip()
        if not _INTEGER_RE.match(text):
            raise ValidationError("Duration must be a positive number")
        if len(text.lstrip("+-").lstrip("0")) > len(str(SQLITE_MAX_INTEGER)):
            raise ValidationError("Duration is too large")
        minutes = int(text)
    if minutes <= 0:
        raise ValidationError("Duration must be a positive number")
    if minutes > SQLITE_MAX_INTEGER:
        raise ValidationError("Duration is too large")
    return minutes


def validate_exercise(data: ExerciseCreate) -> tuple[str, int, str]:
    """Check an exercise payload and return ``(description, duration, date)``.

    ``date`` comes back in the stored ``YYYY-MM-DD`` form.
    """
    description = (data.description or "").strip()
    duration = data.duration
    if isinstance(duration, str):
        duration = duration.strip()
    if not description or duration is None or duration == "":
        raise ValidationError("Description and duration are required")
    _require_utf8(description, "Description")
    return description, parse_duration(duration), dates.normalize_date(data.date)


class UserService:
    """Operations on users and exercises backed by an ``ExerciseStore``."""

    def __init__(self, store: ExerciseStore) -> None:
        self.store = store

    async def create_user(self, data: UserCreate) -> UserRead:
        """Create a user with a generated id.

        Raises ``ValidationError`` for a blank username and
        ``DuplicateUsername`` if it is already taken.
        """
        username = validate_username(data)
        row = self.store.create_user(new_user_id(), username)
        logger.info("Created user %s (%s)", row["id"], row["username"])
        return UserRead(**row)

    async def list_users(self) -> List[UserRead]:
        return [UserRead(**row) for row in self.store.list_users()]

    async def add_exercise(self, user_id: str, data: ExerciseCreate) -> Optional[ExerciseRead]:
        """Record an exercise for ``user_id``.

        Input is validated before the store is touched.  Returns
        ``None`` without writing anything if the user does not exist.
        """
        description, duration, date = validate_exercise(data)

        user = self.store.get_user(user_id)
        if user is None:
            return None

        exercise_id = self.store.insert_exercise(user["id"], description, duration, date)
        logger.debug("Added exercise %s for user %s", exercise_id, user["id"])
        return ExerciseRead(
            id=user["id"],
            username=user["username"],
            date=dates.display_date(date),
            duration=duration,
            description=description,
        )

    async def get_user_log(
        self,
        user_id: str,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Optional[ExerciseLog]:
        """Return the user's exercise log, newest first.

        ``date_from``/``date_to`` are inclusive ``YYYY-MM-DD`` bounds.
        ``count`` is the number of exercises inside the bounds; ``limit``
        caps only the entries in ``log``.  Returns ``None`` for an
        unknown user.
        """
        user = self.store.get_user(user_id)
        if user is None:
            return None

        total, rows = self.store.query_exercises(user_id, date_from, date_to, limit)
        log = [
            LogEntry(
                description=row["description"],
                duration=row["duration"],
                date=dates.display_date(row["date"]),
            )
            for row in rows
        ]
        return ExerciseLog(id=user["id"], username=user["username"], count=total, log=log)
