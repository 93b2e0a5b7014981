"""
Error types shared by the store, the service layer and the endpoints.

``ValidationError``, ``NotFound`` and ``DuplicateUsername`` describe
expected outcomes and carry messages that are safe to show to clients.
``StoreError`` covers every other persistence failure; its message is
logged but never returned to the client.
"""


class ExerciseTrackerError(Exception):
    """Base class for application errors."""


class ValidationError(ExerciseTrackerError):
    """Client input is missing or malformed."""


class NotFound(ExerciseTrackerError):
    """The referenced user does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class DuplicateUsername(ExerciseTrackerError):
    """A user with the same username already exists."""

    def __init__(self, username: str) -> None:
        super().__init__("Username already taken")
        self.username = username


class StoreError(ExerciseTrackerError):
    """Unclassified database failure."""
