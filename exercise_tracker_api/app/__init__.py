"""
Application package initializer.

The project is split into a few small pieces: ``core`` holds settings,
logging, errors, date helpers and the SQLite store; ``schemas`` holds
the Pydantic payloads; ``services`` holds the user/exercise logic; and
``api/v1`` exposes the HTTP routes.
"""

from .main import app  # noqa: F401
