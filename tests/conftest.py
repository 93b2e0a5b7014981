# tests/conftest.py
import asyncio

import pytest
from fastapi.testclient import TestClient

from exercise_tracker_api.app.core.db import ExerciseStore
from exercise_tracker_api.app.main import create_app
from exercise_tracker_api.app.services.user_service import UserService


@pytest.fixture
def store(tmp_path):
    """A fresh, initialized SQLite store in a temporary file."""
    store = ExerciseStore(str(tmp_path / "exercise_tracker.db"))
    store.init_db()
    return store


@pytest.fixture
def service(store):
    return UserService(store)


@pytest.fixture
def run():
    """Run a service coroutine to completion."""
    return asyncio.run


@pytest.fixture
def client(store):
    """TestClient bound to an app serving the temporary store."""
    with TestClient(create_app(store)) as test_client:
        yield test_client
