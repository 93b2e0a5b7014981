"""
User and exercise endpoints for API v1.

Handlers map service outcomes onto status codes: invalid input is 400,
an unknown user is 404 (raised as ``NotFound``, answered by the handler
in ``main``), a taken username is 409 and any other database
failure is 500 with a generic message.  Store failures are logged with
their traceback here and never echoed to the client.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from exercise_tracker_api.app.api.deps import get_user_service
from exercise_tracker_api.app.core.db import SQLITE_MAX_INTEGER
from exercise_tracker_api.app.core.exceptions import DuplicateUsername, NotFound, StoreError, ValidationError
from exercise_tracker_api.app.schemas.exercise import ExerciseCreate, ExerciseLog, ExerciseRead
from exercise_tracker_api.app.schemas.user import UserCreate, UserRead
from exercise_tracker_api.app.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[UserRead])
async def list_users(service: UserService = Depends(get_user_service)) -> List[UserRead]:
    """Return every user as ``{id, username}``."""
    try:
        return await service.list_users()
    except StoreError:
        logger.exception("Error fetching users")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database error fetching users")


@router.post("/", response_model=UserRead)
async def create_user(user: UserCreate, service: UserService = Depends(get_user_service)) -> UserRead:
    """Create a user.

    Answers 400 for a missing username and 409 if it is already taken.
    """
    try:
        return await service.create_user(user)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateUsername as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StoreError:
        logger.exception("Error creating user")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database error creating user")


@router.post("/{user_id}/exercises", response_model=ExerciseRead)
async def add_exercise(
    user_id: str,
    exercise: ExerciseCreate,
    service: UserService = Depends(get_user_service),
) -> ExerciseRead:
    """Record an exercise for a user.

    ``date`` defaults to today's UTC date.  The response echoes the
    user with the exercise and a readable date.
    """
    try:
        result = await service.add_exercise(user_id, exercise)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError:
        logger.exception("Error adding exercise for user %s", user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database error adding exercise")
    if result is None:
        raise NotFound(user_id)
    return result


@router.get("/{user_id}/logs", response_model=ExerciseLog)
async def get_user_log(
    user_id: str,
    date_from: Optional[str] = Query(None, alias="from", description="Inclusive lower bound, YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, alias="to", description="Inclusive upper bound, YYYY-MM-DD"),
    limit: Optional[int] = Query(None, ge=0, le=SQLITE_MAX_INTEGER, description="Maximum number of log entries"),
    service: UserService = Depends(get_user_service),
) -> ExerciseLog:
    """Return a user's exercise log, newest first.

    ``count`` is the number of exercises between ``from`` and ``to``;
    ``limit`` only shortens ``log``.
    """
    try:
        result = await service.get_user_log(user_id, date_from, date_to, limit)
    except StoreError:
        logger.exception("Error fetching logs for user %s", user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database error fetching user logs")
    if result is None:
        raise NotFound(user_id)
    return result
