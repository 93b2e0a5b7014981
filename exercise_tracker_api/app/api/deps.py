"""
FastAPI dependencies shared by the routers.
"""

from fastapi import Request

from exercise_tracker_api.app.services.user_service import UserService


def get_user_service(request: Request) -> UserService:
    """Return the ``UserService`` built by ``create_app``."""
    return request.app.state.user_service
