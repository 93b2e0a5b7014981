"""
Top‑level router for version 1 of the API.

Aggregates the domain routers under one prefix; ``main`` mounts it at
``/api/v1``.
"""

from fastapi import APIRouter

from .endpoints import users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
