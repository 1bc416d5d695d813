"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from notekeeper.backend.api.v1.endpoints import notes, preferences

router = APIRouter()

router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(preferences.router, prefix="/preferences", tags=["preferences"])
