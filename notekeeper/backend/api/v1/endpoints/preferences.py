"""
Preferences API Endpoints.

Read-only access to the configured UI preference defaults.
"""

from fastapi import APIRouter

from notekeeper.backend.core.config import get_app_config
from notekeeper.backend.core.dependencies import RequestId
from notekeeper.backend.schemas.base import ApiResponse
from notekeeper.backend.schemas.note import PreferencesResponse

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[PreferencesResponse],
    summary="Get preference defaults",
    description="View mode, theme, and font defaults new notes are seeded with.",
)
async def get_preferences(request_id: RequestId) -> ApiResponse[PreferencesResponse]:
    """Return the configured preference defaults."""
    prefs = get_app_config().preferences
    return ApiResponse.wrap(
        PreferencesResponse.model_validate(prefs.model_dump()),
        request_id,
    )
