"""User profile endpoints: interactions, preferences, derived interests, status."""

from fastapi import APIRouter

from ..models import (
    InteractionRequest,
    InteractionStatusResponse,
    PreferencesResponse,
    ProfileResponse,
    UpdatePreferencesRequest,
)
from ..state import get_service

router = APIRouter()


def _profile_response(profile) -> ProfileResponse:
    return ProfileResponse(
        user_id=profile.user_id,
        preferences=profile.preferences,
        interactions=profile.interactions,
    )


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: str):
    """Stored profile, or the defaults for a user seen for the first time."""
    return _profile_response(await get_service().get_profile(user_id))


@router.post("/{user_id}/interactions", response_model=ProfileResponse)
async def record_interaction(user_id: str, request: InteractionRequest):
    profile = await get_service().record_interaction(user_id, request.item_id, request.kind)
    return _profile_response(profile)


@router.delete("/{user_id}/interactions/{kind}/{item_id}", response_model=ProfileResponse)
async def remove_interaction(user_id: str, kind: str, item_id: str):
    profile = await get_service().remove_interaction(user_id, item_id, kind)
    return _profile_response(profile)


@router.patch("/{user_id}/preferences", response_model=PreferencesResponse)
async def update_preferences(user_id: str, request: UpdatePreferencesRequest):
    preferences = await get_service().update_preferences(user_id, request.updates())
    return PreferencesResponse(user_id=user_id, preferences=preferences)


@router.post("/{user_id}/derive-interests", response_model=PreferencesResponse)
async def derive_interests(user_id: str):
    preferences = await get_service().derive_interests(user_id)
    return PreferencesResponse(user_id=user_id, preferences=preferences)


@router.get("/{user_id}/status/{item_id}", response_model=InteractionStatusResponse)
async def interaction_status(user_id: str, item_id: str):
    status = await get_service().interaction_status(user_id, item_id)
    return InteractionStatusResponse(user_id=user_id, item_id=item_id, **status)
