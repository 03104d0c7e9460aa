"""
Profile Routes

POST /profiles              - Create or update a profile (keyed by auth provider id)
GET  /profiles/{profile_id} - Get a profile
"""

from fastapi import APIRouter

from app.services.opportunity_service import get_opportunity_service
from app.schemas.schemas import ERROR_RESPONSES, ProfileUpsert, ProfileResponse

router = APIRouter(prefix="/profiles", tags=["Profiles"], responses=ERROR_RESPONSES)


@router.post("", response_model=ProfileResponse)
def upsert_profile(profile: ProfileUpsert):
    """Upsert by id. Only the fields sent are updated."""
    fields = profile.model_dump(exclude_unset=True)
    return get_opportunity_service().upsert_profile(profile.id, fields)


@router.get("/{profile_id}", response_model=ProfileResponse)
def get_profile(profile_id: str):
    return get_opportunity_service().get_profile(profile_id)
