"""
User Profile Routes

POST /users/profile - Create or update (upsert) the caller's profile
GET /users/profile/{clerk_user_id} - Get a profile
PUT /users/profile - Partial profile update
GET /users/profile/{clerk_user_id}/check-onboarding - Onboarding status
"""

from fastapi import APIRouter, Depends, Response

from placement_api.core.dependencies import get_profile_service
from placement_api.services.profile_service import ProfileService
from placement_api.schemas.schemas import OnboardingStatus, ProfileCreate, ProfileUpdate

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/profile", status_code=200)
async def upsert_profile(
    data: ProfileCreate,
    response: Response,
    profiles: ProfileService = Depends(get_profile_service),
):
    """
    Submit the onboarding profile. Creates it (201) on first submission,
    overwrites the supplied fields (200) afterwards.

    409 when the roll number belongs to another student.
    """
    profile, created = profiles.upsert_profile(data)
    if created:
        response.status_code = 201
    return profile


@router.get("/profile/{clerk_user_id}")
async def get_profile(clerk_user_id: str, profiles: ProfileService = Depends(get_profile_service)):
    """Get a student profile by identity id."""
    return profiles.get_profile(clerk_user_id)


@router.put("/profile")
async def update_profile(data: ProfileUpdate, profiles: ProfileService = Depends(get_profile_service)):
    """Update profile. Only provided fields are updated; document links must be Google Drive links."""
    return profiles.update_profile(data)


@router.get("/profile/{clerk_user_id}/check-onboarding", response_model=OnboardingStatus)
async def check_onboarding(clerk_user_id: str, profiles: ProfileService = Depends(get_profile_service)):
    """Whether the user has a profile and finished onboarding. Never 404s."""
    return profiles.check_onboarding(clerk_user_id)
