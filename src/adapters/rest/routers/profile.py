"""Profile endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from factory import ServiceFactory
from adapters.rest.dependencies import get_factory
from adapters.rest.schemas import AvatarBody, ProfileBody

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
def get_profile(factory: ServiceFactory = Depends(get_factory)):
    profile = factory.create_profile_service().get_profile()
    if profile is None:
        raise HTTPException(status_code=404, detail="No profile yet, onboarding required")
    return profile.to_dict()


@router.put("")
def save_profile(
    data: ProfileBody,
    factory: ServiceFactory = Depends(get_factory),
):
    """Replace the profile. The join date is kept unless one is sent."""
    service = factory.create_profile_service()
    current = service.get_profile()
    joined = current.joined_date if current else datetime.now().isoformat()
    profile = data.to_profile(joined)
    service.save_profile(profile)
    return profile.to_dict()


@router.patch("/avatar")
def update_avatar(
    data: AvatarBody,
    factory: ServiceFactory = Depends(get_factory),
):
    updated = factory.create_profile_service().update_avatar(data.avatar)
    if updated is None:
        raise HTTPException(status_code=404, detail="No profile yet, onboarding required")
    return updated.to_dict()
