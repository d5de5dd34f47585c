"""
application.services.profile - User profile and onboarding.

The profile is a singleton: its absence means onboarding has not been
completed yet. Saves replace it wholesale; the avatar is the only field
patched on its own.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from domain.entities import UserProfile
from domain.ports import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileService:
    """Manages the device's single user profile."""

    def __init__(self, profile_repo: ProfileRepository):
        self._profile_repo = profile_repo

    def get_profile(self) -> Optional[UserProfile]:
        return self._profile_repo.get_profile()

    def onboarding_required(self) -> bool:
        return self._profile_repo.get_profile() is None

    def complete_onboarding(
        self,
        name: str,
        migraine_type: str = "",
        age: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> UserProfile:
        """Create the profile, stamping the join date."""
        profile = UserProfile(
            name=name.strip(),
            age=age,
            migraine_type=migraine_type,
            joined_date=(now or datetime.now()).isoformat(),
        )
        self._profile_repo.save_profile(profile)
        logger.info("Onboarding completed for %s", profile.name)
        return profile

    def save_profile(self, profile: UserProfile) -> None:
        """Replace the stored profile with *profile*."""
        self._profile_repo.save_profile(profile)

    def update_avatar(self, avatar: Optional[str]) -> Optional[UserProfile]:
        """Set or clear the avatar. Returns None when there is no profile."""
        current = self._profile_repo.get_profile()
        if current is None:
            logger.debug("Avatar update skipped, no profile yet")
            return None
        updated = replace(current, avatar=avatar or None)
        self._profile_repo.save_profile(updated)
        return updated
