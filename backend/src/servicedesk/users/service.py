"""User profile lookup.

Orders are placed by an authenticated principal whose id is the profile's
``auth_id``; every lifecycle operation resolves that owner reference to a
profile before touching orders.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models.user_profile import UserProfile

logger = logging.getLogger(__name__)


class UserProfileRepository:
    """Read/write access to user profiles."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_owner_ref(self, owner_ref) -> Optional[UserProfile]:
        """Resolve an owner reference (auth principal id) to a profile.

        Returns:
            UserProfile or None if no profile exists
        """
        return self.db.query(UserProfile).filter(
            UserProfile.auth_id == str(owner_ref)
        ).first()

    def create_profile(self, auth_id, **fields) -> UserProfile:
        """Create a profile for an authenticated principal."""
        profile = UserProfile(auth_id=str(auth_id), **fields)
        self.db.add(profile)
        self.db.flush()
        logger.info("Created user profile", extra={"user_id": profile.id})
        return profile
