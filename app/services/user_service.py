"""User profile service."""

import logging
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.core.exceptions import NotFoundError
from app.core.security import Identity
from app.models.user import UserProfile
from app.schemas.user import UserRegister, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Create and update user profiles keyed by identity uid."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def register(self, identity: Identity, data: UserRegister) -> UserProfile:
        """Create the caller's profile, or refresh it if it already exists.

        The role is fixed by the first registration.
        """
        now = datetime.now(UTC)
        async with self._session_factory() as db:
            profile = await db.get(UserProfile, identity.uid)
            if profile is None:
                profile = UserProfile(
                    uid=identity.uid,
                    role=data.role.value,
                    name=data.name,
                    created_at=now,
                )
                db.add(profile)
                logger.info(f"Registered {data.role.value} profile {identity.uid}")
            elif profile.role != data.role.value:
                logger.warning(
                    f"Ignoring role change {profile.role} → {data.role.value} for {identity.uid}"
                )

            profile.name = data.name
            profile.bio = data.bio or ""
            profile.location = data.location
            profile.email = identity.email
            profile.phone = identity.phone_number
            profile.updated_at = now
            await db.commit()
        return profile

    async def get_profile(self, uid: str) -> UserProfile:
        async with self._session_factory() as db:
            profile = await db.get(UserProfile, uid)
        if not profile:
            raise NotFoundError("Profile")
        return profile

    async def update_profile(self, uid: str, updates: UserUpdate) -> UserProfile:
        update_data = updates.model_dump(exclude_unset=True)
        if update_data.get("name") is None:
            update_data.pop("name", None)
        if "bio" in update_data and update_data["bio"] is None:
            update_data["bio"] = ""

        async with self._session_factory() as db:
            profile = await db.get(UserProfile, uid)
            if not profile:
                raise NotFoundError("Profile")

            for field, value in update_data.items():
                setattr(profile, field, value)
            profile.updated_at = datetime.now(UTC)
            await db.commit()
        return profile
