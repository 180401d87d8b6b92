"""Authentication endpoints for profile registration and management."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import CurrentIdentity, get_user_service
from app.schemas.user import (
    UserDetailResponse,
    UserEnvelope,
    UserRegister,
    UserResponse,
    UserUpdate,
)
from app.services.user_service import UserService

router = APIRouter()

Users = Annotated[UserService, Depends(get_user_service)]


@router.post("/register", response_model=UserEnvelope)
async def register(
    user_data: UserRegister,
    identity: CurrentIdentity,
    users: Users,
) -> UserEnvelope:
    """Create or refresh the caller's profile."""
    profile = await users.register(identity, user_data)
    return UserEnvelope(user=UserResponse.model_validate(profile))


@router.get("/me", response_model=UserDetailResponse)
async def get_me(
    identity: CurrentIdentity,
    users: Users,
) -> UserDetailResponse:
    """Get current user's profile."""
    profile = await users.get_profile(identity.uid)
    return UserDetailResponse(user=UserResponse.model_validate(profile))


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    updates: UserUpdate,
    identity: CurrentIdentity,
    users: Users,
) -> UserEnvelope:
    """Update current user's profile."""
    profile = await users.update_profile(identity.uid, updates)
    return UserEnvelope(user=UserResponse.model_validate(profile))
