"""Profile and development sign-in routes"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..core.errors import ValidationError
from ..database.profiles import profile_db
from ..models.profile import CustomerProfile, ProfileUpdate
from ..security.auth import SessionUser, create_access_token, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Profile"])


class TokenRequest(BaseModel):
    """Development sign-in; production tokens come from the auth provider"""
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/auth/token", response_model=TokenResponse)
async def issue_token(request: TokenRequest):
    """Issue an access token and create the profile on first sign-in"""
    if not request.user_id.strip():
        raise ValidationError("user_id is required")

    profile_db.ensure_profile(request.user_id, email=request.email, full_name=request.full_name)
    logger.info(f"Issued development token for {request.user_id}")
    return TokenResponse(access_token=create_access_token(request.user_id, request.email))


@router.get("/profile", response_model=CustomerProfile)
async def get_profile(user: SessionUser = Depends(require_user)):
    """The signed-in user's profile"""
    return profile_db.ensure_profile(user.user_id, email=user.email)


@router.put("/profile", response_model=CustomerProfile)
async def update_profile(update: ProfileUpdate, user: SessionUser = Depends(require_user)):
    """Update name, username or avatar URL"""
    profile_db.ensure_profile(user.user_id, email=user.email)
    return profile_db.update_profile(user.user_id, update)
