"""Customer profile models"""

from pydantic import BaseModel
from typing import Optional


class CustomerProfile(BaseModel):
    """Profile row; ``mood_preferences`` maps mood name to a counter"""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    mood_preferences: dict[str, int] = {}


class ProfileUpdate(BaseModel):
    """Editable profile fields"""
    full_name: Optional[str] = None
    username: Optional[str] = None
    # Public URL returned by the file storage after an avatar upload
    avatar_url: Optional[str] = None
