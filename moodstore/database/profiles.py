"""Customer profiles"""

from typing import Optional

from ..models.profile import CustomerProfile, ProfileUpdate
from .query import Table


class ProfileDatabase:
    """Profile rows keyed by user id"""

    def __init__(self, table: Optional[Table] = None):
        self.table = table or Table("profiles")

    def get_profile(self, user_id: str) -> Optional[CustomerProfile]:
        row = self.table.get(user_id)
        return CustomerProfile(**row) if row else None

    def ensure_profile(
        self,
        user_id: str,
        email: Optional[str] = None,
        full_name: Optional[str] = None,
    ) -> CustomerProfile:
        """Create the profile on first sign-in"""
        profile = self.get_profile(user_id)
        if profile:
            if email and profile.email != email:
                self.table.update(user_id, {"email": email})
                profile = self.get_profile(user_id)
            return profile

        self.table.insert({
            "id": user_id,
            "email": email,
            "full_name": full_name,
            "mood_preferences": {},
        })
        return self.get_profile(user_id)

    def update_profile(self, user_id: str, update: ProfileUpdate) -> Optional[CustomerProfile]:
        values = update.model_dump(exclude_unset=True)
        if not self.table.update(user_id, values):
            return None
        return self.get_profile(user_id)

    def get_mood_preferences(self, user_id: str) -> dict[str, int]:
        profile = self.get_profile(user_id)
        return dict(profile.mood_preferences) if profile else {}

    def set_mood_preferences(self, user_id: str, preferences: dict[str, int]) -> None:
        self.table.update(user_id, {"mood_preferences": preferences})

    def all_mood_preferences(self) -> list[dict[str, int]]:
        """Preference counters of every profile"""
        return [dict(row.get("mood_preferences") or {}) for row in self.table.select()]


# Singleton instance
profile_db = ProfileDatabase()
