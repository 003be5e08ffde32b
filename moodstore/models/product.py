"""Product models for the mood catalog"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class MoodTag(str, Enum):
    """Canonical moods, in picker order.

    The declaration order is the iteration order used to break ties when
    scoring the mood quiz, so new members go at the end.
    """
    TIRED = "Tired"
    CELEBRATING = "Celebrating"
    CHILL = "Chill"
    HAPPY = "Happy"
    ENERGETIC = "Energetic"
    FOCUSED = "Focused"
    RELAXED = "Relaxed"
    CURIOUS = "Curious"


MOOD_EMOJI = {
    MoodTag.TIRED: "😴",
    MoodTag.CELEBRATING: "🎉",
    MoodTag.CHILL: "🌱",
    MoodTag.HAPPY: "😊",
    MoodTag.ENERGETIC: "💪",
    MoodTag.FOCUSED: "🧠",
    MoodTag.RELAXED: "😌",
    MoodTag.CURIOUS: "🤔",
}


def canonical_mood(value: str) -> Optional[MoodTag]:
    """Match a free-form mood string against the canonical set (case-insensitive)"""
    lowered = value.strip().lower()
    for mood in MoodTag:
        if mood.value.lower() == lowered:
            return mood
    return None


def mood_emoji(value: str) -> Optional[str]:
    mood = canonical_mood(value)
    return MOOD_EMOJI[mood] if mood else None


class ProductView(BaseModel):
    """Read-only projection of a catalog product"""
    id: str
    name: str
    description: str = ""
    price: Decimal = Field(ge=0)
    image_url: Optional[str] = None
    # Free-form strings; catalog rows may carry moods outside MoodTag
    moods: list[str] = []
    inventory: int = Field(ge=0, default=0)
    category: str

    class Config:
        from_attributes = True

    @property
    def in_stock(self) -> bool:
        return self.inventory > 0


class ProductSearchResponse(BaseModel):
    """Response from product search"""
    products: list[ProductView]
    total: int
    limit: int
    offset: int
