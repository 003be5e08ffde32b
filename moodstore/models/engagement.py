"""Reactions, reviews, favorites and trending mood models"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


# Fixed reaction palette, in display order
REACTION_EMOJIS = ["❤️", "🔥", "😍", "👍", "🤯"]


class ReactionCount(BaseModel):
    emoji: str
    count: int = 0
    user_reacted: bool = False


class ProductReactions(BaseModel):
    """Reaction counts for one product, one entry per palette emoji"""
    product_id: str
    reactions: list[ReactionCount]
    total: int = 0


class ReactionRequest(BaseModel):
    emoji: str


class ReviewCreate(BaseModel):
    """New review from the signed-in user"""
    rating: int = Field(default=5, ge=1, le=5)
    comment: Optional[str] = None


class Review(BaseModel):
    """Product review joined with the reviewer's profile"""
    id: str
    user_id: str
    product_id: str
    rating: int = Field(ge=1, le=5)
    comment: str
    helpful_count: int = 0
    created_at: datetime
    reviewer_name: Optional[str] = None
    reviewer_avatar_url: Optional[str] = None
    marked_helpful: bool = False


class HelpfulResponse(BaseModel):
    review_id: str
    helpful: bool
    helpful_count: int


class FavoriteResponse(BaseModel):
    product_id: str
    favorite: bool


class TrendingMood(BaseModel):
    mood: str
    count: int
    emoji: Optional[str] = None
