"""Product reactions and reviews"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from ..core.errors import NotFoundError
from ..database.products import product_db
from ..database.reactions import reaction_db
from ..database.reviews import review_db
from ..models.engagement import (
    HelpfulResponse,
    ProductReactions,
    ReactionRequest,
    Review,
    ReviewCreate,
)
from ..security.auth import SessionUser, optional_user, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Engagement"])


def _require_product(product_id: str) -> None:
    if not product_db.get_product(product_id):
        raise NotFoundError("Product not found")


# ==================== Reactions ====================

@router.get("/products/{product_id}/reactions", response_model=ProductReactions)
async def get_reactions(product_id: str, user: Optional[SessionUser] = Depends(optional_user)):
    """Reaction counts; signed-in callers also see which ones they gave"""
    _require_product(product_id)
    return reaction_db.get_reactions(product_id, user.user_id if user else None)


@router.post("/products/{product_id}/reactions", response_model=ProductReactions)
async def toggle_reaction(
    product_id: str,
    request: ReactionRequest,
    user: SessionUser = Depends(require_user),
):
    """Give a reaction, or take it back when given already"""
    _require_product(product_id)
    reacted = reaction_db.toggle(user.user_id, product_id, request.emoji)
    logger.debug(f"{user.user_id} {'added' if reacted else 'removed'} {request.emoji} on {product_id}")
    return reaction_db.get_reactions(product_id, user.user_id)


# ==================== Reviews ====================

@router.get("/products/{product_id}/reviews", response_model=list[Review])
async def list_reviews(product_id: str, user: Optional[SessionUser] = Depends(optional_user)):
    """Reviews of a product, newest first"""
    _require_product(product_id)
    return review_db.list_reviews(product_id, user.user_id if user else None)


@router.post("/products/{product_id}/reviews", response_model=Review)
async def add_review(
    product_id: str,
    request: ReviewCreate,
    user: SessionUser = Depends(require_user),
):
    """Review a product"""
    _require_product(product_id)
    review = review_db.add_review(user.user_id, product_id, request.rating, request.comment)
    logger.info(f"Review {review.id} added for {product_id} by {user.user_id}")
    return review


@router.post("/reviews/{review_id}/helpful", response_model=HelpfulResponse)
async def toggle_helpful(review_id: str, user: SessionUser = Depends(require_user)):
    """Mark a review helpful, or take the mark back"""
    helpful = review_db.toggle_helpful(user.user_id, review_id)
    if helpful is None:
        raise NotFoundError("Review not found")

    review = review_db.get_review(review_id)
    return HelpfulResponse(review_id=review_id, helpful=helpful, helpful_count=review.helpful_count)
