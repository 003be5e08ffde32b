"""Product reviews and helpful votes"""

from typing import Optional

from ..core.errors import ValidationError
from ..models.engagement import Review
from .profiles import ProfileDatabase, profile_db
from .query import Table


class ReviewDatabase:
    """Reviews per product, with one helpful vote per user and review"""

    def __init__(
        self,
        profiles: ProfileDatabase,
        reviews: Optional[Table] = None,
        votes: Optional[Table] = None,
    ):
        self.profiles = profiles
        self.reviews = reviews or Table("product_reviews")
        self.votes = votes or Table("helpful_reviews")

    def _to_review(self, row: dict, helpful_ids: frozenset = frozenset()) -> Review:
        profile = self.profiles.get_profile(row["user_id"])
        return Review(
            reviewer_name=profile.full_name if profile else None,
            reviewer_avatar_url=profile.avatar_url if profile else None,
            marked_helpful=row["id"] in helpful_ids,
            **row,
        )

    def helpful_review_ids(self, user_id: str) -> frozenset:
        return frozenset(row["review_id"] for row in self.votes.select(user_id=user_id))

    def list_reviews(self, product_id: str, user_id: Optional[str] = None) -> list[Review]:
        """Reviews of a product, newest first"""
        helpful_ids = self.helpful_review_ids(user_id) if user_id else frozenset()
        rows = list(enumerate(self.reviews.select(product_id=product_id)))
        # Insertion order breaks timestamp ties
        rows.sort(key=lambda pair: (pair[1]["created_at"], pair[0]), reverse=True)
        return [self._to_review(row, helpful_ids) for _, row in rows]

    def get_review(self, review_id: str) -> Optional[Review]:
        row = self.reviews.get(review_id)
        return self._to_review(row) if row else None

    def add_review(self, user_id: str, product_id: str, rating: int, comment: Optional[str]) -> Review:
        """
        Store a review.

        Raises:
            ValidationError: If the comment is empty or the rating is outside 1-5
        """
        if not comment or not comment.strip():
            raise ValidationError("Please enter a review comment")
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")

        row = self.reviews.insert({
            "user_id": user_id,
            "product_id": product_id,
            "rating": rating,
            "comment": comment.strip(),
            "helpful_count": 0,
        })
        return self._to_review(row)

    def toggle_helpful(self, user_id: str, review_id: str) -> Optional[bool]:
        """
        Mark a review helpful for the user, or take the mark back.

        Returns:
            True if now marked, False if unmarked, None if the review does not exist
        """
        row = self.reviews.get(review_id)
        if not row:
            return None

        vote = self.votes.first(user_id=user_id, review_id=review_id)
        if vote:
            self.votes.delete(vote["id"])
            self.reviews.update(review_id, {"helpful_count": max(0, row["helpful_count"] - 1)})
            return False

        self.votes.insert({"user_id": user_id, "review_id": review_id})
        self.reviews.update(review_id, {"helpful_count": row["helpful_count"] + 1})
        return True


# Singleton instance
review_db = ReviewDatabase(profile_db)
