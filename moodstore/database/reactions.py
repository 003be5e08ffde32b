"""Per-product emoji reactions"""

from typing import Optional

from ..core.errors import ValidationError
from ..models.engagement import REACTION_EMOJIS, ProductReactions, ReactionCount
from .query import Table


class ReactionDatabase:
    """
    Reaction counters per (product, emoji) plus the per-user marks behind them.

    A user holds at most one mark per emoji and product; toggling adds or
    removes it and moves the counter with it. Counters never drop below 0.
    """

    def __init__(self, counts: Optional[Table] = None, marks: Optional[Table] = None):
        self.counts = counts or Table("product_reactions")
        self.marks = marks or Table("user_reactions")

    def get_reactions(self, product_id: str, user_id: Optional[str] = None) -> ProductReactions:
        """Counts for every palette emoji, flagged with the user's own reactions"""
        counts = {row["emoji"]: row["count"] for row in self.counts.select(product_id=product_id)}
        mine = set()
        if user_id:
            mine = {row["emoji"] for row in self.marks.select(product_id=product_id, user_id=user_id)}

        reactions = [
            ReactionCount(emoji=emoji, count=counts.get(emoji, 0), user_reacted=emoji in mine)
            for emoji in REACTION_EMOJIS
        ]
        return ProductReactions(
            product_id=product_id,
            reactions=reactions,
            total=sum(r.count for r in reactions),
        )

    def _bump(self, product_id: str, emoji: str, amount: int) -> None:
        row = self.counts.first(product_id=product_id, emoji=emoji)
        if row:
            self.counts.update(row["id"], {"count": max(0, row["count"] + amount)})
        elif amount > 0:
            self.counts.insert({"product_id": product_id, "emoji": emoji, "count": amount})

    def toggle(self, user_id: str, product_id: str, emoji: str) -> bool:
        """
        Add the user's reaction, or take it back if already given.

        Returns:
            True if the user now reacts with ``emoji``

        Raises:
            ValidationError: If ``emoji`` is not in the palette
        """
        if emoji not in REACTION_EMOJIS:
            raise ValidationError(f"Unsupported reaction: {emoji}")

        mark = self.marks.first(user_id=user_id, product_id=product_id, emoji=emoji)
        if mark:
            self.marks.delete(mark["id"])
            self._bump(product_id, emoji, -1)
            return False

        self.marks.insert({"user_id": user_id, "product_id": product_id, "emoji": emoji})
        self._bump(product_id, emoji, 1)
        return True


# Singleton instance
reaction_db = ReactionDatabase()
