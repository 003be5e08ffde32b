"""Wishlist"""

from typing import Optional

from ..models.product import ProductView
from .products import ProductDatabase, product_db
from .query import Table


class FavoritesDatabase:
    """Favorite products per user, at most one row per product"""

    def __init__(self, products: ProductDatabase, table: Optional[Table] = None):
        self.products = products
        self.table = table or Table("user_favorites")

    def is_favorite(self, user_id: str, product_id: str) -> bool:
        return self.table.first(user_id=user_id, product_id=product_id) is not None

    def add(self, user_id: str, product_id: str) -> None:
        if not self.is_favorite(user_id, product_id):
            self.table.insert({"user_id": user_id, "product_id": product_id})

    def remove(self, user_id: str, product_id: str) -> bool:
        return self.table.delete_where(user_id=user_id, product_id=product_id) > 0

    def list_favorites(self, user_id: str) -> list[ProductView]:
        """Favorite products in the order they were added"""
        products = [self.products.get_product(row["product_id"]) for row in self.table.select(user_id=user_id)]
        return [p for p in products if p is not None]


# Singleton instance
favorites_db = FavoritesDatabase(product_db)
