"""Server-side cart rows"""

from decimal import Decimal
from typing import Optional

from ..models.cart import CartLine
from .products import ProductDatabase, product_db
from .query import Table


class CartDatabase:
    """Cart rows keyed by user, one row per product"""

    def __init__(self, products: ProductDatabase, table: Optional[Table] = None):
        self.products = products
        self.table = table or Table("cart_items")

    def _to_line(self, row: dict) -> Optional[CartLine]:
        product = self.products.get_product(row["product_id"])
        if not product:
            return None
        return CartLine(
            id=row["id"],
            user_id=row["user_id"],
            product_id=row["product_id"],
            quantity=row["quantity"],
            unit_price=product.price,
            product=product,
            created_at=row["created_at"],
        )

    def get_cart(self, user_id: str) -> list[CartLine]:
        """Cart rows for a user joined with their products"""
        lines = [self._to_line(row) for row in self.table.select(user_id=user_id)]
        # Rows pointing at products that left the catalog are skipped
        return [line for line in lines if line is not None]

    def get_line(self, user_id: str, line_id: str) -> Optional[CartLine]:
        row = self.table.get(line_id)
        if not row or row["user_id"] != user_id:
            return None
        return self._to_line(row)

    def add_item(
        self,
        user_id: str,
        product_id: str,
        quantity: int = 1,
        origin: Optional[str] = None,
    ) -> Optional[CartLine]:
        """
        Insert a row, or increment the quantity of the user's existing row.

        Returns None without writing anything if the product is unknown.
        """
        if not self.products.get_product(product_id):
            return None

        existing = self.table.first(user_id=user_id, product_id=product_id)

        if existing:
            row = self.table.update(
                existing["id"],
                {"quantity": existing["quantity"] + quantity},
                origin=origin,
            )
        else:
            row = self.table.insert(
                {"user_id": user_id, "product_id": product_id, "quantity": quantity},
                origin=origin,
            )

        return self._to_line(row)

    def update_quantity(
        self,
        user_id: str,
        line_id: str,
        quantity: int,
        origin: Optional[str] = None,
    ) -> Optional[CartLine]:
        """Set the quantity of a row owned by the user"""
        if not self.get_line(user_id, line_id):
            return None
        row = self.table.update(line_id, {"quantity": quantity}, origin=origin)
        return self._to_line(row)

    def remove_item(self, user_id: str, line_id: str, origin: Optional[str] = None) -> bool:
        """Delete a row owned by the user"""
        if not self.get_line(user_id, line_id):
            return False
        return self.table.delete(line_id, origin=origin)

    def clear_cart(self, user_id: str, origin: Optional[str] = None) -> int:
        """Delete all of the user's rows"""
        return self.table.delete_where(origin=origin, user_id=user_id)

    @staticmethod
    def subtotal(lines: list[CartLine]) -> Decimal:
        return sum((line.line_total for line in lines), Decimal("0"))


# Singleton instance
cart_db = CartDatabase(product_db)
