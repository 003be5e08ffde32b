"""Order storage"""

import logging
from decimal import Decimal
from typing import Optional

from ..core.errors import ValidationError
from ..models.cart import CartLine
from ..models.checkout import Order, OrderLine, OrderStatus
from .query import Table

logger = logging.getLogger(__name__)


class OrderDatabase:
    """Order headers and their lines"""

    def __init__(self, orders: Optional[Table] = None, items: Optional[Table] = None):
        self.orders = orders or Table("orders")
        self.items = items or Table("order_items")

    def create_order(self, user_id: str, lines: list[CartLine], total: Decimal) -> Order:
        """
        Create an order header and its lines together.

        Prices are copied from the cart lines, so later catalog changes
        never alter a placed order. If any line fails to insert, the rows
        written so far are removed again.
        """
        if not lines:
            raise ValidationError("Cart is empty")
        if total < 0:
            raise ValidationError("Order total must not be negative")
        for line in lines:
            if line.quantity < 1:
                raise ValidationError(f"Invalid quantity for {line.product.name}")

        header = self.orders.insert({
            "user_id": user_id,
            "total": total,
            "status": OrderStatus.PENDING.value,
        })

        written: list[str] = []
        try:
            for line in lines:
                row = self.items.insert({
                    "order_id": header["id"],
                    "product_id": line.product_id,
                    "product_name": line.product.name,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                })
                written.append(row["id"])
        except Exception:
            logger.error(f"Order {header['id']} failed while writing lines, rolling back")
            for row_id in written:
                self.items.delete(row_id)
            self.orders.delete(header["id"])
            raise

        return self.get_order(header["id"])

    def get_order(self, order_id: str, user_id: Optional[str] = None) -> Optional[Order]:
        """Get an order by ID, optionally restricted to its owner"""
        header = self.orders.get(order_id)
        if not header:
            return None
        if user_id is not None and header["user_id"] != user_id:
            return None
        return Order(items=self.get_items(order_id), **header)

    def get_items(self, order_id: str) -> list[OrderLine]:
        return [OrderLine(**row) for row in self.items.select(order_id=order_id)]

    def list_orders(self, user_id: str, limit: int = 50) -> list[Order]:
        """List a user's orders, newest first"""
        orders = [
            Order(items=self.get_items(row["id"]), **row)
            for row in self.orders.select(user_id=user_id)
        ]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]


# Singleton instance
order_db = OrderDatabase()
