"""Cart models shared by the store API and the cart client"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from .product import ProductView


class CartLine(BaseModel):
    """One product in a cart.

    ``unit_price`` is taken from the product when the line is built; the
    ``product`` snapshot is kept for display only.
    """
    id: str
    product_id: str
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)
    product: ProductView
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @classmethod
    def for_product(cls, line_id: str, product: ProductView, quantity: int = 1) -> "CartLine":
        """Build a line priced from the product snapshot"""
        return cls(
            id=line_id,
            product_id=product.id,
            quantity=quantity,
            unit_price=product.price,
            product=product,
        )


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    quantity: int = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity"""
    quantity: int = Field(gt=0)


class CartResponse(BaseModel):
    """Cart API response"""
    items: list[CartLine] = []
    subtotal: Decimal = Decimal("0")
    count: int = 0
    message: Optional[str] = None
