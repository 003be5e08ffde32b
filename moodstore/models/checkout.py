"""Checkout and order models"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


REQUIRED_CHECKOUT_FIELDS = ("name", "email", "address", "city", "state", "zip")


class OrderStatus(str, Enum):
    """Orders are created pending; later transitions belong to fulfilment"""
    PENDING = "pending"


class ShippingMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"


class CheckoutRequest(BaseModel):
    """Shipping details submitted at checkout.

    Fields are optional at the schema level so that missing ones can be
    reported together instead of one validation error at a time.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    shipping_method: ShippingMethod = ShippingMethod.STANDARD

    def missing_fields(self) -> list[str]:
        return [f for f in REQUIRED_CHECKOUT_FIELDS if not getattr(self, f)]


class OrderLine(BaseModel):
    """Item in an order, priced at purchase time"""
    id: str
    order_id: str
    product_id: str
    product_name: str
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """Placed order"""
    id: str
    user_id: str
    created_at: datetime
    total: Decimal = Field(ge=0)
    status: OrderStatus = OrderStatus.PENDING
    items: list[OrderLine] = []


class CheckoutResponse(BaseModel):
    """Response from checkout"""
    success: bool
    order: Optional[Order] = None
    invoice_queued: bool = False
