"""Checkout and order history routes"""

import logging
from decimal import Decimal
from fastapi import APIRouter, BackgroundTasks, Depends, Query

from ..core.config import settings
from ..core.errors import NotFoundError, ValidationError
from ..models.checkout import (
    CheckoutRequest,
    CheckoutResponse,
    Order,
    ShippingMethod,
)
from ..database.carts import cart_db
from ..database.orders import order_db
from ..database.products import product_db
from ..security.auth import SessionUser, require_user
from .invoices import email_invoice_quietly

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Checkout"])


def shipping_cost(method: ShippingMethod) -> Decimal:
    if method == ShippingMethod.EXPRESS:
        return Decimal(str(settings.express_shipping_fee))
    return Decimal("0")


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    background_tasks: BackgroundTasks,
    user: SessionUser = Depends(require_user),
):
    """
    Place an order from the user's cart.

    The order header and lines are written together, inventory is
    decremented and the cart rows are cleared. The invoice email goes out
    in the background when SMTP is configured.
    """
    missing = request.missing_fields()
    if missing:
        raise ValidationError(f"Please fill in all required fields: {', '.join(missing)}")

    lines = cart_db.get_cart(user.user_id)
    if not lines:
        raise ValidationError("Cart is empty")

    # Check stock availability
    for line in lines:
        product = product_db.get_product(line.product_id)
        if not product or product.inventory < line.quantity:
            raise ValidationError(f"Insufficient stock for {line.product.name}")

    total = cart_db.subtotal(lines) + shipping_cost(request.shipping_method)
    order = order_db.create_order(user.user_id, lines, total)

    for line in lines:
        product_db.update_stock(line.product_id, -line.quantity)

    cart_db.clear_cart(user.user_id)

    invoice_queued = settings.smtp_configured
    if invoice_queued:
        background_tasks.add_task(email_invoice_quietly, order.id, user)

    logger.info(f"Order {order.id} created for {user.user_id}: ${order.total}")

    return CheckoutResponse(success=True, order=order, invoice_queued=invoice_queued)


@router.get("/orders", response_model=list[Order])
async def list_orders(
    limit: int = Query(50, ge=1, le=200),
    user: SessionUser = Depends(require_user),
):
    """Order history, newest first"""
    return order_db.list_orders(user.user_id, limit=limit)


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(order_id: str, user: SessionUser = Depends(require_user)):
    """Get order details"""
    order = order_db.get_order(order_id, user_id=user.user_id)
    if not order:
        raise NotFoundError("Order not found")
    return order
