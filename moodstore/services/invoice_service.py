"""Invoice assembly: fetch everything first, then render"""

import logging
from typing import Optional

from ..core.config import settings
from ..core.errors import NotFoundError, ValidationError
from ..database import order_db, product_db, profile_db
from ..security.auth import SessionUser
from .invoice_renderer import InvoiceCustomer, InvoiceData, InvoiceLine, render_invoice

logger = logging.getLogger(__name__)


def load_invoice_data(order_id: Optional[str], user: SessionUser) -> InvoiceData:
    """
    Collect the order, its lines and the customer for an invoice.

    Raises:
        ValidationError: If no order id was given
        NotFoundError: If the order does not exist or belongs to someone else
    """
    if not order_id:
        raise ValidationError("Order ID is required")

    order = order_db.get_order(order_id, user_id=user.user_id)
    if not order:
        raise NotFoundError("Order not found")

    lines = []
    for item in order.items:
        product = product_db.get_product(item.product_id)
        lines.append(InvoiceLine(
            name=product.name if product else item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
        ))

    profile = profile_db.get_profile(user.user_id)
    customer = InvoiceCustomer(
        full_name=profile.full_name if profile else None,
        email=user.email or (profile.email if profile else None),
    )

    return InvoiceData(order=order, customer=customer, lines=lines)


def build_invoice(order_id: Optional[str], user: SessionUser) -> tuple[InvoiceData, bytes]:
    """Load and render an invoice; nothing is rendered if loading fails"""
    data = load_invoice_data(order_id, user)
    pdf = render_invoice(
        data,
        store_name=settings.store_name,
        currency_symbol=settings.currency_symbol,
    )
    logger.info(f"Rendered invoice for order {data.order.id} ({len(pdf)} bytes)")
    return data, pdf
