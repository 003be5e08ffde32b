"""
Invoice PDF rendering.

Turns an already-fetched order, its lines and the customer's profile into
a one-or-more page PDF held in memory. The layout is fixed: column
x-offsets are constants and do not depend on content width.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from io import BytesIO
from typing import Optional

from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from ..core.errors import RenderError
from ..models.checkout import Order

logger = logging.getLogger(__name__)

MARGIN = 50

# Table columns
ITEM_X = 50
DESCRIPTION_X = 150
QUANTITY_X = 350
PRICE_X = 400
TOTAL_X = 450
ITEM_WIDTH = 90

DESCRIPTION_PLACEHOLDER = "Product"
CUSTOMER_FALLBACK = "Customer"

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


@dataclass
class InvoiceLine:
    """Order line joined with the product name"""
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class InvoiceCustomer:
    full_name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class InvoiceData:
    """Everything needed to draw one invoice"""
    order: Order
    customer: InvoiceCustomer
    lines: list[InvoiceLine] = field(default_factory=list)


def format_money(value, symbol: str = "$") -> str:
    """Fixed currency prefix, two decimals"""
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{symbol}{amount}"


def format_date(value: datetime) -> str:
    """Month/day/year without zero padding, e.g. 3/7/2025"""
    return f"{value.month}/{value.day}/{value.year}"


def invoice_filename(order_id: str) -> str:
    """Download filename, derived from the first 8 characters of the order id"""
    return f"invoice-{order_id[:8]}.pdf"


class _InvoiceCanvas:
    """Keeps the write cursor and breaks pages when the table runs out of room"""

    def __init__(self, buffer: BytesIO, title: str):
        self.pdf = canvas.Canvas(buffer, pagesize=letter, pageCompression=0, invariant=1)
        self.pdf.setTitle(title)
        self.width, self.height = letter
        self.y = self.height - MARGIN

    def move_down(self, amount: float) -> None:
        self.y -= amount

    def ensure_room(self, needed: float) -> bool:
        """Start a new page if ``needed`` points do not fit; True when a page was added"""
        if self.y - needed >= MARGIN:
            return False
        self.pdf.showPage()
        self.y = self.height - MARGIN
        return True

    def text(self, x: float, value: str, size: int = 10, bold: bool = False) -> None:
        self.pdf.setFont(FONT_BOLD if bold else FONT, size)
        self.pdf.drawString(x, self.y, value)

    def right(self, value: str, size: int = 10) -> None:
        self.pdf.setFont(FONT, size)
        self.pdf.drawRightString(self.width - MARGIN, self.y, value)

    def centered(self, value: str, size: int = 10) -> None:
        self.pdf.setFont(FONT, size)
        self.pdf.drawCentredString(self.width / 2, self.y, value)

    def finish(self) -> None:
        self.pdf.save()


def _draw_table_header(doc: _InvoiceCanvas) -> None:
    for x, label in (
        (ITEM_X, "Item"),
        (DESCRIPTION_X, "Description"),
        (QUANTITY_X, "Qty"),
        (PRICE_X, "Price"),
        (TOTAL_X, "Total"),
    ):
        doc.text(x, label, size=10, bold=True)
    doc.move_down(6)
    doc.pdf.line(ITEM_X, doc.y, doc.width - MARGIN, doc.y)
    doc.move_down(14)


def render_invoice(data: InvoiceData, store_name: str = "Mood Store", currency_symbol: str = "$") -> bytes:
    """
    Render an invoice to PDF bytes.

    The total printed is ``order.total`` as stored; it is not recomputed
    from the lines, even when the two disagree.

    Raises:
        RenderError: If the PDF could not be produced
    """
    order = data.order
    buffer = BytesIO()

    try:
        doc = _InvoiceCanvas(buffer, title=f"{store_name} Invoice {order.id}")

        # Title block
        doc.move_down(10)
        doc.centered(f"{store_name} Invoice", size=25)
        doc.move_down(30)
        doc.right(f"Invoice Number: {order.id}")
        doc.move_down(14)
        doc.right(f"Date: {format_date(order.created_at)}")
        doc.move_down(36)

        # Customer block
        doc.text(MARGIN, "Customer Information:", size=14)
        doc.move_down(16)
        doc.text(MARGIN, f"Name: {data.customer.full_name or CUSTOMER_FALLBACK}")
        doc.move_down(14)
        doc.text(MARGIN, f"Email: {data.customer.email or ''}")
        doc.move_down(36)

        # Items
        doc.text(MARGIN, "Order Items:", size=14)
        doc.move_down(24)
        _draw_table_header(doc)

        for line in data.lines:
            name_lines = simpleSplit(line.name, FONT, 10, ITEM_WIDTH) or [""]
            row_height = 12 * len(name_lines) + 8
            if doc.ensure_room(row_height):
                _draw_table_header(doc)

            row_top = doc.y
            for part in name_lines:
                doc.text(ITEM_X, part)
                doc.move_down(12)
            doc.y = row_top
            doc.text(DESCRIPTION_X, DESCRIPTION_PLACEHOLDER)
            doc.text(QUANTITY_X, str(line.quantity))
            doc.text(PRICE_X, format_money(line.unit_price, currency_symbol))
            doc.text(TOTAL_X, format_money(line.line_total, currency_symbol))
            doc.move_down(row_height)

        # Total
        doc.ensure_room(80)
        doc.move_down(6)
        doc.pdf.line(PRICE_X, doc.y + 10, doc.width - MARGIN, doc.y + 10)
        doc.text(PRICE_X, "Total:", size=12)
        doc.text(TOTAL_X, format_money(order.total, currency_symbol), size=12)

        # Footer
        doc.move_down(56)
        doc.centered(f"Thank you for shopping with {store_name}!")

        doc.finish()
    except Exception as e:
        logger.error(f"Failed to render invoice for order {order.id}: {e}")
        raise RenderError(f"Failed to render invoice: {e}") from e

    return buffer.getvalue()
