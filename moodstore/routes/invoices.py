"""Invoice download and email routes"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from ..core.errors import AuthorizationError, MoodStoreError, ValidationError
from ..security.auth import SessionUser, optional_user, require_user
from ..services.invoice_renderer import invoice_filename
from ..services.invoice_service import build_invoice
from ..services.mailer import mailer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Invoices"])


class InvoiceEmailRequest(BaseModel):
    orderId: Optional[str] = None


def _internal_error() -> JSONResponse:
    return JSONResponse({"error": "Failed to generate invoice"}, status_code=500)


async def email_invoice(order_id: str, user: SessionUser) -> None:
    """Render the invoice and mail it to the order's owner"""
    data, pdf = build_invoice(order_id, user)
    if not data.customer.email:
        raise ValidationError("No email address on file")
    await asyncio.to_thread(mailer.send_invoice, data.customer.email, data.order, pdf)


async def email_invoice_quietly(order_id: str, user: SessionUser) -> None:
    """Background variant used after checkout; a failure only gets logged"""
    try:
        await email_invoice(order_id, user)
    except Exception as e:
        logger.error(f"Could not email invoice for order {order_id}: {e}")


@router.get("/download-invoice")
async def download_invoice(
    order_id: Optional[str] = Query(None, alias="orderId"),
    user: Optional[SessionUser] = Depends(optional_user),
):
    """Download an order's invoice as a PDF"""
    if not order_id:
        raise ValidationError("Order ID is required")
    if not user:
        raise AuthorizationError("Unauthorized")

    try:
        _, pdf = build_invoice(order_id, user)
    except MoodStoreError as e:
        if e.status_code < 500:
            raise
        logger.error(f"Error generating invoice for {order_id}: {e}")
        return _internal_error()
    except Exception:
        logger.exception(f"Error generating invoice for {order_id}")
        return _internal_error()

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{invoice_filename(order_id)}"'},
    )


@router.post("/generate-invoice")
async def generate_invoice(
    request: InvoiceEmailRequest,
    user: SessionUser = Depends(require_user),
):
    """Email an order's invoice to the signed-in user"""
    if not request.orderId:
        raise ValidationError("Order ID is required")

    try:
        await email_invoice(request.orderId, user)
    except MoodStoreError as e:
        if e.status_code < 500:
            raise
        logger.error(f"Error emailing invoice for {request.orderId}: {e}")
        return _internal_error()
    except Exception:
        logger.exception(f"Error emailing invoice for {request.orderId}")
        return _internal_error()

    return {"success": True}
