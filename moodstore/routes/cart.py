"""Cart API routes.

These are the remote cart rows the client-side cart manager syncs with.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Header

from ..core.errors import NotFoundError, ValidationError
from ..models.cart import (
    CartLine,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartResponse,
)
from ..database.carts import cart_db
from ..database.products import product_db
from ..security.auth import SessionUser, require_user

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def get_client_origin(x_client_id: Optional[str] = Header(None)) -> Optional[str]:
    """Writer id forwarded to the change feed so clients can skip their own echoes"""
    return x_client_id


def _response(lines: list[CartLine], message: Optional[str] = None) -> CartResponse:
    return CartResponse(
        items=lines,
        subtotal=cart_db.subtotal(lines),
        count=sum(line.quantity for line in lines),
        message=message,
    )


@router.get("", response_model=CartResponse)
async def get_cart(user: SessionUser = Depends(require_user)):
    """Get the signed-in user's cart"""
    return _response(cart_db.get_cart(user.user_id))


@router.post("/items", response_model=CartLine)
async def add_to_cart(
    request: AddToCartRequest,
    user: SessionUser = Depends(require_user),
    origin: Optional[str] = Depends(get_client_origin),
):
    """Add a product, merging with an existing line for the same product"""
    product = product_db.get_product(request.product_id)
    if not product:
        raise NotFoundError("Product not found")

    if not product.in_stock:
        raise ValidationError(f"{product.name} is out of stock")

    return cart_db.add_item(user.user_id, product.id, request.quantity, origin=origin)


@router.put("/items/{line_id}", response_model=CartLine)
async def update_cart_item(
    line_id: str,
    request: UpdateCartItemRequest,
    user: SessionUser = Depends(require_user),
    origin: Optional[str] = Depends(get_client_origin),
):
    """Set a line's quantity"""
    line = cart_db.update_quantity(user.user_id, line_id, request.quantity, origin=origin)
    if not line:
        raise NotFoundError("Item not in cart")
    return line


@router.delete("/items/{line_id}", response_model=CartResponse)
async def remove_from_cart(
    line_id: str,
    user: SessionUser = Depends(require_user),
    origin: Optional[str] = Depends(get_client_origin),
):
    """Remove a line; removing an unknown line is not an error"""
    removed = cart_db.remove_item(user.user_id, line_id, origin=origin)
    return _response(
        cart_db.get_cart(user.user_id),
        message="Item removed" if removed else "Item not in cart",
    )


@router.delete("", response_model=CartResponse)
async def clear_cart(
    user: SessionUser = Depends(require_user),
    origin: Optional[str] = Depends(get_client_origin),
):
    """Clear all items from cart"""
    cart_db.clear_cart(user.user_id, origin=origin)
    return _response([], message="Cart cleared")
