"""Wishlist routes"""

from fastapi import APIRouter, Depends

from ..core.errors import NotFoundError
from ..database.favorites import favorites_db
from ..database.products import product_db
from ..models.engagement import FavoriteResponse
from ..models.product import ProductView
from ..security.auth import SessionUser, require_user

router = APIRouter(prefix="/api/favorites", tags=["Favorites"])


@router.get("", response_model=list[ProductView])
async def list_favorites(user: SessionUser = Depends(require_user)):
    """The signed-in user's wishlist"""
    return favorites_db.list_favorites(user.user_id)


@router.get("/{product_id}", response_model=FavoriteResponse)
async def get_favorite(product_id: str, user: SessionUser = Depends(require_user)):
    """Whether a product is on the wishlist"""
    return FavoriteResponse(product_id=product_id, favorite=favorites_db.is_favorite(user.user_id, product_id))


@router.put("/{product_id}", response_model=FavoriteResponse)
async def add_favorite(product_id: str, user: SessionUser = Depends(require_user)):
    """Add a product to the wishlist; adding twice keeps one entry"""
    if not product_db.get_product(product_id):
        raise NotFoundError("Product not found")
    favorites_db.add(user.user_id, product_id)
    return FavoriteResponse(product_id=product_id, favorite=True)


@router.delete("/{product_id}", response_model=FavoriteResponse)
async def remove_favorite(product_id: str, user: SessionUser = Depends(require_user)):
    """Remove a product from the wishlist; removing an absent one is not an error"""
    favorites_db.remove(user.user_id, product_id)
    return FavoriteResponse(product_id=product_id, favorite=False)
