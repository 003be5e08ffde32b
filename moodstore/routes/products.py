"""Product API routes"""

from typing import Optional
from fastapi import APIRouter, Query

from ..core.errors import NotFoundError
from ..models.product import ProductView, ProductSearchResponse
from ..database.products import product_db

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductSearchResponse)
async def search_products(
    query: Optional[str] = Query(None, description="Search query"),
    mood: Optional[str] = Query(None, description="Filter by mood tag"),
    category: Optional[str] = Query(None, description="Filter by category"),
    in_stock_only: bool = Query(False, description="Only show in-stock items"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
):
    """Browse the catalog, typically filtered by the shopper's mood"""
    products, total = product_db.search_products(
        query=query,
        mood=mood,
        category=category,
        in_stock_only=in_stock_only,
        limit=limit,
        offset=offset,
    )

    return ProductSearchResponse(
        products=products,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/moods", response_model=list[str])
async def list_moods():
    """List moods used in the catalog"""
    return product_db.list_moods()


@router.get("/{product_id}", response_model=ProductView)
async def get_product(product_id: str):
    """Get a product by ID"""
    product = product_db.get_product(product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


@router.get("/{product_id}/related", response_model=list[ProductView])
async def get_related_products(product_id: str, limit: int = Query(4, ge=1, le=20)):
    """Products from the same category, then ones sharing a mood"""
    product = product_db.get_product(product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product_db.related_products(product, limit=limit)
