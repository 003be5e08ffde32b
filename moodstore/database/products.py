"""Mood-tagged product catalog"""

from decimal import Decimal
from typing import Optional

from ..models.product import ProductView
from .query import Table

# Seed catalog
PRODUCTS: list[dict] = [
    {
        "id": "9b1f6c1e-0001-4d7a-9a51-6f0c2b7f0a01",
        "name": "Weighted Sleep Blanket",
        "description": "Seven kilos of calm. Glass-bead fill, breathable cotton cover.",
        "price": Decimal("89.00"),
        "image_url": "/images/weighted-blanket.jpg",
        "moods": ["Tired", "Relaxed"],
        "inventory": 25,
        "category": "Home",
    },
    {
        "id": "9b1f6c1e-0002-4d7a-9a51-6f0c2b7f0a02",
        "name": "Cold Brew Concentrate",
        "description": "Smooth, low-acid cold brew. Makes 16 cups.",
        "price": Decimal("14.99"),
        "image_url": "/images/cold-brew.jpg",
        "moods": ["Tired", "Focused"],
        "inventory": 120,
        "category": "Food & Drink",
    },
    {
        "id": "9b1f6c1e-0003-4d7a-9a51-6f0c2b7f0a03",
        "name": "Confetti Party Kit",
        "description": "Biodegradable confetti cannons, streamers and a disco ball.",
        "price": Decimal("29.99"),
        "image_url": "/images/party-kit.jpg",
        "moods": ["Celebrating", "Happy"],
        "inventory": 60,
        "category": "Party",
    },
    {
        "id": "9b1f6c1e-0004-4d7a-9a51-6f0c2b7f0a04",
        "name": "Sparkling Rosé Gift Box",
        "description": "Two bottles of non-alcoholic sparkling rosé with glasses.",
        "price": Decimal("39.00"),
        "image_url": "/images/rose-gift-box.jpg",
        "moods": ["Celebrating"],
        "inventory": 40,
        "category": "Food & Drink",
    },
    {
        "id": "9b1f6c1e-0005-4d7a-9a51-6f0c2b7f0a05",
        "name": "Lo-Fi Vinyl Record",
        "description": "Forty minutes of mellow beats on 180g vinyl.",
        "price": Decimal("24.50"),
        "image_url": "/images/lofi-vinyl.jpg",
        "moods": ["Chill", "Focused"],
        "inventory": 75,
        "category": "Music",
    },
    {
        "id": "9b1f6c1e-0006-4d7a-9a51-6f0c2b7f0a06",
        "name": "Hammock for Two",
        "description": "Parachute nylon hammock with tree straps. Holds 200 kg.",
        "price": Decimal("59.99"),
        "image_url": "/images/hammock.jpg",
        "moods": ["Chill", "Relaxed"],
        "inventory": 30,
        "category": "Outdoors",
    },
    {
        "id": "9b1f6c1e-0007-4d7a-9a51-6f0c2b7f0a07",
        "name": "Sunshine Mug",
        "description": "Hand-glazed ceramic mug that makes mornings brighter.",
        "price": Decimal("18.00"),
        "image_url": "/images/sunshine-mug.jpg",
        "moods": ["Happy"],
        "inventory": 90,
        "category": "Home",
    },
    {
        "id": "9b1f6c1e-0008-4d7a-9a51-6f0c2b7f0a08",
        "name": "Resistance Band Set",
        "description": "Five bands from light to extra heavy, with door anchor.",
        "price": Decimal("27.95"),
        "image_url": "/images/resistance-bands.jpg",
        "moods": ["Energetic"],
        "inventory": 80,
        "category": "Fitness",
    },
    {
        "id": "9b1f6c1e-0009-4d7a-9a51-6f0c2b7f0a09",
        "name": "Trail Running Shoes",
        "description": "Grippy lugs, rock plate and a cushioned ride for long days.",
        "price": Decimal("129.00"),
        "image_url": "/images/trail-shoes.jpg",
        "moods": ["Energetic", "Happy"],
        "inventory": 20,
        "category": "Fitness",
    },
    {
        "id": "9b1f6c1e-0010-4d7a-9a51-6f0c2b7f0a10",
        "name": "Noise-Cancelling Earbuds",
        "description": "Deep focus mode with 30 hours of battery.",
        "price": Decimal("149.00"),
        "image_url": "/images/earbuds.jpg",
        "moods": ["Focused"],
        "inventory": 45,
        "category": "Electronics",
    },
    {
        "id": "9b1f6c1e-0011-4d7a-9a51-6f0c2b7f0a11",
        "name": "Lavender Bath Salts",
        "description": "Epsom and sea salt blend with French lavender oil.",
        "price": Decimal("16.00"),
        "image_url": "/images/bath-salts.jpg",
        "moods": ["Relaxed", "Tired"],
        "inventory": 110,
        "category": "Wellness",
    },
    {
        "id": "9b1f6c1e-0012-4d7a-9a51-6f0c2b7f0a12",
        "name": "Mystery Puzzle Box",
        "description": "A wooden box that only opens once you solve it.",
        "price": Decimal("34.00"),
        "image_url": "/images/puzzle-box.jpg",
        "moods": ["Curious", "Focused"],
        "inventory": 35,
        "category": "Games",
    },
    {
        "id": "9b1f6c1e-0013-4d7a-9a51-6f0c2b7f0a13",
        "name": "Pocket Microscope",
        "description": "60-120x zoom with LED light. Fits in a jacket pocket.",
        "price": Decimal("22.00"),
        "image_url": "/images/microscope.jpg",
        "moods": ["Curious"],
        "inventory": 0,
        "category": "Games",
    },
]


class ProductDatabase:
    """Catalog queries over the products table"""

    def __init__(self, table: Optional[Table] = None):
        self.table = table or Table("products")
        self.seed()

    def seed(self) -> None:
        """Load the seed catalog into an empty table"""
        self.table.clear()
        for row in PRODUCTS:
            self.table.insert(row)

    def get_product(self, product_id: str) -> Optional[ProductView]:
        """Get a product by ID"""
        row = self.table.get(product_id)
        return ProductView(**row) if row else None

    def search_products(
        self,
        query: Optional[str] = None,
        mood: Optional[str] = None,
        category: Optional[str] = None,
        in_stock_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[ProductView], int]:
        """
        Search products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = self.get_all_products()

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.description.lower()
            ]

        if mood:
            mood_lower = mood.lower()
            results = [p for p in results if mood_lower in (m.lower() for m in p.moods)]

        if category:
            results = [p for p in results if p.category.lower() == category.lower()]

        if in_stock_only:
            results = [p for p in results if p.in_stock]

        total = len(results)
        results = results[offset : offset + limit]

        return results, total

    def related_products(self, product: ProductView, limit: int = 4) -> list[ProductView]:
        """Same-category products first, topped up with products sharing a mood"""
        others = [p for p in self.get_all_products() if p.id != product.id]
        related = [p for p in others if p.category == product.category][:limit]

        if len(related) < limit:
            moods = set(product.moods)
            for p in others:
                if len(related) >= limit:
                    break
                if p not in related and moods.intersection(p.moods):
                    related.append(p)

        return related

    def list_moods(self) -> list[str]:
        """Distinct moods used across the catalog"""
        seen: list[str] = []
        for p in self.get_all_products():
            for mood in p.moods:
                if mood not in seen:
                    seen.append(mood)
        return seen

    def get_all_products(self) -> list[ProductView]:
        """Get all products"""
        return [ProductView(**row) for row in self.table.select()]

    def update_stock(self, product_id: str, quantity_change: int) -> bool:
        """
        Update product inventory.

        Args:
            product_id: Product to update
            quantity_change: Positive to add, negative to remove

        Returns:
            True if successful
        """
        row = self.table.get(product_id)
        if not row:
            return False

        new_quantity = row["inventory"] + quantity_change
        if new_quantity < 0:
            return False

        self.table.update(product_id, {"inventory": new_quantity})
        return True


# Singleton instance
product_db = ProductDatabase()
