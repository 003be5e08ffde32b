# API Routes

from .products import router as products_router
from .cart import router as cart_router
from .checkout import router as checkout_router
from .invoices import router as invoices_router
from .mood import router as mood_router
from .profile import router as profile_router
from .engagement import router as engagement_router
from .favorites import router as favorites_router

__all__ = [
    "products_router",
    "cart_router",
    "checkout_router",
    "invoices_router",
    "mood_router",
    "profile_router",
    "engagement_router",
    "favorites_router",
]
