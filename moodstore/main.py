"""
Mood Store Application

Backend for a mood-themed storefront: mood-tagged catalog, carts,
checkout, order history, invoices and the mood quiz.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.errors import MoodStoreError
from .routes import (
    products_router,
    cart_router,
    checkout_router,
    invoices_router,
    mood_router,
    profile_router,
    engagement_router,
    favorites_router,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Invoice email: {'enabled' if settings.smtp_configured else 'disabled'}")
    yield
    logger.info(f"{settings.app_name} shutting down...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Mood-themed storefront backend",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MoodStoreError)
async def mood_store_error_handler(request: Request, exc: MoodStoreError):
    """Map domain errors to ``{"error": ...}`` responses"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(invoices_router)
app.include_router(mood_router)
app.include_router(profile_router)
app.include_router(engagement_router)
app.include_router(favorites_router)


@app.get("/")
async def home():
    """API index"""
    return {
        "message": f"{settings.store_name} API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/cart",
            "checkout": "/api/checkout",
            "orders": "/api/orders",
            "mood_quiz": "/api/mood-quiz",
            "invoices": "/api/download-invoice",
            "favorites": "/api/favorites",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "mood-store",
        "email_configured": settings.smtp_configured,
    }


def run() -> None:
    """Console entry point"""
    import uvicorn

    uvicorn.run(
        "moodstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
