# API Routes

from .products import router as products_router
from .homepage import router as homepage_router
from .cart import router as cart_router

__all__ = ["products_router", "homepage_router", "cart_router"]
