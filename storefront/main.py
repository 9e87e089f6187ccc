"""
Storefront Application

Catalog, homepage content and session carts backed by a headless commerce
API and a headless CMS.
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import Settings, get_settings
from .core.session import CartSessions, file_storage_factory, memory_storage_factory
from .routes import products_router, homepage_router, cart_router
from .services.cms_client import CMSClient
from .services.commerce_client import CommerceClient

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    commerce_client: Optional[CommerceClient] = None,
    cms_client: Optional[CMSClient] = None,
    cart_sessions: Optional[CartSessions] = None,
) -> FastAPI:
    """
    Build the application and the services it owns.

    Anything not passed in is built from settings. The app closes the
    upstream clients on shutdown.
    """
    settings = settings or get_settings()

    if commerce_client is None:
        commerce_client = CommerceClient(
            api_url=settings.ctp_api_url,
            auth_url=settings.ctp_auth_url,
            project_key=settings.ctp_project_key,
            client_id=settings.ctp_client_id,
            client_secret=settings.ctp_client_secret,
            scopes=settings.ctp_scopes,
        )

    if cms_client is None:
        cms_client = CMSClient(
            space_id=settings.contentful_space_id,
            access_token=settings.contentful_access_token,
            preview_token=settings.contentful_preview_token,
            environment=settings.contentful_environment,
        )

    if cart_sessions is None:
        factory = (
            file_storage_factory(settings.cart_storage_dir)
            if settings.cart_storage_dir
            else memory_storage_factory
        )
        cart_sessions = CartSessions(
            factory,
            storage_key=settings.cart_storage_key,
            max_age_hours=settings.cart_session_max_age_hours,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        logger.info(f"{settings.app_name} starting up...")
        logger.info(f"Commerce API configured: {settings.commerce_configured}")
        logger.info(f"CMS configured: {settings.cms_configured}")
        logger.info(f"Cart storage: {settings.cart_storage_dir or 'in-memory'}")

        yield

        logger.info(f"{settings.app_name} shutting down...")
        await commerce_client.close()
        await cms_client.close()

    app = FastAPI(
        title=settings.app_name,
        description="Storefront catalog, content and cart API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.commerce_client = commerce_client
    app.state.cms_client = cms_client
    app.state.cart_sessions = cart_sessions

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Session-Id"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Errors are reported as {"error": message}"""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    app.include_router(homepage_router)
    app.include_router(products_router)
    app.include_router(cart_router)

    @app.get("/")
    async def home():
        """Storefront API index"""
        return {
            "message": "Storefront API",
            "docs": "/docs",
            "endpoints": {
                "homepage": "/api/homepage",
                "products": "/api/products",
                "categories": "/api/categories",
                "cart": "/api/cart",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "storefront",
            "commerce_configured": settings.commerce_configured,
            "cms_configured": settings.cms_configured,
        }

    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
