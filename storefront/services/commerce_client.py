"""
Commerce API Client

HTTP client for the headless commerce backend's catalog APIs.
Authenticates with the client-credentials flow and caches the token until
shortly before it expires.
"""

import time
import logging
from typing import Optional, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..models.product import Category, ProductProjection
from .pricing import FALLBACK_LOCALES, get_slug

logger = logging.getLogger(__name__)

# Refresh tokens this many seconds before the backend says they expire
TOKEN_EXPIRY_MARGIN = 60


class NotFound(Exception):
    """Raised internally when the backend answers 404"""


def _quote(value: str) -> str:
    """Escape a value for use inside a predicate string literal"""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _json_object(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body; anything else is a decoding error"""
    try:
        body = response.json()
    except ValueError as e:
        raise httpx.DecodingError(f"Invalid JSON from {response.url}: {e}", request=response.request)
    if not isinstance(body, dict):
        raise httpx.DecodingError(f"Expected a JSON object from {response.url}", request=response.request)
    return body


class CommerceClient:
    """
    Client for the commerce backend's product and category APIs.

    Every public method degrades to ``None`` or ``[]`` when the backend is
    unreachable or answers with an error; failures are logged, never raised.
    """

    def __init__(
        self,
        api_url: str,
        auth_url: str,
        project_key: str,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        scopes: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize commerce client.

        Args:
            api_url: Base URL of the commerce API
            auth_url: Base URL of the commerce auth service
            project_key: Project the catalog lives in
            client_id: API client ID for the client-credentials flow
            client_secret: API client secret
            scopes: Space-separated scopes; defaults to ``manage_project:<project_key>``
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.api_url = api_url.rstrip("/")
        self.auth_url = auth_url.rstrip("/")
        self.project_key = project_key
        self.client_id = client_id
        self.client_secret = client_secret
        self.scopes = scopes or f"manage_project:{project_key}"
        self._http_client = httpx.AsyncClient(timeout=30.0, transport=transport)

        self._access_token: Optional[str] = None
        self._token_expires_at = 0.0

        if not (client_id and client_secret):
            logger.warning("No commerce API credentials provided - requests will not be authenticated")

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _get_token(self) -> Optional[str]:
        """Get a cached access token, fetching a new one when it is about to expire"""
        if not (self.client_id and self.client_secret):
            return None

        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        response = await self._http_client.post(
            f"{self.auth_url}/oauth/token",
            auth=(self.client_id, self.client_secret),
            data={"grant_type": "client_credentials", "scope": self.scopes},
        )
        response.raise_for_status()
        body = _json_object(response)

        token = body.get("access_token")
        if not isinstance(token, str) or not token:
            raise httpx.DecodingError(
                f"Token response without access_token: {body.get('error', body)}",
                request=response.request,
            )
        try:
            expires_in = int(body.get("expires_in", 0))
        except (TypeError, ValueError):
            expires_in = 0

        self._access_token = token
        self._token_expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0)
        logger.debug("Fetched commerce API access token")
        return self._access_token

    async def _request(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Make an authenticated GET request against the project"""
        url = f"{self.api_url}/{self.project_key}{path}"
        headers = {"Accept": "application/json"}

        token = await self._get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        response = await self._http_client.get(url, params=params, headers=headers)

        if response.status_code == 404:
            raise NotFound(path)

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            response.raise_for_status()

        return _json_object(response)

    async def _results(self, path: str, params: dict[str, Any]) -> list[dict]:
        body = await self._request(path, params)
        results = body.get("results", [])
        return results if isinstance(results, list) else []

    # ==================== Category APIs ====================

    async def get_categories(self) -> list[Category]:
        """Fetch all categories in display order"""
        try:
            results = await self._results(
                "/categories",
                {"limit": 100, "sort": "orderHint asc"},
            )
            return [Category.model_validate(c) for c in results]
        except (httpx.HTTPError, NotFound, ValidationError) as e:
            logger.error(f"Error fetching categories: {e}")
            return []

    async def get_category_by_slug(self, slug: str) -> Optional[Category]:
        """
        Fetch a category by slug.

        Tries each fallback locale in turn, then scans the full category list.
        """
        for locale in FALLBACK_LOCALES:
            try:
                results = await self._results(
                    "/categories",
                    {"where": f'slug({locale}="{_quote(slug)}")', "limit": 1},
                )
            except (httpx.HTTPError, NotFound) as e:
                logger.debug(f"Category lookup for locale {locale} failed: {e}")
                continue

            if results:
                try:
                    return Category.model_validate(results[0])
                except ValidationError as e:
                    logger.error(f"Error parsing category '{slug}': {e}")
                    return None

        categories = await self.get_categories()
        return next((c for c in categories if get_slug(c.slug) == slug), None)

    async def get_category_by_id(self, category_id: str) -> Optional[Category]:
        """Fetch a category by ID"""
        try:
            body = await self._request(f"/categories/{quote(category_id, safe='')}")
            return Category.model_validate(body)
        except NotFound:
            return None
        except (httpx.HTTPError, ValidationError) as e:
            logger.error(f"Error fetching category: {e}")
            return None

    # ==================== Product APIs ====================

    async def get_products_by_category(self, category_id: str) -> list[ProductProjection]:
        """Fetch products in a category and its subcategories"""
        try:
            results = await self._results(
                "/product-projections/search",
                {"filter.query": f'categories.id:subtree("{_quote(category_id)}")', "limit": 50},
            )
            if not results:
                # Fallback: direct category membership only
                results = await self._results(
                    "/product-projections/search",
                    {"filter": f'categories.id:"{_quote(category_id)}"', "limit": 50},
                )
            return [ProductProjection.model_validate(p) for p in results]
        except (httpx.HTTPError, NotFound, ValidationError) as e:
            logger.error(f"Error fetching products by category: {e}")
            return []

    async def get_all_products(self) -> list[ProductProjection]:
        """Fetch the first page of products"""
        try:
            results = await self._results("/product-projections/search", {"limit": 100})
            return [ProductProjection.model_validate(p) for p in results]
        except (httpx.HTTPError, NotFound, ValidationError) as e:
            logger.error(f"Error fetching products: {e}")
            return []

    async def get_product_by_slug(self, slug: str) -> Optional[ProductProjection]:
        """
        Fetch a product by its English slug.

        Falls back to scanning search results and matching on the first
        slug found across the fallback locales.
        """
        try:
            results = await self._results(
                "/product-projections",
                {"where": f'slug(en="{_quote(slug)}")', "limit": 1},
            )
            if results:
                return ProductProjection.model_validate(results[0])

            results = await self._results("/product-projections/search", {"limit": 500})
            match = next(
                (p for p in results if isinstance(p, dict) and get_slug(p.get("slug")) == slug),
                None,
            )
            return ProductProjection.model_validate(match) if match else None
        except NotFound:
            return None
        except (httpx.HTTPError, ValidationError) as e:
            logger.error(f"Error fetching product: {e}")
            return None

    async def get_product_by_key(self, key: str) -> Optional[ProductProjection]:
        """Fetch a product by key"""
        try:
            return ProductProjection.model_validate(
                await self._request(f"/product-projections/key={quote(key, safe='')}")
            )
        except NotFound:
            return None
        except (httpx.HTTPError, ValidationError) as e:
            logger.error(f"Error fetching product: {e}")
            return None

    async def get_product_by_id(self, product_id: str) -> Optional[ProductProjection]:
        """Fetch a product by ID"""
        try:
            return ProductProjection.model_validate(
                await self._request(f"/product-projections/{quote(product_id, safe='')}")
            )
        except NotFound:
            return None
        except (httpx.HTTPError, ValidationError) as e:
            logger.error(f"Error fetching product: {e}")
            return None
