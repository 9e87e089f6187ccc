"""
CMS API Client

Fetches homepage marketing content from the headless CMS delivery API (or
the preview API for drafts) and lays it over the default content bundle.
"""

import logging
from typing import Optional, Any

import httpx

from ..models.content import (
    DEFAULT_HOMEPAGE_CONTENT,
    HomepageContent,
    merge_homepage,
)

logger = logging.getLogger(__name__)

DELIVERY_HOST = "https://cdn.contentful.com"
PREVIEW_HOST = "https://preview.contentful.com"

# CMS content type -> homepage section attribute
SECTION_CONTENT_TYPES = {
    "heroSection": "hero",
    "promoBanner": "promo_banner",
    "exclusiveDeals": "exclusive_deals",
    "eeTvSection": "ee_tv_section",
    "btEeSection": "bt_ee_section",
}

PRODUCT_CARD_CONTENT_TYPE = "productCard"
PRODUCT_CARD_LIMIT = 10


def parse_image_url(asset: Any, assets: Optional[dict[str, dict]] = None) -> Optional[str]:
    """
    Get the file URL of an image asset.

    Accepts either an embedded asset or a link to one found in ``assets``
    (asset ID -> asset). Protocol-relative URLs get an ``https:`` prefix.
    """
    if not isinstance(asset, dict):
        return None

    sys_info = asset.get("sys")
    if isinstance(sys_info, dict) and sys_info.get("type") == "Link" and assets is not None:
        link_id = sys_info.get("id")
        asset = assets.get(link_id, {}) if isinstance(link_id, str) else {}

    fields = asset.get("fields")
    file_info = fields.get("file") if isinstance(fields, dict) else None
    url = file_info.get("url") if isinstance(file_info, dict) else None
    if not isinstance(url, str) or not url:
        return None
    return f"https:{url}" if url.startswith("//") else url


def extract_text_from_rich_text(rich_text: Any) -> str:
    """Flatten a rich text document into plain text, one line per block"""
    if not isinstance(rich_text, dict) or not isinstance(rich_text.get("content"), list):
        return ""

    lines = []
    for node in rich_text["content"]:
        children = node.get("content") if isinstance(node, dict) else None
        if not isinstance(children, list):
            continue
        lines.append("".join(
            child["value"] for child in children
            if isinstance(child, dict) and isinstance(child.get("value"), str)
        ))
    return "\n".join(lines)


def normalize_fields(fields: dict[str, Any], assets: dict[str, dict]) -> dict[str, Any]:
    """
    Turn raw entry fields into plain values the content merge understands.

    Rich text becomes a string and a linked ``image`` asset fills in
    ``imageUrl`` when the entry has no explicit URL.
    """
    normalized = {}
    for key, value in fields.items():
        if isinstance(value, dict) and value.get("nodeType") == "document":
            value = extract_text_from_rich_text(value)
        normalized[key] = value

    if not normalized.get("imageUrl"):
        image_url = parse_image_url(fields.get("image"), assets)
        if image_url:
            normalized["imageUrl"] = image_url

    return normalized


class CMSClient:
    """Client for the CMS content delivery and preview APIs"""

    def __init__(
        self,
        space_id: Optional[str] = None,
        access_token: Optional[str] = None,
        preview_token: Optional[str] = None,
        environment: str = "master",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.space_id = space_id
        self.access_token = access_token
        self.preview_token = preview_token
        self.environment = environment
        self._http_client = httpx.AsyncClient(timeout=30.0, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _credentials(self, preview: bool) -> Optional[tuple[str, str]]:
        """Host and token for the chosen API, or None when not configured"""
        token = self.preview_token if preview else self.access_token
        if not (self.space_id and token):
            return None
        return (PREVIEW_HOST if preview else DELIVERY_HOST), token

    async def _get_entries(
        self,
        host: str,
        token: str,
        content_type: str,
        limit: int = 1,
        order: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Fetch entries of one content type with their linked assets resolved"""
        params: dict[str, Any] = {"content_type": content_type, "limit": limit}
        if order:
            params["order"] = order

        response = await self._http_client.get(
            f"{host}/spaces/{self.space_id}/environments/{self.environment}/entries",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )
        if response.status_code >= 400:
            logger.error(f"CMS request failed: {response.status_code} - {response.text}")
            response.raise_for_status()

        try:
            body = response.json()
        except ValueError as e:
            raise httpx.DecodingError(f"Invalid JSON from CMS: {e}", request=response.request)
        if not isinstance(body, dict):
            raise httpx.DecodingError("Expected a JSON object from CMS", request=response.request)

        includes = body.get("includes")
        included_assets = includes.get("Asset") if isinstance(includes, dict) else None
        assets = {}
        for asset in included_assets if isinstance(included_assets, list) else []:
            sys_info = asset.get("sys") if isinstance(asset, dict) else None
            if isinstance(sys_info, dict) and isinstance(sys_info.get("id"), str):
                assets[sys_info["id"]] = asset

        items = body.get("items")
        entries = []
        for item in items if isinstance(items, list) else []:
            fields = item.get("fields") if isinstance(item, dict) else None
            if isinstance(fields, dict):
                entries.append(normalize_fields(fields, assets))
        return entries

    async def get_homepage_content(self, preview: bool = False) -> HomepageContent:
        """
        Fetch homepage content.

        Never raises: an unconfigured client returns the default bundle, and a
        section that fails to load keeps its default.
        """
        credentials = self._credentials(preview)
        if credentials is None:
            logger.warning("CMS client not configured. Using default content.")
            return DEFAULT_HOMEPAGE_CONTENT

        host, token = credentials
        sections: dict[str, dict[str, Any]] = {}

        for content_type, section in SECTION_CONTENT_TYPES.items():
            try:
                entries = await self._get_entries(host, token, content_type)
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Error fetching {content_type} content: {e}")
                continue
            if entries:
                sections[section] = entries[0]

        product_cards: list[dict[str, Any]] = []
        try:
            product_cards = await self._get_entries(
                host,
                token,
                PRODUCT_CARD_CONTENT_TYPE,
                limit=PRODUCT_CARD_LIMIT,
                order="fields.order",
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching product cards: {e}")

        return merge_homepage(DEFAULT_HOMEPAGE_CONTENT, sections, product_cards)
