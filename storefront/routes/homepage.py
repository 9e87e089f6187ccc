"""Homepage content API route"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query, Response

from ..models.content import HomepageContent
from ..services.cms_client import CMSClient
from .deps import get_cms_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/homepage", tags=["Content"])

CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=300"


@router.get("", response_model=HomepageContent)
async def get_homepage(
    response: Response,
    preview: bool = Query(False, description="Return draft content"),
    cms: CMSClient = Depends(get_cms_client),
):
    """Get the marketing content rendered on the homepage"""
    try:
        content = await cms.get_homepage_content(preview)
    except Exception as e:
        logger.error(f"Error fetching homepage content: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch homepage content")

    response.headers["Cache-Control"] = CACHE_CONTROL
    return content
