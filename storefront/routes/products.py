"""Product and category API routes for the storefront"""

import logging
from fastapi import APIRouter, HTTPException, Depends

from ..models.product import (
    Category,
    CategoryProductsResponse,
    ProductProjection,
)
from ..services.commerce_client import CommerceClient
from .deps import get_commerce_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/products", response_model=list[ProductProjection])
async def list_products(
    commerce: CommerceClient = Depends(get_commerce_client),
):
    """List the first page of products"""
    return await commerce.get_all_products()


@router.get("/products/{slug}", response_model=ProductProjection)
async def get_product(
    slug: str,
    commerce: CommerceClient = Depends(get_commerce_client),
):
    """
    Get a product by slug.

    Falls back to looking the value up as a product key.
    """
    try:
        product = await commerce.get_product_by_slug(slug)
        if not product:
            product = await commerce.get_product_by_key(slug)
    except Exception as e:
        logger.error(f"Error fetching product '{slug}': {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch product")

    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/categories", response_model=list[Category])
async def list_categories(
    commerce: CommerceClient = Depends(get_commerce_client),
):
    """List all product categories"""
    return await commerce.get_categories()


@router.get("/categories/{slug}/products", response_model=CategoryProductsResponse)
async def get_products_by_category(
    slug: str,
    commerce: CommerceClient = Depends(get_commerce_client),
):
    """Get products in a category (including its subcategories)"""
    category = await commerce.get_category_by_slug(slug)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    products = await commerce.get_products_by_category(category.id)
    return CategoryProductsResponse(
        category=category,
        products=products,
        total=len(products),
    )
