# Storefront Models

from .cart import (
    Cart,
    LineItem,
    LineItemVariant,
    PriceInfo,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartResponse,
)
from .product import (
    Money,
    Price,
    Image,
    Attribute,
    ProductVariant,
    ProductProjection,
    Category,
    CategoryProductsResponse,
)
from .content import (
    HomepageContent,
    DEFAULT_HOMEPAGE_CONTENT,
    merge_section,
    merge_homepage,
)

__all__ = [
    "Cart",
    "LineItem",
    "LineItemVariant",
    "PriceInfo",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "Money",
    "Price",
    "Image",
    "Attribute",
    "ProductVariant",
    "ProductProjection",
    "Category",
    "CategoryProductsResponse",
    "HomepageContent",
    "DEFAULT_HOMEPAGE_CONTENT",
    "merge_section",
    "merge_homepage",
]
