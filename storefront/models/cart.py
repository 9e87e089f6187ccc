"""Cart models for the storefront"""

from pydantic import BaseModel, Field
from typing import Any, Optional


class LineItemVariant(BaseModel):
    """Variant a line item was added with"""
    id: str
    sku: Optional[str] = None
    attributes: dict[str, Any] = {}


class LineItem(BaseModel):
    """One product + variant entry in a cart"""
    id: str
    product_id: str
    name: str
    quantity: int = Field(gt=0)
    price: float
    currency: str = "USD"
    image: Optional[str] = None
    variant: Optional[LineItemVariant] = None


class Cart(BaseModel):
    """Session-scoped shopping cart"""
    id: str
    version: int = Field(ge=1)
    items: list[LineItem] = Field(min_length=1)
    total_price: float = 0.0
    currency: str = "USD"


class PriceInfo(BaseModel):
    """Display data captured on a line item when it is first added"""
    name: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    image: Optional[str] = None
    sku: Optional[str] = None
    attributes: dict[str, Any] = {}


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str = Field(min_length=1)
    variant_id: str = "1"
    quantity: int = Field(default=1, gt=0)
    price_info: Optional[PriceInfo] = None


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity (zero or below removes the item)"""
    quantity: int


class CartResponse(BaseModel):
    """Cart API response"""
    session_id: str
    cart: Optional[Cart] = None
    item_count: int = 0
    total_price: float = 0.0
    message: Optional[str] = None
