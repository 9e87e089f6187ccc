"""Cart API routes for the storefront"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends

from ..models.cart import (
    AddToCartRequest,
    UpdateCartItemRequest,
    CartResponse,
    PriceInfo,
)
from ..database.carts import CartStore
from ..services.commerce_client import CommerceClient
from ..services.pricing import price_info_for_variant
from .deps import (
    get_cart_store,
    get_commerce_client,
    get_existing_cart_store,
    get_session_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _response(
    session_id: str,
    store: Optional[CartStore],
    message: Optional[str] = None,
) -> CartResponse:
    return CartResponse(
        session_id=session_id,
        cart=store.cart if store else None,
        item_count=store.item_count if store else 0,
        total_price=store.total_price if store else 0.0,
        message=message,
    )


async def _lookup_price_info(
    commerce: CommerceClient,
    product_id: str,
    variant_id: str,
) -> Optional[PriceInfo]:
    """Price info for a variant straight from the catalog, if it can be found"""
    try:
        numeric_id = int(variant_id)
    except ValueError:
        return None

    product = await commerce.get_product_by_id(product_id)
    if not product:
        return None

    variant = product.find_variant(numeric_id)
    if not variant:
        logger.warning(f"Variant {variant_id} not found on product {product_id}")
        return None
    return price_info_for_variant(product, variant)


@router.get("", response_model=CartResponse)
async def get_cart(
    session_id: str = Depends(get_session_id),
    store: Optional[CartStore] = Depends(get_existing_cart_store),
):
    """Get the session's cart (null until something is added)"""
    return _response(session_id, store)


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    session_id: str = Depends(get_session_id),
    store: CartStore = Depends(get_cart_store),
    commerce: CommerceClient = Depends(get_commerce_client),
):
    """
    Add an item to the cart.

    When the request carries no price info the variant's name, price and
    image are looked up in the catalog.
    """
    price_info = request.price_info
    if price_info is None:
        price_info = await _lookup_price_info(commerce, request.product_id, request.variant_id)

    store.add_item(
        request.product_id,
        request.variant_id,
        request.quantity,
        price_info,
    )
    return _response(session_id, store, f"Added {request.quantity}x {request.product_id} to cart")


@router.put("/items/{line_item_id}", response_model=CartResponse)
async def update_cart_item(
    line_item_id: str,
    request: UpdateCartItemRequest,
    session_id: str = Depends(get_session_id),
    store: Optional[CartStore] = Depends(get_existing_cart_store),
):
    """Update item quantity in cart (zero or below removes it)"""
    if not _has_item(store, line_item_id):
        return _response(session_id, store, "Item not in cart")

    store.update_quantity(line_item_id, request.quantity)
    message = "Item removed" if request.quantity <= 0 else "Cart updated"
    return _response(session_id, store, message)


@router.delete("/items/{line_item_id}", response_model=CartResponse)
async def remove_from_cart(
    line_item_id: str,
    session_id: str = Depends(get_session_id),
    store: Optional[CartStore] = Depends(get_existing_cart_store),
):
    """Remove an item from the cart"""
    if not _has_item(store, line_item_id):
        return _response(session_id, store, "Item not in cart")

    store.remove_item(line_item_id)
    return _response(session_id, store, "Item removed")


@router.delete("", response_model=CartResponse)
async def clear_cart(
    session_id: str = Depends(get_session_id),
    store: Optional[CartStore] = Depends(get_existing_cart_store),
):
    """Clear all items from cart"""
    if store:
        store.clear()
    return _response(session_id, store, "Cart cleared")


def _has_item(store: Optional[CartStore], line_item_id: str) -> bool:
    return bool(store and store.cart) and any(i.id == line_item_id for i in store.cart.items)
