"""Cart store for one storefront session"""

import time
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from pydantic import ValidationError

from ..models.cart import Cart, LineItem, LineItemVariant, PriceInfo
from .storage import StorageSlot

logger = logging.getLogger(__name__)

DEFAULT_VARIANT_ID = "1"
DEFAULT_ITEM_NAME = "Product"
DEFAULT_CURRENCY = "USD"


def _now_ms() -> int:
    return int(time.time() * 1000)


class CartStore:
    """
    Single source of truth for one session's cart.

    The cart is ``None`` until the first item is added and goes back to
    ``None`` once the last item is removed. Every mutation recomputes the
    total, bumps the version by one and writes the whole cart to the
    storage slot.
    """

    def __init__(self, storage: StorageSlot):
        self.storage = storage
        self.cart: Optional[Cart] = None
        self.loading = False
        self._load()

    @property
    def item_count(self) -> int:
        """Sum of quantities across all line items"""
        if not self.cart:
            return 0
        return sum(item.quantity for item in self.cart.items)

    @property
    def total_price(self) -> float:
        return self.cart.total_price if self.cart else 0.0

    def add_item(
        self,
        product_id: str,
        variant_id: str = DEFAULT_VARIANT_ID,
        quantity: int = 1,
        price_info: Optional[PriceInfo] = None,
    ) -> None:
        """
        Add a product variant to the cart.

        If the (product, variant) pair is already in the cart only its
        quantity grows; the name and price captured the first time win.
        """
        if not product_id:
            raise ValueError("product_id is required")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            logger.warning(f"Ignoring add of {product_id} with quantity {quantity!r}")
            return

        info = price_info or PriceInfo()
        variant_id = str(variant_id) if variant_id is not None else DEFAULT_VARIANT_ID

        with self._busy():
            if not self.cart:
                item = self._new_item(product_id, variant_id, quantity, info)
                self.cart = Cart(
                    id=f"local-{_now_ms()}",
                    version=1,
                    items=[item],
                    total_price=item.price * item.quantity,
                    currency=item.currency,
                )
                self._persist()
                return

            existing = self._find(product_id, variant_id)
            if existing is not None:
                items = [
                    i.model_copy(update={"quantity": i.quantity + quantity})
                    if i.id == existing.id else i
                    for i in self.cart.items
                ]
            else:
                item = self._new_item(product_id, variant_id, quantity, info)
                if item.currency != self.cart.currency:
                    logger.warning(
                        f"Line item {item.id} priced in {item.currency}, "
                        f"cart is in {self.cart.currency}"
                    )
                items = [*self.cart.items, item]

            self._commit(items)

    def remove_item(self, line_item_id: str) -> None:
        """Remove a line item; unknown IDs are ignored"""
        with self._busy():
            if not self.cart:
                return

            items = [i for i in self.cart.items if i.id != line_item_id]
            if len(items) == len(self.cart.items):
                return

            if not items:
                self.clear()
                return

            self._commit(items)

    def update_quantity(self, line_item_id: str, quantity: int) -> None:
        """Set a line item's quantity; zero or below removes the item"""
        if quantity <= 0:
            self.remove_item(line_item_id)
            return

        with self._busy():
            if not self.cart:
                return
            if not any(i.id == line_item_id for i in self.cart.items):
                return

            items = [
                i.model_copy(update={"quantity": quantity}) if i.id == line_item_id else i
                for i in self.cart.items
            ]
            self._commit(items)

    def clear(self) -> None:
        """Drop the cart and its persisted copy"""
        self.cart = None
        try:
            self.storage.clear()
        except OSError as e:
            logger.error(f"Failed to clear cart storage '{self.storage.key}': {e}")

    def _find(self, product_id: str, variant_id: str) -> Optional[LineItem]:
        return next(
            (
                item for item in self.cart.items
                if item.product_id == product_id
                and (item.variant.id if item.variant else DEFAULT_VARIANT_ID) == variant_id
            ),
            None,
        )

    def _new_item(
        self,
        product_id: str,
        variant_id: str,
        quantity: int,
        info: PriceInfo,
    ) -> LineItem:
        return LineItem(
            id=f"{product_id}-{variant_id}-{_now_ms()}",
            product_id=product_id,
            name=info.name or DEFAULT_ITEM_NAME,
            quantity=quantity,
            price=info.price or 0.0,
            currency=info.currency or DEFAULT_CURRENCY,
            image=info.image,
            variant=LineItemVariant(
                id=variant_id,
                sku=info.sku,
                attributes=info.attributes,
            ),
        )

    def _commit(self, items: list[LineItem]) -> None:
        """Replace the items, recompute the total, bump the version and persist"""
        self.cart = Cart(
            id=self.cart.id,
            version=self.cart.version + 1,
            items=items,
            total_price=sum(i.price * i.quantity for i in items),
            currency=self.cart.currency,
        )
        self._persist()

    def _persist(self) -> None:
        try:
            self.storage.write(self.cart.model_dump_json())
        except OSError as e:
            logger.error(f"Failed to persist cart '{self.storage.key}': {e}")

    def _load(self) -> None:
        try:
            saved = self.storage.read()
        except OSError as e:
            logger.error(f"Failed to read cart storage '{self.storage.key}': {e}")
            return
        except ValueError as e:
            # Undecodable bytes in the slot
            logger.warning(f"Discarding unreadable cart in '{self.storage.key}': {e}")
            self.clear()
            return

        if not saved:
            return

        try:
            cart = Cart.model_validate_json(saved)
        except ValidationError as e:
            logger.warning(f"Discarding corrupt cart in '{self.storage.key}': {e}")
            self.clear()
            return

        # Totals are never trusted from storage
        self.cart = cart.model_copy(
            update={"total_price": sum(i.price * i.quantity for i in cart.items)}
        )

    @contextmanager
    def _busy(self) -> Iterator[None]:
        self.loading = True
        try:
            yield
        finally:
            self.loading = False
