"""
Tests for the Cart Store
"""

import json
import random

import pytest

from storefront.database import CartStore, MemoryStorage
from storefront.models.cart import PriceInfo


def phone(price=10.0, currency="USD", name="Phone"):
    return PriceInfo(name=name, price=price, currency=currency)


def expected_total(store):
    return sum(item.price * item.quantity for item in store.cart.items)


class TestAddItem:
    """Tests for add_item."""

    def test_cart_absent_until_first_add(self, store):
        assert store.cart is None
        assert store.item_count == 0
        assert store.total_price == 0

    def test_first_add_creates_cart(self, store):
        store.add_item("p1", "1", 2, phone())

        assert store.cart is not None
        assert store.cart.id.startswith("local-")
        assert store.cart.version == 1
        assert store.cart.currency == "USD"
        assert len(store.cart.items) == 1
        assert store.cart.total_price == 20.0

    def test_line_item_fields(self, store):
        store.add_item("p1", "7", 1, PriceInfo(
            name="Phone", price=10.0, currency="GBP", image="/img.png",
            sku="SKU-7", attributes={"color": "Black"},
        ))

        item = store.cart.items[0]
        assert item.id.startswith("p1-7-")
        assert item.product_id == "p1"
        assert item.image == "/img.png"
        assert item.variant.id == "7"
        assert item.variant.sku == "SKU-7"
        assert item.variant.attributes == {"color": "Black"}

    def test_defaults_without_price_info(self, store):
        store.add_item("p1")

        item = store.cart.items[0]
        assert item.name == "Product"
        assert item.price == 0.0
        assert item.currency == "USD"
        assert item.quantity == 1
        assert item.variant.id == "1"

    def test_repeat_add_keeps_first_price(self, store):
        store.add_item("p1", "1", 2, phone(price=10, currency="USD", name="Phone"))
        store.add_item("p1", "1", 1, phone(price=99, currency="EUR", name="Phone2"))

        assert len(store.cart.items) == 1
        item = store.cart.items[0]
        assert item.quantity == 3
        assert item.price == 10
        assert item.currency == "USD"
        assert item.name == "Phone"
        assert store.cart.total_price == 30
        assert store.cart.version == 2

    def test_repeat_add_keeps_line_item_id(self, store):
        store.add_item("p1", "1", 1, phone())
        first_id = store.cart.items[0].id
        store.add_item("p1", "1", 1, phone())

        assert store.cart.items[0].id == first_id

    def test_distinct_pairs_append_in_order(self, store):
        pairs = [("p1", "1"), ("p1", "2"), ("p2", "1"), ("p3", "1")]
        for product_id, variant_id in pairs:
            store.add_item(product_id, variant_id, 1, phone())

        assert [(i.product_id, i.variant.id) for i in store.cart.items] == pairs
        assert store.cart.version == len(pairs)

    def test_sentinel_variant_does_not_merge_different_products(self, store):
        store.add_item("p1")
        store.add_item("p2")

        assert len(store.cart.items) == 2

    def test_integer_variant_id_matches_string(self, store):
        store.add_item("p1", 1, 1, phone())
        store.add_item("p1", "1", 1, phone())

        assert len(store.cart.items) == 1
        assert store.cart.items[0].quantity == 2

    def test_empty_product_id_rejected(self, store):
        with pytest.raises(ValueError):
            store.add_item("")

    @pytest.mark.parametrize("quantity", [0, -3, 1.5, True])
    def test_nonsensical_quantity_ignored(self, store, quantity):
        store.add_item("p1", "1", quantity, phone())

        assert store.cart is None

    def test_loading_flag_cleared_after_operation(self, store):
        store.add_item("p1", "1", 1, phone())

        assert store.loading is False


class TestRemoveItem:
    """Tests for remove_item."""

    def test_remove_one_of_two(self, store):
        store.add_item("p1", "1", 2, phone(price=10))
        store.add_item("p2", "1", 1, phone(price=20))
        store.remove_item(store.cart.items[0].id)

        assert [i.product_id for i in store.cart.items] == ["p2"]
        assert store.cart.total_price == 20
        assert store.cart.version == 3

    def test_remove_last_item_clears_cart_and_storage(self, store, storage):
        store.add_item("p1", "1", 1, phone())
        assert storage.read() is not None

        store.remove_item(store.cart.items[0].id)

        assert store.cart is None
        assert store.item_count == 0
        assert storage.read() is None

    def test_unknown_id_is_noop(self, store):
        store.add_item("p1", "1", 1, phone())
        store.remove_item("missing")

        assert len(store.cart.items) == 1
        assert store.cart.version == 1

    def test_remove_on_absent_cart_is_noop(self, store):
        store.remove_item("missing")

        assert store.cart is None


class TestUpdateQuantity:
    """Tests for update_quantity."""

    def test_update_in_place(self, store):
        store.add_item("p1", "1", 1, phone(price=10))
        store.add_item("p2", "1", 1, phone(price=20))
        first_id = store.cart.items[0].id

        store.update_quantity(first_id, 5)

        assert store.cart.items[0].id == first_id
        assert store.cart.items[0].quantity == 5
        assert store.cart.total_price == 70
        assert store.cart.version == 3

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_non_positive_quantity_removes(self, store, quantity):
        store.add_item("p1", "1", 1, phone())
        store.add_item("p2", "1", 1, phone())
        target = store.cart.items[0].id

        store.update_quantity(target, quantity)

        assert all(i.id != target for i in store.cart.items)
        assert all(i.quantity >= 1 for i in store.cart.items)

    def test_unknown_id_is_noop(self, store):
        store.add_item("p1", "1", 1, phone())
        store.update_quantity("missing", 4)

        assert store.cart.items[0].quantity == 1
        assert store.cart.version == 1


class TestDerivedValues:
    """Tests for totals and counts."""

    def test_total_for_two_items(self, store):
        store.add_item("p1", "1", 2, phone(price=10))
        store.add_item("p2", "1", 1, phone(price=20))

        assert store.cart.total_price == 40
        assert store.item_count == 3

    def test_invariants_hold_over_random_operations(self, store):
        rng = random.Random(1234)
        products = ["p1", "p2", "p3", "p4"]

        for _ in range(300):
            before = store.cart.version if store.cart else 0
            op = rng.choice(["add", "add", "remove", "update", "missing"])
            if op == "add":
                store.add_item(
                    rng.choice(products),
                    rng.choice(["1", "2"]),
                    rng.randint(1, 4),
                    phone(price=rng.choice([0.5, 10, 19.99, 250])),
                )
            elif op == "missing":
                store.remove_item("missing")
                store.update_quantity("missing", 3)
                assert (store.cart.version if store.cart else 0) == before
                continue
            elif store.cart:
                item_id = rng.choice(store.cart.items).id
                if op == "remove":
                    store.remove_item(item_id)
                else:
                    store.update_quantity(item_id, rng.randint(-2, 6))
            else:
                continue

            if store.cart is None:
                assert store.item_count == 0
                continue

            assert store.cart.total_price == pytest.approx(expected_total(store))
            assert store.item_count == sum(i.quantity for i in store.cart.items)
            assert all(i.quantity >= 1 for i in store.cart.items)
            assert store.cart.version == before + 1


class TestPersistence:
    """Tests for loading and saving the storage slot."""

    def test_every_mutation_is_persisted(self, store, storage):
        store.add_item("p1", "1", 1, phone())
        store.update_quantity(store.cart.items[0].id, 3)

        saved = json.loads(storage.read())
        assert saved["version"] == 2
        assert saved["items"][0]["quantity"] == 3

    def test_restore_from_slot(self, store, storage):
        store.add_item("p1", "1", 2, phone(price=10))
        store.add_item("p2", "1", 1, phone(price=20))

        restored = CartStore(storage)

        assert restored.cart == store.cart
        assert restored.item_count == 3

    def test_restored_total_is_recomputed(self, storage):
        storage.write(json.dumps({
            "id": "local-1",
            "version": 3,
            "items": [{
                "id": "p1-1-1", "product_id": "p1", "name": "Phone",
                "quantity": 2, "price": 10.0, "currency": "USD",
            }],
            "total_price": 999.0,
            "currency": "USD",
        }))

        store = CartStore(storage)

        assert store.cart.total_price == 20.0

    @pytest.mark.parametrize("saved", [
        "{not json",
        json.dumps({"id": "local-1", "version": 1, "items": []}),
        json.dumps({"id": "local-1", "version": 1, "items": [
            {"id": "x", "product_id": "p1", "name": "P", "quantity": 0, "price": 1.0}
        ]}),
        json.dumps([1, 2, 3]),
    ])
    def test_corrupt_slot_is_discarded(self, storage, saved):
        storage.write(saved)

        store = CartStore(storage)

        assert store.cart is None
        assert storage.read() is None

    def test_failed_write_keeps_in_memory_change(self):
        class BrokenStorage(MemoryStorage):
            def write(self, value):
                raise OSError("disk full")

        store = CartStore(BrokenStorage("broken"))
        store.add_item("p1", "1", 1, phone())

        assert store.cart.version == 1
        assert store.item_count == 1

    def test_restored_item_without_variant_merges_with_default(self, storage):
        storage.write(json.dumps({
            "id": "local-1",
            "version": 1,
            "items": [{
                "id": "p1-legacy", "product_id": "p1", "name": "Phone",
                "quantity": 1, "price": 10.0, "currency": "USD",
            }],
            "total_price": 10.0,
            "currency": "USD",
        }))
        store = CartStore(storage)

        store.add_item("p1", quantity=2)

        assert [i.id for i in store.cart.items] == ["p1-legacy"]
        assert store.item_count == 3
        assert store.cart.total_price == 30.0
        assert store.cart.version == 2
