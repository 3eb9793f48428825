"""Tests for cart item management."""

import json
from decimal import Decimal

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import (
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    DeliveredItemsCleared,
)
from protean.exceptions import ValidationError
from shared.entries import CatalogEntry


def _entry(entry_id="1", price="10"):
    return CatalogEntry(
        id=entry_id,
        name=f"Database {entry_id}",
        description="Sample data",
        price=Decimal(price),
        category="General",
        format="CSV",
        size="1 GB",
        records=100,
    )


def _make_cart():
    return ShoppingCart.create(session_id="browser-1")


class TestAddItem:
    def test_add_item(self):
        cart = _make_cart()
        cart.add_item(_entry("1"), 2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_default_quantity_is_one(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        assert cart.items[0].quantity == 1

    def test_add_item_raises_event(self):
        cart = _make_cart()
        cart.add_item(_entry("1", price="2.5"))
        added_events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(added_events) == 1
        event = added_events[0]
        assert event.product_id == "1"
        assert event.unit_price == "2.5"
        assert event.quantity == 1

    def test_add_same_product_increases_quantity(self):
        cart = _make_cart()
        cart.add_item(_entry("1"), 1)
        cart.add_item(_entry("1"), 2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3

    def test_add_different_products_creates_separate_lines(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        cart.add_item(_entry("2"))
        assert len(cart.items) == 2

    def test_add_zero_quantity_rejected(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_item(_entry("1"), 0)
        assert len(cart.items) == 0


class TestUpdateQuantity:
    def test_update_quantity(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        cart.update_item_quantity("1", 5)
        assert cart.items[0].quantity == 5

    def test_update_quantity_raises_event(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        cart._events.clear()
        cart.update_item_quantity("1", 3)
        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 1
        assert event.new_quantity == 3

    def test_update_below_one_rejected(self):
        cart = _make_cart()
        cart.add_item(_entry("1"), 2)
        with pytest.raises(ValidationError):
            cart.update_item_quantity("1", 0)
        assert cart.items[0].quantity == 2

    def test_update_unknown_item_rejected(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.update_item_quantity("missing", 2)


class TestRemoveItem:
    def test_remove_item(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        cart.add_item(_entry("2"))
        cart.remove_item("1")
        assert [line.id for line in cart.lines()] == ["2"]

    def test_remove_item_raises_event(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        cart._events.clear()
        cart.remove_item("1")
        assert len(cart._events) == 1
        assert isinstance(cart._events[0], CartItemRemoved)
        assert cart._events[0].product_id == "1"

    def test_remove_unknown_item_rejected(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.remove_item("missing")


class TestClearItems:
    def test_clears_only_named_lines(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        cart.add_item(_entry("2"))
        cart.add_item(_entry("3"))
        cleared = cart.clear_items(["1", "3"])
        assert cleared == ["1", "3"]
        assert [line.id for line in cart.lines()] == ["2"]

    def test_ids_no_longer_in_cart_are_ignored(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        cleared = cart.clear_items(["1", "gone"])
        assert cleared == ["1"]
        assert cart.lines() == []

    def test_clearing_raises_event_with_removed_ids(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        cart.add_item(_entry("2"))
        cart._events.clear()
        cart.clear_items(["2", "gone"])
        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, DeliveredItemsCleared)
        assert json.loads(event.product_ids) == ["2"]
        assert event.cleared_count == 1

    def test_nothing_to_clear_raises_no_event(self):
        cart = _make_cart()
        cart.add_item(_entry("1"))
        cart._events.clear()
        assert cart.clear_items(["gone"]) == []
        assert cart._events == []
