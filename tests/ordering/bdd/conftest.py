"""Shared BDD fixtures and step definitions for the Ordering domain."""

from decimal import Decimal

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import add_to_cart_command
from ordering.cart.management import CreateCart
from ordering.checkout.machine import CheckoutStateMachine
from protean import current_domain
from pytest_bdd import given, parsers, then
from shared.entries import CatalogEntry


def _entry(product_id, price):
    return CatalogEntry(
        id=product_id,
        name=f"Database {product_id}",
        description="Sample data",
        price=Decimal(str(price)),
        category="General",
        format="CSV",
        size="1 GB",
        records=10,
    )


def _add_entry(cart_id, product_id, price, quantity=1):
    current_domain.process(
        add_to_cart_command(cart_id, _entry(product_id, price), quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def add_line():
    """Add a catalogue entry to a cart by id and price."""
    return _add_entry


@pytest.fixture()
def outcome():
    """Container for the value returned by the last initiation."""
    return {"accepted": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart with a checkout", target_fixture="checkout")
def empty_cart_with_checkout(timer, gateway, channel):
    cart_id = current_domain.process(CreateCart(session_id="bdd-session"), asynchronous=False)
    return CheckoutStateMachine(
        cart_id=cart_id,
        timer=timer,
        wallet_address="1BddWallet",
        settlement_delay=3.0,
        auto_clear_delay=5.0,
    )


@given(parsers.cfparse('the cart holds "{product_id}" priced {price} with quantity {quantity:d}'))
def cart_holds(checkout, product_id, price, quantity):
    _add_entry(checkout.cart_id, product_id, price, quantity)


@given("settlement will fail")
def settlement_will_fail(gateway):
    gateway.configure(should_succeed=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the checkout phase is "{phase}"'))
def checkout_phase_is(checkout, phase):
    assert checkout.phase.value == phase


@then(parsers.cfparse("the cart holds {count:d} line"))
def cart_holds_n_lines(checkout, count):
    cart = current_domain.repository_for(ShoppingCart).get(checkout.cart_id)
    assert len(cart.lines()) == count


@then("the cart is empty")
def cart_is_empty(checkout):
    cart = current_domain.repository_for(ShoppingCart).get(checkout.cart_id)
    assert cart.lines() == []


@then(parsers.cfparse('the shopper is notified "{title}"'))
def shopper_notified(channel, title):
    assert channel.titles[-1] == title
