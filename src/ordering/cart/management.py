"""Cart management: commands and handler.

Handles cart creation and the post-delivery sweep issued by checkout.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class CreateCart:
    """Create a new, empty shopping cart for a browser session."""

    session_id = String(max_length=255)


@ordering.command(part_of="ShoppingCart")
class ClearDeliveredItems:
    """Remove the lines a settled checkout delivered."""

    cart_id = Identifier(required=True)
    product_ids = Text(required=True)  # JSON: list of product ids


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = ShoppingCart.create(session_id=command.session_id)
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(ClearDeliveredItems)
    def clear_delivered_items(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)

        product_ids = (
            json.loads(command.product_ids) if isinstance(command.product_ids, str) else command.product_ids
        )

        cleared = cart.clear_items(product_ids)
        repo.add(cart)
        return cleared
