"""Cart item management: commands and handler."""

from decimal import Decimal, InvalidOperation

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from shared.entries import CatalogEntry

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    """Add a catalogue entry to the cart; the entry's fields are snapshotted onto the line."""

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    name = Text(required=True)
    description = Text()
    unit_price = Text(required=True)
    category = String(max_length=255)
    format = String(max_length=255)
    size = String(max_length=255)
    records = Integer(default=0, min_value=0)
    quantity = Integer(default=1, min_value=1)


@ordering.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


def add_to_cart_command(cart_id, entry: CatalogEntry, quantity: int = 1) -> AddToCart:
    """Build an AddToCart command from a catalogue entry."""
    return AddToCart(
        cart_id=cart_id,
        product_id=entry.id,
        name=entry.name,
        description=entry.description,
        unit_price=str(entry.price),
        category=entry.category,
        format=entry.format,
        size=entry.size,
        records=entry.records,
        quantity=quantity,
    )


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        try:
            price = Decimal(command.unit_price)
        except InvalidOperation as exc:
            raise ValidationError({"unit_price": ["Price must be a decimal number"]}) from exc

        cart.add_item(
            CatalogEntry(
                id=str(command.product_id),
                name=command.name,
                description=command.description or "",
                price=price,
                category=command.category or "",
                format=command.format or "",
                size=command.size or "",
                records=command.records or 0,
            ),
            quantity=command.quantity or 1,
        )
        repo.add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.update_item_quantity(
            product_id=command.product_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.remove_item(product_id=command.product_id)
        repo.add(cart)
