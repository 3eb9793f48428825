"""Shopping Cart aggregate (CQRS): the lines a shopper intends to buy.

Each line snapshots the catalogue entry it was added from and is keyed by
that entry's id, so a product appears at most once and re-adding it bumps
the quantity. Quantities never drop below one: a line leaves the cart by
being removed, either by the shopper or by the post-delivery sweep of a
settled checkout.
"""

import json
from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text
from shared.entries import CartLine, CatalogEntry

from ordering.cart.events import (
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    DeliveredItemsCleared,
)
from ordering.domain import ordering


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    name = Text(required=True)
    description = Text()
    unit_price = Text(required=True)  # Exact decimal, as text
    category = String(max_length=255)
    format = String(max_length=255)
    size = String(max_length=255)
    records = Integer(default=0, min_value=0)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    def to_line(self) -> CartLine:
        return CartLine(
            id=str(self.product_id),
            name=self.name,
            description=self.description or "",
            price=Decimal(self.unit_price),
            category=self.category or "",
            format=self.format or "",
            size=self.size or "",
            records=self.records or 0,
            quantity=self.quantity,
        )


@ordering.aggregate
class ShoppingCart:
    session_id = String(max_length=255)  # Browser session the cart belongs to
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def product_must_appear_once(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in the cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id=None):
        now = datetime.now(UTC)
        return cls(
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def lines(self) -> list[CartLine]:
        """Snapshot of the cart lines, in the order they were added."""
        return [item.to_line() for item in self.items]

    def total_quantity(self) -> int:
        """Number shown on the cart badge."""
        return sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, entry: CatalogEntry, quantity: int = 1):
        """Add a catalogue entry (or increase its quantity if already present)."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not entry.price.is_finite() or entry.price < 0:
            raise ValidationError({"unit_price": ["Price must be a non-negative number"]})

        existing = self.find_item(entry.id)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=entry.id,
                name=entry.name,
                description=entry.description,
                unit_price=str(entry.price),
                category=entry.category,
                format=entry.format,
                size=entry.size,
                records=entry.records,
                quantity=quantity,
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                product_id=str(entry.id),
                unit_price=str(entry.price),
                quantity=quantity,
            )
        )

    def update_item_quantity(self, product_id, new_quantity: int):
        """Set the quantity of an existing line."""
        if new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1; remove the item instead"]})

        item = self.find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove a line from the cart."""
        item = self.find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
            )
        )

    def clear_items(self, product_ids: Iterable[str]) -> list[str]:
        """Remove the given lines after delivery; ids no longer in the cart are ignored.

        Returns the ids that were actually removed.
        """
        cleared = []
        for product_id in product_ids:
            item = self.find_item(product_id)
            if item is None:
                continue
            self.remove_items(item)
            cleared.append(str(product_id))

        if cleared:
            self.updated_at = datetime.now(UTC)
            self.raise_(
                DeliveredItemsCleared(
                    cart_id=str(self.id),
                    product_ids=json.dumps(cleared),
                    cleared_count=len(cleared),
                )
            )
        return cleared
