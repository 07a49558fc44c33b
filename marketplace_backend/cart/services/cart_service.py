# cart/services/cart_service.py

"""
CART SERVICE

Purpose:
- Add products to a customer's cart (server-owned price snapshot).
- Change or clear line quantities.
- Partition cart lines into vendor groups, one per store, for display and
  for checkout.

Rules:
- Only available products of open stores can be added.
- Re-adding a product increments the existing line; the snapshot taken on
  first add is kept.
- Setting quantity to 0 removes the line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction

from cart.models import CartItem
from products.models import Product

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


class CartError(Exception):
    """Base cart exception"""


class ProductUnavailableError(CartError):
    pass


@dataclass
class VendorGroup:
    store: object
    items: list = field(default_factory=list)

    @property
    def store_id(self):
        return self.store.pk

    @property
    def subtotal(self) -> Decimal:
        total = sum((item.line_total for item in self.items), Decimal("0.00"))
        return total.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_positive_int(value, *, allow_zero=False) -> int:
    if isinstance(value, bool):
        raise CartError("quantity must be a whole number")
    try:
        qty = int(value)
    except (TypeError, ValueError):
        raise CartError("quantity must be a whole number")

    if qty < 0 or (qty == 0 and not allow_zero):
        raise CartError("quantity must be greater than zero")
    return qty


@transaction.atomic
def add_to_cart(*, user, product_id, quantity=1) -> CartItem:
    qty = _to_positive_int(quantity)

    product = (
        Product.objects.select_related("store")
        .filter(pk=product_id)
        .first()
    )
    if product is None or not product.is_available or not product.store.is_open:
        raise ProductUnavailableError("Product is not available")

    item = (
        CartItem.objects.select_for_update()
        .filter(user=user, product=product)
        .first()
    )

    if item is None:
        item = CartItem.objects.create(
            user=user,
            product=product,
            quantity=qty,
            price_snapshot=product.price,
        )
    else:
        item.quantity = int(item.quantity) + qty
        item.save(update_fields=["quantity", "updated_at"])

    logger.debug(
        "Cart line updated",
        extra={"user_id": str(user.pk), "product_id": str(product.pk), "quantity": item.quantity},
    )
    return item


@transaction.atomic
def set_cart_quantity(*, user, item_id, quantity) -> CartItem | None:
    """
    Returns the updated line, or None when quantity 0 removed it.
    Raises CartItem.DoesNotExist for lines that are not the caller's.
    """
    qty = _to_positive_int(quantity, allow_zero=True)

    item = CartItem.objects.select_for_update().get(pk=item_id, user=user)

    if qty == 0:
        item.delete()
        return None

    item.quantity = qty
    item.save(update_fields=["quantity", "updated_at"])
    return item


def group_cart_by_store(items) -> list[VendorGroup]:
    """
    Partition cart lines by their product's store, preserving first-seen order.
    """
    groups: dict = {}
    for item in items:
        store = item.product.store
        group = groups.get(store.pk)
        if group is None:
            group = groups[store.pk] = VendorGroup(store=store)
        group.items.append(item)
    return list(groups.values())
