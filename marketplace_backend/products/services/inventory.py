# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
INVENTORY CORE SERVICES

Purpose:
- Reduce a product's stock for a placed order line.

Rules:
- Quantities are positive integers.
- The decrement is ONE conditional UPDATE (stock >= quantity), evaluated by
  the database. Two checkouts racing for the last unit cannot both win and
  stock can never go negative.
- Callers inside a transaction decide what a miss means (checkout rolls back
  the vendor group).
"""

from __future__ import annotations

import logging

from django.db.models import F

from products.models import Product

logger = logging.getLogger(__name__)


def reduce_stock(product_id, quantity: int) -> bool:
    """
    Decrement stock_quantity by `quantity` if at least that much is left.

    Returns True when the row was updated, False when the product is missing
    or does not hold enough stock.
    """
    if isinstance(quantity, bool) or int(quantity) <= 0:
        raise ValueError("quantity must be a positive integer")

    qty = int(quantity)

    updated = Product.objects.filter(
        pk=product_id,
        stock_quantity__gte=qty,
    ).update(stock_quantity=F("stock_quantity") - qty)

    if not updated:
        logger.info(
            "Stock reduction refused",
            extra={"product_id": str(product_id), "quantity": qty},
        )

    return bool(updated)
