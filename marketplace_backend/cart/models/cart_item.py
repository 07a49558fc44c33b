# cart/models/cart_item.py

"""
CART ITEM MODEL

Purpose:
- A customer's pending line for one product, before checkout.
- One cart per customer spanning many stores; checkout splits it by store.

Rules:
- One row per (user, product) (DB constraint).
- Quantity must be > 0.
- price_snapshot is taken from Product.price when the line is first added
  (server-controlled); checkout charges the snapshot.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product


class CartItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )

    quantity = models.PositiveIntegerField(help_text="Must be greater than zero")

    price_snapshot = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Product price at time of adding to cart (server-controlled)",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "product"],
                name="unique_product_per_user_cart",
            )
        ]

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError({"quantity": "Quantity must be greater than zero"})

        if self.price_snapshot is None or self.price_snapshot <= 0:
            raise ValidationError({"price_snapshot": "Price must be greater than zero"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def line_total(self) -> Decimal:
        return (self.price_snapshot or Decimal("0.00")) * Decimal(int(self.quantity or 0))

    def __str__(self):
        return f"{getattr(self.product, 'name', 'Product')} x {self.quantity}"
