# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from store.models import Store


class ProductCategory(models.TextChoices):
    GROCERIES = "groceries", "Groceries"
    VEGETABLES = "vegetables", "Vegetables"
    FRUITS = "fruits", "Fruits"
    DAIRY = "dairy", "Dairy"
    BAKERY = "bakery", "Bakery"
    SNACKS = "snacks", "Snacks"
    BEVERAGES = "beverages", "Beverages"
    HOUSEHOLD = "household", "Household"
    PERSONAL_CARE = "personal_care", "Personal care"
    ELECTRONICS = "electronics", "Electronics"


class Product(models.Model):
    """
    Represents a sellable product listed by one store.

    STOCK MODEL (IMPORTANT):
    - stock_quantity is a plain counter on the row
    - it is only ever decremented through products.services.inventory.reduce_stock()
      (conditional UPDATE), so it can never go below zero
    - the database also refuses negative values (check constraint)

    PRICE:
    - price is the live selling price; carts and order lines keep their own
      snapshot of it
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name="products",
    )

    sku = models.CharField(max_length=50)
    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True)

    price = models.DecimalField(max_digits=10, decimal_places=2)
    stock_quantity = models.IntegerField(default=0)

    category = models.CharField(
        max_length=20,
        choices=ProductCategory.choices,
        default=ProductCategory.GROCERIES,
    )

    is_available = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["store", "sku"], name="uniq_product_sku_per_store"),
            models.CheckConstraint(condition=Q(stock_quantity__gte=0), name="product_stock_non_negative"),
            models.CheckConstraint(condition=Q(price__gt=0), name="product_price_positive"),
        ]
        indexes = [
            models.Index(fields=["store", "is_available"], name="product_store_avail_idx"),
            models.Index(fields=["category"], name="product_category_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def clean(self):
        self.sku = (self.sku or "").strip().upper()
        if not self.sku:
            raise ValidationError({"sku": "SKU is required"})

        if self.price is None or Decimal(self.price) <= 0:
            raise ValidationError({"price": "Price must be greater than zero"})

        if self.stock_quantity is None or int(self.stock_quantity) < 0:
            raise ValidationError({"stock_quantity": "Stock cannot be negative"})

        if self.category not in ProductCategory.values:
            raise ValidationError({"category": f"Unknown category '{self.category}'"})

    @property
    def is_purchasable(self) -> bool:
        return bool(self.is_available and self.stock_quantity > 0)
