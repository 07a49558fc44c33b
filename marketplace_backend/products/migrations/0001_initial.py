"""
MIGRATION: CREATE Product (store-scoped SKU, non-negative stock)
"""

from __future__ import annotations

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("store", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("sku", models.CharField(max_length=50)),
                ("name", models.CharField(db_index=True, max_length=200)),
                ("description", models.TextField(blank=True)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("stock_quantity", models.IntegerField(default=0)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("groceries", "Groceries"),
                            ("vegetables", "Vegetables"),
                            ("fruits", "Fruits"),
                            ("dairy", "Dairy"),
                            ("bakery", "Bakery"),
                            ("snacks", "Snacks"),
                            ("beverages", "Beverages"),
                            ("household", "Household"),
                            ("personal_care", "Personal care"),
                            ("electronics", "Electronics"),
                        ],
                        default="groceries",
                        max_length=20,
                    ),
                ),
                ("is_available", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "store",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to="store.store",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["store", "is_available"], name="product_store_avail_idx"),
                    models.Index(fields=["category"], name="product_category_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("store", "sku"), name="uniq_product_sku_per_store"),
                    models.CheckConstraint(condition=models.Q(("stock_quantity__gte", 0)), name="product_stock_non_negative"),
                    models.CheckConstraint(condition=models.Q(("price__gt", 0)), name="product_price_positive"),
                ],
            },
        ),
    ]
