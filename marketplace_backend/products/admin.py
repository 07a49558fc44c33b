# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:
- stock_quantity is editable for manual corrections; the DB check constraint
  still refuses negative values.
"""

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "store", "category", "price", "stock_quantity", "is_available")
    list_filter = ("category", "is_available", "store")
    search_fields = ("name", "sku", "store__name")
    readonly_fields = ("created_at", "updated_at")
