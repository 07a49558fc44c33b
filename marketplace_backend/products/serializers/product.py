# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Catalog card for customers, and the write shape retailers use to list a
  product in one of their stores.
- Store ownership is checked here so the view stays thin.
"""

from decimal import Decimal

from rest_framework import serializers

from products.models import Product, ProductCategory
from store.models import Store


class ProductSerializer(serializers.ModelSerializer):
    """
    Canonical Product Serializer.

    GUARANTEES:
    - SKU is normalized (trimmed, upper case)
    - price > 0, stock_quantity >= 0
    - a retailer can only list products in a store they own
    """

    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all())
    store_name = serializers.CharField(source="store.name", read_only=True)
    category = serializers.ChoiceField(choices=ProductCategory.choices, required=False)

    class Meta:
        model = Product
        fields = [
            "id",
            "store",
            "store_name",
            "sku",
            "name",
            "description",
            "category",
            "price",
            "stock_quantity",
            "is_available",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "store_name",
            "created_at",
            "updated_at",
        ]
        # (store, sku) uniqueness is checked in validate() with a clearer message.
        validators = []

    def validate_sku(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("SKU is required")
        return value

    def validate_price(self, value):
        if value is None or value <= Decimal("0.00"):
            raise serializers.ValidationError("Price must be greater than zero")
        return value

    def validate_stock_quantity(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("Stock cannot be negative")
        return value

    def validate_store(self, store):
        request = self.context.get("request")
        user = getattr(request, "user", None)
        if not store.is_owned_by(user):
            raise serializers.ValidationError("You can only list products in your own store")
        return store

    def validate(self, attrs):
        store = attrs.get("store") or getattr(self.instance, "store", None)
        sku = attrs.get("sku") or getattr(self.instance, "sku", None)

        if store and sku:
            clash = Product.objects.filter(store=store, sku=sku)
            if self.instance is not None:
                clash = clash.exclude(pk=self.instance.pk)
            if clash.exists():
                raise serializers.ValidationError({"sku": "This store already lists a product with that SKU"})

        return attrs
