"""
PATH: cart/serializers/cart_item.py

CART SERIALIZERS

Purpose:
- Serialize cart lines for the storefront.
- price_snapshot is read-only (server-controlled).
- Present the cart the way checkout will split it: grouped by store, with a
  subtotal per store and a grand total.
"""

from decimal import Decimal

from rest_framework import serializers

from cart.models import CartItem


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    store_id = serializers.UUIDField(source="product.store_id", read_only=True)

    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "store_id",
            "quantity",
            "price_snapshot",
            "line_total",
            "created_at",
        ]
        read_only_fields = fields


class VendorGroupSerializer(serializers.Serializer):
    store_id = serializers.UUIDField(read_only=True)
    store_name = serializers.CharField(source="store.name", read_only=True)
    items = CartItemSerializer(many=True, read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class CartSerializer(serializers.Serializer):
    """
    Input: a list of VendorGroup objects.
    """

    def to_representation(self, groups):
        total = sum((g.subtotal for g in groups), Decimal("0.00"))
        return {
            "stores": VendorGroupSerializer(groups, many=True).data,
            "item_count": sum(len(g.items) for g in groups),
            "total": f"{total:.2f}",
        }


class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemInputSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)
