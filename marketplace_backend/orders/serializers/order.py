"""
PATH: orders/serializers/order.py

ORDER SERIALIZERS (read-only)

Orders are only ever written by services; these shapes are for output.
Participant display fields (store name/address, customer name/phone,
courier name) are resolved here so the courier app needs no second call.
"""

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product_id", "product_name", "quantity", "price", "line_total"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    store = serializers.SerializerMethodField()
    customer = serializers.SerializerMethodField()
    courier = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "status",
            "store",
            "customer",
            "courier",
            "total_amount",
            "delivery_address",
            "notes",
            "payment_status",
            "paid_amount",
            "delivery_earning",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_store(self, obj):
        return {"id": str(obj.store_id), "name": obj.store.name, "address": obj.store.address}

    def get_customer(self, obj):
        c = obj.customer
        return {"id": str(c.pk), "name": c.display_name, "phone": c.phone}

    def get_courier(self, obj):
        if obj.courier_id is None:
            return None
        return {"id": str(obj.courier_id), "name": obj.courier.display_name}
