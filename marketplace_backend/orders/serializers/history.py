from rest_framework import serializers

from orders.models import DeliveryHistory


class DeliveryHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryHistory
        fields = ["id", "order", "courier", "from_status", "to_status", "action", "note", "created_at"]
        read_only_fields = fields
