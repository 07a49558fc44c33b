from rest_framework import serializers

from store.models import Store


class StoreSerializer(serializers.ModelSerializer):
    """
    Store card for customers; owner is always the authenticated retailer.
    """

    owner_id = serializers.UUIDField(source="owner.id", read_only=True)

    class Meta:
        model = Store
        fields = [
            "id",
            "owner_id",
            "name",
            "description",
            "address",
            "phone",
            "open_hours",
            "is_open",
            "rating_avg",
            "rating_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "owner_id",
            "rating_avg",
            "rating_count",
            "created_at",
            "updated_at",
        ]
