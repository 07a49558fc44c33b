from rest_framework import serializers

from orders.models import Rating


class RatingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Rating
        fields = ["id", "order", "rating_type", "store", "courier", "rating", "comment", "created_at"]
        read_only_fields = fields


class RatingInputSerializer(serializers.Serializer):
    rating_type = serializers.ChoiceField(choices=Rating.RatingType.choices)
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default="")
