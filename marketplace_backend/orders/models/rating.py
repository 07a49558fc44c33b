# orders/models/rating.py

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q

from store.models import Store

from .order import Order


class Rating(models.Model):
    """
    A customer's 1-5 rating of the store or of the courier for one order.
    Exactly one of `store` / `courier` is set, matching `rating_type`.
    """

    class RatingType(models.TextChoices):
        STORE = "store", "Store"
        DELIVERY = "delivery", "Delivery"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="ratings")

    rater = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ratings_given",
    )

    rating_type = models.CharField(max_length=10, choices=RatingType.choices)

    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="ratings",
    )
    courier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="ratings_received",
    )

    rating = models.PositiveSmallIntegerField()
    comment = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "rater", "rating_type"],
                name="uniq_rating_per_order_rater_type",
            ),
            models.CheckConstraint(
                condition=Q(rating__gte=1) & Q(rating__lte=5),
                name="rating_between_1_and_5",
            ),
        ]

    def __str__(self):
        return f"{self.rating_type} rating {self.rating} for {self.order_id}"
