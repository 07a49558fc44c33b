# store/models/store.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models


class Store(models.Model):
    """
    A neighbourhood shop owned by one retailer.

    Guarantees:
    - ownership is self-describing: whoever is `owner` may move the store's
      orders forward (confirm, mark ready, cancel)
    - rating aggregates are recomputed from Rating rows, never typed in
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="stores",
    )

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    address = models.CharField(max_length=500)
    phone = models.CharField(max_length=20, blank=True)
    open_hours = models.CharField(max_length=100, default="9:00 AM - 9:00 PM")

    is_open = models.BooleanField(default=True)

    rating_avg = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal("0.00"))
    rating_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["owner"], name="store_owner_idx"),
        ]

    def is_owned_by(self, user) -> bool:
        return bool(user and getattr(user, "pk", None) and self.owner_id == user.pk)

    def __str__(self):
        return self.name
