# orders/models/rejection.py

import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

from .order import Order


class OrderRejection(models.Model):
    """
    A courier declined an order. The order is hidden from that courier until
    `reofferable_after`. One row per (order, courier); expired rows are kept
    for audit and simply stop matching.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="rejections")

    courier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="order_rejections",
    )

    reason = models.TextField(blank=True, default="No reason provided")

    rejected_at = models.DateTimeField(default=timezone.now)
    reofferable_after = models.DateTimeField()

    class Meta:
        ordering = ["-rejected_at"]
        constraints = [
            models.UniqueConstraint(fields=["order", "courier"], name="uniq_rejection_per_order_courier"),
        ]
        indexes = [
            models.Index(fields=["courier", "reofferable_after"], name="rejection_courier_until_idx"),
        ]

    def save(self, *args, **kwargs):
        if self.reofferable_after is None:
            minutes = int(settings.REJECTION_COOLDOWN_MINUTES)
            self.reofferable_after = self.rejected_at + timedelta(minutes=minutes)
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"Rejection {self.order_id} by {self.courier_id}"
