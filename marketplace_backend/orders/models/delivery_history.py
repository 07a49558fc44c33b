# orders/models/delivery_history.py

"""
DELIVERY HISTORY (APPEND-ONLY)

One row per order status change: old -> new status and the courier on the
order at that moment. Created once. Never updated. Never deleted.
"""

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from .order import Order


class DeliveryHistory(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="history")

    courier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="delivery_history",
    )

    from_status = models.CharField(max_length=20, blank=True)
    to_status = models.CharField(max_length=20)

    action = models.CharField(max_length=100)
    note = models.TextField(blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at"]
        verbose_name_plural = "delivery history"
        indexes = [
            models.Index(fields=["order", "created_at"], name="history_order_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("DeliveryHistory records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("DeliveryHistory records cannot be deleted")

    def __str__(self):
        return f"{self.order_id}: {self.from_status} -> {self.to_status}"
