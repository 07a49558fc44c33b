# orders/models/order.py

"""
ORDER + ORDER ITEM

One Order per store per checkout. The order row is the single shared
mutable resource couriers compete for.

Invariants:
- courier stays NULL until a courier claims the order; only the claim
  service writes it (a conditional UPDATE), and nothing ever clears it
- status moves along orders.services.order_lifecycle only
- total_amount is the sum of its items' quantity x price, stamped once at
  checkout and never recomputed
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from products.models import Product
from store.models import Store


class Order(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        CONFIRMED = "confirmed", "Confirmed"
        READY_FOR_PICKUP = "ready_for_pickup", "Ready for pickup"
        ASSIGNED = "assigned", "Assigned"
        PICKED_UP = "picked_up", "Picked up"
        DELIVERING = "delivering", "Delivering"
        DELIVERED = "delivered", "Delivered"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"
        FAILED = "failed", "Failed"
        REFUNDED = "refunded", "Refunded"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )

    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name="orders",
    )

    courier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="deliveries",
    )

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_address = models.TextField()
    notes = models.TextField(blank=True)

    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    paid_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    # Flat fee credited to the courier who delivers this order.
    delivery_earning = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(condition=Q(total_amount__gte=0), name="order_total_non_negative"),
        ]
        indexes = [
            models.Index(fields=["status", "courier"], name="order_status_courier_idx"),
            models.Index(fields=["store", "status"], name="order_store_status_idx"),
            models.Index(fields=["customer", "created_at"], name="order_customer_created_idx"),
            models.Index(fields=["updated_at"], name="order_updated_idx"),
        ]

    def clean(self):
        if self.status not in self.Status.values:
            raise ValidationError({"status": f"Unknown order status '{self.status}'"})
        if self.payment_status not in self.PaymentStatus.values:
            raise ValidationError({"payment_status": f"Unknown payment status '{self.payment_status}'"})

    def is_participant(self, user) -> bool:
        """Customer, assigned courier, or owner of the store."""
        uid = getattr(user, "pk", None)
        if uid is None:
            return False
        return uid in (self.customer_id, self.courier_id) or self.store.owner_id == uid

    def __str__(self):
        return f"Order {self.id} | {self.store_id} | {self.status}"


class OrderItem(models.Model):
    """
    Immutable order line. Name and price are captured at checkout and never
    follow later product changes.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")

    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="order_items")

    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(condition=Q(quantity__gt=0), name="order_item_quantity_positive"),
            models.CheckConstraint(condition=Q(price__gte=0), name="order_item_price_non_negative"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("OrderItem records are immutable")
        return super().save(*args, **kwargs)

    @property
    def line_total(self) -> Decimal:
        return (self.price or Decimal("0.00")) * Decimal(int(self.quantity or 0))

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
