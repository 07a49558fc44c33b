# orders/services/rejection_ledger.py

"""
REJECTION / COOLDOWN LEDGER

A courier who declines an order is not offered it again until the row's
`reofferable_after` passes. Expired rows are never deleted; they just stop
matching.

The exclusion is part of the available-orders query itself (NOT EXISTS
subquery), never a Python post-filter.
"""

from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.db.models import Exists, OuterRef
from django.utils import timezone

from orders.models import Order, OrderRejection


def cooldown_window() -> timedelta:
    return timedelta(minutes=int(settings.REJECTION_COOLDOWN_MINUTES))


def active_rejections(courier_id, now=None):
    now = now or timezone.now()
    return OrderRejection.objects.filter(courier_id=courier_id, reofferable_after__gt=now)


def is_excluded(order_id, courier_id, now=None) -> bool:
    return active_rejections(courier_id, now=now).filter(order_id=order_id).exists()


def available_orders_for_courier(courier, now=None):
    """
    Orders a courier may claim right now: ready for pickup, nobody assigned,
    and not inside this courier's cooldown for that order.
    """
    now = now or timezone.now()

    blocked = OrderRejection.objects.filter(
        order=OuterRef("pk"),
        courier=courier,
        reofferable_after__gt=now,
    )

    return (
        Order.objects.select_related("store", "customer")
        .filter(status=Order.Status.READY_FOR_PICKUP, courier__isnull=True)
        .filter(~Exists(blocked))
        .order_by("created_at")
    )
