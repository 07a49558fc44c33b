# orders/services/delivery_history.py

"""
DELIVERY HISTORY WRITER

Every operation that changes an order's status calls record_status_change()
right after the status write, inside the same transaction. There is no
database trigger doing this behind the service's back.
"""

from __future__ import annotations

import logging

from django.utils import timezone

from orders.models import DeliveryHistory, Order

logger = logging.getLogger(__name__)


def _label(status: str) -> str:
    try:
        return Order.Status(status).label
    except ValueError:
        return status


def record_status_change(
    *,
    order,
    from_status: str,
    to_status: str,
    courier_id=None,
    at=None,
) -> DeliveryHistory | None:
    """
    Append one audit row for a status change.
    No row is written when the status text did not change.
    """
    if from_status == to_status:
        return None

    entry = DeliveryHistory.objects.create(
        order=order,
        courier_id=courier_id,
        from_status=from_status or "",
        to_status=to_status,
        action=f"Status changed to {_label(to_status)}",
        note=f"From {_label(from_status)}" if from_status else "",
        created_at=at or timezone.now(),
    )

    logger.info(
        "Order status changed",
        extra={
            "order_id": str(order.pk),
            "from_status": from_status,
            "to_status": to_status,
            "courier_id": str(courier_id) if courier_id else None,
        },
    )
    return entry
