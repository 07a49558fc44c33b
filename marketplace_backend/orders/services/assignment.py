# orders/services/assignment.py

"""
ORDER ASSIGNMENT SERVICE

Purpose:
- Claim: a courier takes a ready order. Exactly one courier can win.
- Decline: a courier passes on an order and is not offered it again for the
  cooldown window.

Hard rules:
- The claim is ONE conditional UPDATE:
      SET courier = C, status = picked_up
      WHERE id = O AND status = ready_for_pickup AND courier IS NULL
  The database applies it atomically per row; no lock, queue or retry is
  used. A claim that matches zero rows changed nothing.
- A zero-row claim is always disambiguated by re-reading the order, so the
  loser learns who won and when.
- Decline never touches the order row.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.utils import timezone

from orders.models import DeliveryHistory, Order, OrderRejection
from orders.services.delivery_history import record_status_change
from orders.services.rejection_ledger import cooldown_window

logger = logging.getLogger(__name__)

CLAIMABLE_STATUS = Order.Status.READY_FOR_PICKUP
CLAIMED_STATUS = Order.Status.PICKED_UP

DEFAULT_DECLINE_REASON = "No reason provided"


# ============================================================
# DOMAIN ERRORS
# ============================================================


class AssignmentError(Exception):
    """Base assignment exception"""


class OrderUnavailable(AssignmentError):
    """Order does not exist, or is not in a claimable state."""

    def __init__(self, order_id, message="Order not found or not available"):
        super().__init__(message)
        self.order_id = order_id


class OrderAlreadyAssigned(AssignmentError):
    """Another claim won. Carries enough to say who and when."""

    def __init__(self, *, order_id, courier_id, courier_name, assigned_at):
        super().__init__("This order has already been accepted by another delivery person")
        self.order_id = order_id
        self.courier_id = courier_id
        self.courier_name = courier_name
        self.assigned_at = assigned_at


class DuplicateRejection(AssignmentError):
    """The courier already declined this order; the first cooldown stands."""

    def __init__(self, *, order_id, reofferable_after):
        super().__init__("You have already declined this order")
        self.order_id = order_id
        self.reofferable_after = reofferable_after


# ============================================================
# RESULTS
# ============================================================


@dataclass(frozen=True)
class ClaimResult:
    order: Order
    assigned_at: object


@dataclass(frozen=True)
class DeclineResult:
    order_id: object
    rejected_at: object
    reofferable_after: object


# ============================================================
# HELPERS
# ============================================================


def _coerce_order_id(order_id):
    try:
        return uuid.UUID(str(order_id))
    except (TypeError, ValueError, AttributeError):
        raise OrderUnavailable(order_id)


def _assigned_at(order: Order):
    """
    When the order was claimed. The claim's audit row is authoritative;
    updated_at moves again on later status changes.
    """
    claim_row = (
        DeliveryHistory.objects.filter(order=order, to_status=CLAIMED_STATUS)
        .order_by("created_at")
        .first()
    )
    return claim_row.created_at if claim_row else order.updated_at


# ============================================================
# CLAIM
# ============================================================


def claim_order(*, order_id, courier) -> ClaimResult:
    oid = _coerce_order_id(order_id)

    with transaction.atomic():
        now = timezone.now()
        matched = Order.objects.filter(
            pk=oid,
            status=CLAIMABLE_STATUS,
            courier__isnull=True,
        ).update(courier=courier, status=CLAIMED_STATUS, updated_at=now)

        if matched:
            order = Order.objects.select_related("store", "customer", "courier").get(pk=oid)
            record_status_change(
                order=order,
                from_status=CLAIMABLE_STATUS,
                to_status=CLAIMED_STATUS,
                courier_id=courier.pk,
                at=now,
            )
            logger.info(
                "Order claimed",
                extra={"order_id": str(oid), "courier_id": str(courier.pk)},
            )
            return ClaimResult(order=order, assigned_at=now)

    # Lost (or never eligible): find out which.
    current = Order.objects.select_related("courier").filter(pk=oid).first()

    if current is not None and current.courier_id is not None:
        logger.info(
            "Claim lost",
            extra={
                "order_id": str(oid),
                "courier_id": str(courier.pk),
                "winner_id": str(current.courier_id),
            },
        )
        raise OrderAlreadyAssigned(
            order_id=oid,
            courier_id=current.courier_id,
            courier_name=current.courier.display_name if current.courier else "Unknown",
            assigned_at=_assigned_at(current),
        )

    raise OrderUnavailable(oid)


# ============================================================
# DECLINE
# ============================================================


def decline_order(*, order_id, courier, reason: str | None = None) -> DeclineResult:
    oid = _coerce_order_id(order_id)

    if not Order.objects.filter(pk=oid).exists():
        raise OrderUnavailable(oid, message="Order not found")

    now = timezone.now()
    text = ("" if reason is None else str(reason)).strip() or DEFAULT_DECLINE_REASON

    try:
        # Savepoint: a duplicate must not poison an outer transaction.
        with transaction.atomic():
            rejection = OrderRejection.objects.create(
                order_id=oid,
                courier=courier,
                reason=text,
                rejected_at=now,
                reofferable_after=now + cooldown_window(),
            )
    except IntegrityError:
        existing = OrderRejection.objects.filter(order_id=oid, courier=courier).first()
        if existing is None:
            raise
        raise DuplicateRejection(order_id=oid, reofferable_after=existing.reofferable_after)

    logger.info(
        "Order declined",
        extra={
            "order_id": str(oid),
            "courier_id": str(courier.pk),
            "reofferable_after": rejection.reofferable_after.isoformat(),
        },
    )
    return DeclineResult(
        order_id=oid,
        rejected_at=rejection.rejected_at,
        reofferable_after=rejection.reofferable_after,
    )
