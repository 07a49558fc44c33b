"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions for Order
entities, and who may trigger each one.

    pending -> confirmed -> ready_for_pickup -> picked_up -> delivering
            -> delivered -> completed
    (ready_for_pickup -> assigned -> picked_up is accepted as well)
    cancelled from any state before delivery

Authority is decided by comparing the caller to references stored on the
row (store owner, courier, customer). There is no per-order permission
table.

ready_for_pickup -> picked_up / assigned is NOT reachable from here: only
orders.services.assignment.claim_order() may set the courier.
"""

from __future__ import annotations

from django.db import transaction
from django.utils import timezone

from orders.models import Order
from orders.services.delivery_history import record_status_change

S = Order.Status

# ============================================================
# DOMAIN ERRORS
# ============================================================


class OrderLifecycleError(Exception):
    pass


class OrderNotFoundError(OrderLifecycleError):
    pass


class InvalidOrderTransitionError(OrderLifecycleError):
    pass


class TransitionNotPermittedError(OrderLifecycleError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    S.COMPLETED,
    S.CANCELLED,
}

CANCELLABLE_STATES = {
    S.PENDING,
    S.CONFIRMED,
    S.READY_FOR_PICKUP,
    S.ASSIGNED,
    S.PICKED_UP,
    S.DELIVERING,
}

ALLOWED_TRANSITIONS = {
    S.PENDING: {S.CONFIRMED, S.CANCELLED},
    S.CONFIRMED: {S.READY_FOR_PICKUP, S.CANCELLED},
    S.READY_FOR_PICKUP: {S.ASSIGNED, S.PICKED_UP, S.CANCELLED},
    S.ASSIGNED: {S.PICKED_UP, S.CANCELLED},
    S.PICKED_UP: {S.DELIVERING, S.CANCELLED},
    S.DELIVERING: {S.DELIVERED, S.CANCELLED},
    S.DELIVERED: {S.COMPLETED},
}

ACTOR_STORE_OWNER = "store_owner"
ACTOR_COURIER = "courier"
ACTOR_CUSTOMER = "customer"
ACTOR_CLAIM = "claim"

TRANSITION_AUTHORITY = {
    (S.PENDING, S.CONFIRMED): ACTOR_STORE_OWNER,
    (S.CONFIRMED, S.READY_FOR_PICKUP): ACTOR_STORE_OWNER,
    (S.READY_FOR_PICKUP, S.ASSIGNED): ACTOR_CLAIM,
    (S.READY_FOR_PICKUP, S.PICKED_UP): ACTOR_CLAIM,
    (S.ASSIGNED, S.PICKED_UP): ACTOR_COURIER,
    (S.PICKED_UP, S.DELIVERING): ACTOR_COURIER,
    (S.DELIVERING, S.DELIVERED): ACTOR_COURIER,
    (S.DELIVERED, S.COMPLETED): ACTOR_CUSTOMER,
}
TRANSITION_AUTHORITY.update({(state, S.CANCELLED): ACTOR_STORE_OWNER for state in CANCELLABLE_STATES})


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if target_status not in S.values:
        raise InvalidOrderTransitionError(f"Unknown order status '{target_status}'")

    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidOrderTransitionError(
            f"Order {order.id} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )


def resolve_actor_kind(*, order: Order, user) -> str | None:
    uid = getattr(user, "pk", None)
    if uid is None:
        return None
    if order.store.owner_id == uid:
        return ACTOR_STORE_OWNER
    if order.courier_id is not None and order.courier_id == uid:
        return ACTOR_COURIER
    if order.customer_id == uid:
        return ACTOR_CUSTOMER
    return None


# ============================================================
# APPLICATION SERVICE
# ============================================================


def advance_order_status(*, order_id, actor, target_status: str) -> Order:
    """
    Move an order one step along the lifecycle on behalf of `actor`.

    The write is conditional on the status we validated against, so a
    concurrent change makes this call fail instead of skipping a state.
    Exactly one history row is written per successful call.
    """
    with transaction.atomic():
        order = (
            Order.objects.select_for_update(of=("self",))
            .select_related("store")
            .filter(pk=order_id)
            .first()
        )
        if order is None:
            raise OrderNotFoundError("Order not found")

        validate_transition(order=order, target_status=target_status)

        from_status = order.status
        required = TRANSITION_AUTHORITY.get((from_status, target_status))

        if required == ACTOR_CLAIM:
            raise TransitionNotPermittedError(
                "Couriers take ready orders through accept-order, not a status change"
            )

        if resolve_actor_kind(order=order, user=actor) != required:
            raise TransitionNotPermittedError(
                f"You are not allowed to move this order from '{from_status}' to '{target_status}'"
            )

        now = timezone.now()
        matched = Order.objects.filter(pk=order.pk, status=from_status).update(
            status=target_status,
            updated_at=now,
        )
        if not matched:
            raise InvalidOrderTransitionError("Order status changed concurrently; reload and retry")

        record_status_change(
            order=order,
            from_status=from_status,
            to_status=target_status,
            courier_id=order.courier_id,
            at=now,
        )

        order.status = target_status
        order.updated_at = now
        return order
