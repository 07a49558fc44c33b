# orders/services/checkout_orchestrator.py

"""
CHECKOUT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Turn a customer's multi-store cart into one paid Order per store.

Hard rules:
- The delivery address is validated before anything is written.
- Each vendor group runs in its OWN transaction:
    lock + re-read the group's cart lines -> create Order
    -> create OrderItems (name/price snapshots) -> reduce stock per line
    -> delete that group's cart lines
  Any failure rolls back that group only. Groups that already succeeded
  stay placed and paid; the caller gets a per-store failure list.
- A line that vanished since the cart was read (a second checkout got it
  first) fails the group with CartChangedError; nothing is charged twice.
- Totals are computed server-side from cart price snapshots:
    total = sum(quantity x price_snapshot) for the group's lines only.
- Stock reduction is a conditional UPDATE; a miss (not enough stock) fails
  the group instead of driving stock negative.
- Payment capture is simulated: orders are stamped paid for their total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db import DatabaseError, transaction

from cart.models import CartItem
from cart.services import group_cart_by_store
from orders.models import Order, OrderItem
from products.services.inventory import reduce_stock

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


class CheckoutError(Exception):
    """Base checkout exception"""


class EmptyCartError(CheckoutError):
    pass


class InvalidDeliveryAddressError(CheckoutError):
    pass


class StockValidationError(CheckoutError):
    pass


class CartChangedError(CheckoutError):
    pass


@dataclass(frozen=True)
class VendorGroupFailure:
    store_id: object
    store_name: str
    message: str


@dataclass
class CheckoutResult:
    orders: list = field(default_factory=list)
    failures: list = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.orders) and bool(self.failures)


def validate_delivery_address(address) -> str:
    value = str(address or "").strip()
    if not value:
        raise InvalidDeliveryAddressError("Delivery address is required")

    limit = int(settings.DELIVERY_ADDRESS_MAX_LENGTH)
    if len(value) > limit:
        raise InvalidDeliveryAddressError(f"Delivery address must be at most {limit} characters")
    return value


def _lock_group_lines(*, customer, group) -> list:
    """
    Re-read the group's cart lines under a row lock. Quantities come from
    the locked rows, not from the unlocked read that built the group.
    """
    expected = [item.pk for item in group.items]
    locked = list(
        CartItem.objects.select_for_update(of=("self",))
        .select_related("product")
        .filter(user=customer, pk__in=expected)
        .order_by("created_at")
    )
    if len(locked) != len(expected):
        raise CartChangedError("Cart changed during checkout")
    return locked


def _place_vendor_group(*, customer, group, delivery_address: str, notes: str) -> Order:
    """
    Runs inside the caller's per-group transaction.
    """
    lines = _lock_group_lines(customer=customer, group=group)
    total = _money(sum((item.line_total for item in lines), Decimal("0.00")))

    order = Order.objects.create(
        customer=customer,
        store=group.store,
        status=Order.Status.PENDING,
        total_amount=total,
        delivery_address=delivery_address,
        notes=notes,
        payment_status=Order.PaymentStatus.PAID,
        paid_amount=total,
        delivery_earning=_money(settings.DELIVERY_EARNING_AMOUNT),
    )

    for item in lines:
        product = item.product
        qty = int(item.quantity)

        OrderItem.objects.create(
            order=order,
            product=product,
            product_name=product.name,
            quantity=qty,
            price=_money(item.price_snapshot),
        )

        if not product.is_available:
            raise StockValidationError(f"{product.name} is no longer available")

        if not reduce_stock(product.pk, qty):
            raise StockValidationError(f"Insufficient stock for {product.name}. Requested: {qty}")

    deleted, _ = CartItem.objects.filter(pk__in=[item.pk for item in lines]).delete()
    if deleted != len(lines):
        raise CartChangedError("Cart changed during checkout")
    return order


def checkout_cart(*, customer, delivery_address, notes: str = "") -> CheckoutResult:
    address = validate_delivery_address(delivery_address)
    notes = str(notes or "").strip()

    items = list(
        CartItem.objects.select_related("product__store")
        .filter(user=customer)
        .order_by("created_at")
    )
    if not items:
        raise EmptyCartError("Cart is empty")

    result = CheckoutResult()

    for group in group_cart_by_store(items):
        try:
            with transaction.atomic():
                order = _place_vendor_group(
                    customer=customer,
                    group=group,
                    delivery_address=address,
                    notes=notes,
                )
        except (CheckoutError, DatabaseError) as exc:
            logger.warning(
                "Checkout failed for vendor group",
                extra={
                    "customer_id": str(customer.pk),
                    "store_id": str(group.store_id),
                    "error": str(exc),
                },
            )
            result.failures.append(
                VendorGroupFailure(store_id=group.store_id, store_name=group.store.name, message=str(exc))
            )
            continue

        result.orders.append(order)
        logger.info(
            "Order placed",
            extra={
                "order_id": str(order.pk),
                "store_id": str(group.store_id),
                "total_amount": str(order.total_amount),
            },
        )

    return result
