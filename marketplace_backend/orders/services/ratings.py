# orders/services/ratings.py

"""
RATINGS

A customer rates the store and/or the courier of one of their orders once
it has been delivered. Store and courier aggregates (rating_avg,
rating_count) are recomputed from Rating rows in the same transaction.
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count

from orders.models import Order, Rating
from store.models import Store

logger = logging.getLogger(__name__)

RATEABLE_STATES = {Order.Status.DELIVERED, Order.Status.COMPLETED}


class RatingError(Exception):
    pass


class RatingNotAllowedError(RatingError):
    pass


class DuplicateRatingError(RatingError):
    pass


def _aggregate(qs):
    agg = qs.aggregate(avg=Avg("rating"), count=Count("id"))
    avg = Decimal(str(agg["avg"] or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return avg, int(agg["count"] or 0)


def _refresh_store_rating(store_id):
    avg, count = _aggregate(Rating.objects.filter(rating_type=Rating.RatingType.STORE, store_id=store_id))
    Store.objects.filter(pk=store_id).update(rating_avg=avg, rating_count=count)


def _refresh_courier_rating(courier_id):
    avg, count = _aggregate(Rating.objects.filter(rating_type=Rating.RatingType.DELIVERY, courier_id=courier_id))
    get_user_model().objects.filter(pk=courier_id).update(rating_avg=avg, rating_count=count)


def _to_rating(value) -> int:
    if isinstance(value, bool):
        raise RatingError("rating must be a whole number from 1 to 5")
    try:
        score = int(value)
    except (TypeError, ValueError):
        raise RatingError("rating must be a whole number from 1 to 5")
    if not 1 <= score <= 5:
        raise RatingError("rating must be a whole number from 1 to 5")
    return score


def rate_order(*, order_id, rater, rating_type: str, rating, comment: str = "") -> Rating:
    """
    Raises Order.DoesNotExist for unknown orders.
    """
    if rating_type not in Rating.RatingType.values:
        raise RatingError(f"Unknown rating type '{rating_type}'")

    score = _to_rating(rating)

    order = Order.objects.select_related("store").get(pk=order_id)

    if order.customer_id != getattr(rater, "pk", None):
        raise RatingNotAllowedError("Only the customer who placed the order can rate it")

    if order.status not in RATEABLE_STATES:
        raise RatingError("Orders can only be rated after delivery")

    if rating_type == Rating.RatingType.DELIVERY and order.courier_id is None:
        raise RatingError("This order has no courier to rate")

    with transaction.atomic():
        try:
            with transaction.atomic():
                row = Rating.objects.create(
                    order=order,
                    rater=rater,
                    rating_type=rating_type,
                    store=order.store if rating_type == Rating.RatingType.STORE else None,
                    courier_id=order.courier_id if rating_type == Rating.RatingType.DELIVERY else None,
                    rating=score,
                    comment=str(comment or "").strip(),
                )
        except IntegrityError:
            raise DuplicateRatingError(f"You have already rated this order's {rating_type}")

        if rating_type == Rating.RatingType.STORE:
            _refresh_store_rating(order.store_id)
        else:
            _refresh_courier_rating(order.courier_id)

    logger.info(
        "Order rated",
        extra={"order_id": str(order.pk), "rating_type": rating_type, "rating": score},
    )
    return row
