# orders/tests/test_ratings.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from orders.models import Order, Rating
from orders.services import DuplicateRatingError, RatingError, RatingNotAllowedError, rate_order
from store.models import Store
from users.models import Role, User

from .helpers import make_order, make_store, make_user


class RateOrderServiceTests(TestCase):
    """
    GUARANTEES:
    - only the ordering customer rates, and only after delivery
    - one rating per (order, type)
    - store and courier aggregates follow the rating rows
    """

    def setUp(self):
        self.customer = make_user("cust@test.com")
        self.courier = make_user("d1@test.com", Role.DELIVERY_PERSON)
        self.store = make_store(make_user("shop@test.com", Role.RETAILER))
        self.order = make_order(self.customer, self.store, status=Order.Status.DELIVERED, courier=self.courier)

    def test_store_rating_updates_aggregate(self):
        rate_order(order_id=self.order.id, rater=self.customer, rating_type="store", rating=4)
        second = make_order(self.customer, self.store, status=Order.Status.COMPLETED, courier=self.courier)
        rate_order(order_id=second.id, rater=self.customer, rating_type="store", rating=5)

        store = Store.objects.get(pk=self.store.pk)
        self.assertEqual(store.rating_count, 2)
        self.assertEqual(store.rating_avg, Decimal("4.50"))

    def test_delivery_rating_updates_courier(self):
        row = rate_order(
            order_id=self.order.id,
            rater=self.customer,
            rating_type="delivery",
            rating=3,
            comment="  late but friendly ",
        )

        self.assertEqual(row.courier_id, self.courier.id)
        self.assertIsNone(row.store_id)
        self.assertEqual(row.comment, "late but friendly")

        courier = User.objects.get(pk=self.courier.pk)
        self.assertEqual(courier.rating_count, 1)
        self.assertEqual(courier.rating_avg, Decimal("3.00"))

    def test_duplicate_rating(self):
        rate_order(order_id=self.order.id, rater=self.customer, rating_type="store", rating=4)

        with self.assertRaises(DuplicateRatingError):
            rate_order(order_id=self.order.id, rater=self.customer, rating_type="store", rating=1)

        self.assertEqual(Rating.objects.count(), 1)
        self.assertEqual(Store.objects.get(pk=self.store.pk).rating_avg, Decimal("4.00"))

    def test_store_and_delivery_are_separate(self):
        rate_order(order_id=self.order.id, rater=self.customer, rating_type="store", rating=4)
        rate_order(order_id=self.order.id, rater=self.customer, rating_type="delivery", rating=5)
        self.assertEqual(Rating.objects.filter(order=self.order).count(), 2)

    def test_other_user_cannot_rate(self):
        with self.assertRaises(RatingNotAllowedError):
            rate_order(order_id=self.order.id, rater=self.courier, rating_type="store", rating=5)

    def test_not_before_delivery(self):
        Order.objects.filter(pk=self.order.pk).update(status=Order.Status.DELIVERING)
        with self.assertRaises(RatingError):
            rate_order(order_id=self.order.id, rater=self.customer, rating_type="store", rating=5)

    def test_out_of_range(self):
        for bad in (0, 6, "x", True):
            with self.assertRaises(RatingError):
                rate_order(order_id=self.order.id, rater=self.customer, rating_type="store", rating=bad)

    def test_delivery_rating_needs_courier(self):
        order = make_order(self.customer, self.store, status=Order.Status.DELIVERED)
        with self.assertRaises(RatingError):
            rate_order(order_id=order.id, rater=self.customer, rating_type="delivery", rating=5)


class RateOrderEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = make_user("cust@test.com")
        self.store = make_store(make_user("shop@test.com", Role.RETAILER))
        self.order = make_order(self.customer, self.store, status=Order.Status.DELIVERED)
        self.client.force_authenticate(self.customer)

    def _rate(self, order_id=None, **body):
        payload = {"rating_type": "store", "rating": 5}
        payload.update(body)
        return self.client.post(f"/api/orders/{order_id or self.order.id}/ratings/", payload, format="json")

    def test_created(self):
        res = self._rate(comment="great bread")

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["rating"], 5)
        self.assertEqual(res.data["store"], self.store.id)

    def test_duplicate_is_409(self):
        self._rate()
        res = self._rate()

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "DUPLICATE_RATING")

    def test_stranger_is_403(self):
        self.client.force_authenticate(make_user("other@test.com"))
        self.assertEqual(self._rate().status_code, 403)

    def test_unknown_order_is_404(self):
        res = self._rate(order_id="00000000-0000-0000-0000-000000000000")
        self.assertEqual(res.status_code, 404)

    def test_invalid_score_is_400(self):
        self.assertEqual(self._rate(rating=9).status_code, 400)
