# orders/tests/test_rejection_ledger.py

from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from orders.models import Order
from orders.services import (
    active_rejections,
    available_orders_for_courier,
    cooldown_window,
    decline_order,
    is_excluded,
)
from users.models import Role

from .helpers import make_order, make_store, make_user


class CooldownLedgerTests(TestCase):
    """
    GUARANTEES:
    - a declined order disappears from that courier's list for 30 minutes
    - it comes back once the window has passed
    - other couriers never notice someone else's decline
    """

    def setUp(self):
        customer = make_user("cust@test.com")
        store = make_store(make_user("shop@test.com", Role.RETAILER))
        self.courier = make_user("d1@test.com", Role.DELIVERY_PERSON)
        self.other_courier = make_user("d2@test.com", Role.DELIVERY_PERSON)

        self.order = make_order(customer, store)
        self.other_order = make_order(customer, store)

        self.t0 = timezone.now()
        with patch("django.utils.timezone.now", return_value=self.t0):
            decline_order(order_id=self.order.id, courier=self.courier, reason="busy")

    def _available_ids(self, courier, now):
        return set(available_orders_for_courier(courier, now=now).values_list("id", flat=True))

    def test_cooldown_window_from_settings(self):
        self.assertEqual(cooldown_window(), timedelta(minutes=30))

    @override_settings(REJECTION_COOLDOWN_MINUTES=5)
    def test_cooldown_window_is_configurable(self):
        self.assertEqual(cooldown_window(), timedelta(minutes=5))

    def test_excluded_inside_window(self):
        now = self.t0 + timedelta(minutes=29, seconds=59)

        self.assertTrue(is_excluded(self.order.id, self.courier.id, now=now))
        self.assertEqual(self._available_ids(self.courier, now), {self.other_order.id})

    def test_eligible_again_after_window(self):
        now = self.t0 + timedelta(minutes=30, seconds=1)

        self.assertFalse(is_excluded(self.order.id, self.courier.id, now=now))
        self.assertEqual(self._available_ids(self.courier, now), {self.order.id, self.other_order.id})
        self.assertFalse(active_rejections(self.courier.id, now=now).exists())

    def test_other_couriers_unaffected(self):
        now = self.t0 + timedelta(minutes=1)

        self.assertFalse(is_excluded(self.order.id, self.other_courier.id, now=now))
        self.assertEqual(self._available_ids(self.other_courier, now), {self.order.id, self.other_order.id})

    def test_assigned_or_not_ready_orders_never_listed(self):
        Order.objects.filter(pk=self.other_order.pk).update(courier=self.other_courier, status="picked_up")
        now = self.t0 + timedelta(hours=1)

        self.assertEqual(self._available_ids(self.courier, now), {self.order.id})


class AvailableOrdersEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        customer = make_user("cust@test.com")
        store = make_store(make_user("shop@test.com", Role.RETAILER))
        self.courier = make_user("d1@test.com", Role.DELIVERY_PERSON)
        self.order = make_order(customer, store)
        make_order(customer, store, status=Order.Status.CONFIRMED)

    def _ids(self, res):
        return {row["id"] for row in res.data["results"]}

    def test_listing_applies_cooldown(self):
        self.client.force_authenticate(self.courier)

        res = self.client.get("/api/orders/available/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(self._ids(res), {str(self.order.id)})

        self.client.post("/api/reject-order/", {"orderId": str(self.order.id)}, format="json")

        res = self.client.get("/api/orders/available/")
        self.assertEqual(self._ids(res), set())

        later = timezone.now() + timedelta(minutes=31)
        with patch("django.utils.timezone.now", return_value=later):
            res = self.client.get("/api/orders/available/")
        self.assertEqual(self._ids(res), {str(self.order.id)})

    def test_customers_cannot_list_available(self):
        self.client.force_authenticate(make_user("c2@test.com"))
        res = self.client.get("/api/orders/available/")
        self.assertEqual(res.status_code, 403)
