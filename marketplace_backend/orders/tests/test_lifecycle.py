# orders/tests/test_lifecycle.py

from django.test import TestCase
from rest_framework.test import APIClient

from orders.models import DeliveryHistory, Order
from orders.services import (
    InvalidOrderTransitionError,
    TransitionNotPermittedError,
    advance_order_status,
    can_transition,
    claim_order,
    resolve_actor_kind,
)
from orders.services.order_lifecycle import TERMINAL_STATES
from users.models import Role

from .helpers import make_order, make_store, make_user

S = Order.Status


class TransitionTableTests(TestCase):
    """
    GUARANTEES:
    - only forward moves along the lifecycle graph
    - terminal states admit nothing
    - cancellation only before delivery
    """

    def test_forward_path(self):
        path = [S.PENDING, S.CONFIRMED, S.READY_FOR_PICKUP, S.PICKED_UP, S.DELIVERING, S.DELIVERED, S.COMPLETED]
        for current, nxt in zip(path, path[1:]):
            self.assertTrue(can_transition(from_status=current, to_status=nxt), (current, nxt))

    def test_no_skipping_or_going_back(self):
        self.assertFalse(can_transition(from_status=S.PENDING, to_status=S.READY_FOR_PICKUP))
        self.assertFalse(can_transition(from_status=S.DELIVERING, to_status=S.PICKED_UP))
        self.assertFalse(can_transition(from_status=S.DELIVERED, to_status=S.DELIVERING))

    def test_terminal_states(self):
        for terminal in TERMINAL_STATES:
            for target in S.values:
                self.assertFalse(can_transition(from_status=terminal, to_status=target))

    def test_cancel_only_before_delivery(self):
        for state in (S.PENDING, S.CONFIRMED, S.READY_FOR_PICKUP, S.ASSIGNED, S.PICKED_UP, S.DELIVERING):
            self.assertTrue(can_transition(from_status=state, to_status=S.CANCELLED), state)
        for state in (S.DELIVERED, S.COMPLETED):
            self.assertFalse(can_transition(from_status=state, to_status=S.CANCELLED), state)


class AdvanceOrderStatusTests(TestCase):
    """
    GUARANTEES:
    - store owner confirms and marks ready; assigned courier delivers
    - only claim can take a ready order
    - every change writes exactly one history row
    """

    def setUp(self):
        self.customer = make_user("cust@test.com")
        self.owner = make_user("shop@test.com", Role.RETAILER)
        self.rival_owner = make_user("rival@test.com", Role.RETAILER)
        self.courier = make_user("d1@test.com", Role.DELIVERY_PERSON)
        self.other_courier = make_user("d2@test.com", Role.DELIVERY_PERSON)
        self.store = make_store(self.owner)
        self.order = make_order(self.customer, self.store, status=S.PENDING)

    def _advance(self, actor, target):
        return advance_order_status(order_id=self.order.id, actor=actor, target_status=target)

    def test_full_lifecycle_with_history(self):
        self._advance(self.owner, S.CONFIRMED)
        self._advance(self.owner, S.READY_FOR_PICKUP)
        claim_order(order_id=self.order.id, courier=self.courier)
        self._advance(self.courier, S.DELIVERING)
        self._advance(self.courier, S.DELIVERED)
        order = self._advance(self.customer, S.COMPLETED)

        self.assertEqual(order.status, S.COMPLETED)

        rows = list(DeliveryHistory.objects.filter(order=self.order).order_by("created_at"))
        self.assertEqual(
            [(r.from_status, r.to_status) for r in rows],
            [
                (S.PENDING, S.CONFIRMED),
                (S.CONFIRMED, S.READY_FOR_PICKUP),
                (S.READY_FOR_PICKUP, S.PICKED_UP),
                (S.PICKED_UP, S.DELIVERING),
                (S.DELIVERING, S.DELIVERED),
                (S.DELIVERED, S.COMPLETED),
            ],
        )
        self.assertEqual(rows[3].courier_id, self.courier.id)
        self.assertEqual(rows[3].note, "From Picked up")

    def test_other_store_owner_cannot_confirm(self):
        with self.assertRaises(TransitionNotPermittedError):
            self._advance(self.rival_owner, S.CONFIRMED)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, S.PENDING)
        self.assertFalse(DeliveryHistory.objects.exists())

    def test_customer_cannot_confirm(self):
        with self.assertRaises(TransitionNotPermittedError):
            self._advance(self.customer, S.CONFIRMED)

    def test_ready_to_picked_up_only_via_claim(self):
        Order.objects.filter(pk=self.order.pk).update(status=S.READY_FOR_PICKUP)

        with self.assertRaises(TransitionNotPermittedError):
            self._advance(self.owner, S.PICKED_UP)
        with self.assertRaises(TransitionNotPermittedError):
            self._advance(self.courier, S.PICKED_UP)

        self.order.refresh_from_db()
        self.assertIsNone(self.order.courier_id)

    def test_only_assigned_courier_delivers(self):
        Order.objects.filter(pk=self.order.pk).update(status=S.PICKED_UP, courier=self.courier)

        with self.assertRaises(TransitionNotPermittedError):
            self._advance(self.other_courier, S.DELIVERING)
        with self.assertRaises(TransitionNotPermittedError):
            self._advance(self.owner, S.DELIVERING)

        self._advance(self.courier, S.DELIVERING)

    def test_invalid_transition(self):
        with self.assertRaises(InvalidOrderTransitionError):
            self._advance(self.owner, S.DELIVERED)

    def test_unknown_status_rejected(self):
        with self.assertRaises(InvalidOrderTransitionError):
            self._advance(self.owner, "teleported")

    def test_owner_cancels_before_pickup(self):
        order = self._advance(self.owner, S.CANCELLED)
        self.assertEqual(order.status, S.CANCELLED)

        with self.assertRaises(InvalidOrderTransitionError):
            self._advance(self.owner, S.CONFIRMED)

    def test_owner_cancels_in_flight_delivery(self):
        Order.objects.filter(pk=self.order.pk).update(status=S.DELIVERING, courier=self.courier)

        with self.assertRaises(TransitionNotPermittedError):
            self._advance(self.courier, S.CANCELLED)

        order = self._advance(self.owner, S.CANCELLED)

        self.assertEqual(order.status, S.CANCELLED)
        row = DeliveryHistory.objects.get(order=self.order)
        self.assertEqual((row.from_status, row.to_status), (S.DELIVERING, S.CANCELLED))

    def test_delivered_order_cannot_be_cancelled(self):
        Order.objects.filter(pk=self.order.pk).update(status=S.DELIVERED, courier=self.courier)

        with self.assertRaises(InvalidOrderTransitionError):
            self._advance(self.owner, S.CANCELLED)

    def test_resolve_actor_kind(self):
        Order.objects.filter(pk=self.order.pk).update(courier=self.courier)
        order = Order.objects.select_related("store").get(pk=self.order.pk)

        self.assertEqual(resolve_actor_kind(order=order, user=self.owner), "store_owner")
        self.assertEqual(resolve_actor_kind(order=order, user=self.courier), "courier")
        self.assertEqual(resolve_actor_kind(order=order, user=self.customer), "customer")
        self.assertIsNone(resolve_actor_kind(order=order, user=self.other_courier))

    def test_history_rows_are_append_only(self):
        self._advance(self.owner, S.CONFIRMED)
        row = DeliveryHistory.objects.get()

        row.note = "edited"
        with self.assertRaises(RuntimeError):
            row.save()
        with self.assertRaises(RuntimeError):
            row.delete()


class OrderStatusEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = make_user("cust@test.com")
        self.owner = make_user("shop@test.com", Role.RETAILER)
        self.store = make_store(self.owner)
        self.order = make_order(self.customer, self.store, status=S.PENDING)

    def _post(self, user, status_value, order_id=None):
        self.client.force_authenticate(user)
        return self.client.post(
            f"/api/orders/{order_id or self.order.id}/status/", {"status": status_value}, format="json"
        )

    def test_owner_confirms(self):
        res = self._post(self.owner, "confirmed")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "confirmed")

    def test_not_permitted_is_403(self):
        res = self._post(self.customer, "confirmed")

        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["error"]["code"], "FORBIDDEN")

    def test_invalid_transition_is_409(self):
        res = self._post(self.owner, "delivered")
        self.assertEqual(res.status_code, 409)

    def test_unknown_status_is_400(self):
        res = self._post(self.owner, "teleported")
        self.assertEqual(res.status_code, 400)

    def test_missing_order_is_404(self):
        res = self._post(self.owner, "confirmed", order_id="00000000-0000-0000-0000-000000000000")
        self.assertEqual(res.status_code, 404)
