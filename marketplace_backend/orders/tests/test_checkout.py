# orders/tests/test_checkout.py

from decimal import Decimal

from django.db import transaction
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from cart.models import CartItem
from cart.services import add_to_cart, group_cart_by_store, set_cart_quantity
from orders.models import DeliveryHistory, Order, OrderItem
from orders.services import (
    CartChangedError,
    EmptyCartError,
    InvalidDeliveryAddressError,
    checkout_cart,
    validate_delivery_address,
)
from orders.services.checkout_orchestrator import _place_vendor_group
from products.models import Product
from users.models import Role

from .helpers import make_product, make_store, make_user


class CheckoutServiceTests(TestCase):
    """
    GUARANTEES:
    - one paid order per store in the cart
    - totals come from cart price snapshots
    - a failing store rolls back alone and keeps its cart lines
    - a cart line is charged at most once
    """

    def setUp(self):
        self.customer = make_user("cust@test.com")
        self.bakery = make_store(make_user("bake@test.com", Role.RETAILER), name="Bakery")
        self.grocer = make_store(make_user("groc@test.com", Role.RETAILER), name="Grocer")

        self.bread = make_product(self.bakery, "BREAD", price="3.50", stock=10)
        self.milk = make_product(self.grocer, "MILK", price="1.25", stock=10)
        self.eggs = make_product(self.grocer, "EGGS", price="4.00", stock=10)

    def _fill_cart(self):
        add_to_cart(user=self.customer, product_id=self.bread.id, quantity=2)
        add_to_cart(user=self.customer, product_id=self.milk.id, quantity=4)
        add_to_cart(user=self.customer, product_id=self.eggs.id, quantity=1)

    def test_one_order_per_store(self):
        self._fill_cart()

        result = checkout_cart(customer=self.customer, delivery_address="  1 Main St  ")

        self.assertFalse(result.failures)
        self.assertFalse(result.is_partial)
        self.assertEqual(len(result.orders), 2)

        by_store = {o.store_id: o for o in result.orders}
        self.assertEqual(by_store[self.bakery.id].total_amount, Decimal("7.00"))
        self.assertEqual(by_store[self.grocer.id].total_amount, Decimal("9.00"))

        for order in result.orders:
            self.assertEqual(order.status, Order.Status.PENDING)
            self.assertEqual(order.payment_status, Order.PaymentStatus.PAID)
            self.assertEqual(order.paid_amount, order.total_amount)
            self.assertEqual(order.delivery_earning, Decimal("5.00"))
            self.assertEqual(order.delivery_address, "1 Main St")
            self.assertIsNone(order.courier_id)

        self.assertEqual(OrderItem.objects.filter(order=by_store[self.grocer.id]).count(), 2)

    def test_stock_reduced_and_cart_emptied(self):
        self._fill_cart()

        checkout_cart(customer=self.customer, delivery_address="1 Main St")

        self.assertFalse(CartItem.objects.filter(user=self.customer).exists())
        self.assertEqual(Product.objects.get(pk=self.bread.pk).stock_quantity, 8)
        self.assertEqual(Product.objects.get(pk=self.milk.pk).stock_quantity, 6)

    def test_snapshot_price_is_charged(self):
        add_to_cart(user=self.customer, product_id=self.bread.id, quantity=2)
        Product.objects.filter(pk=self.bread.pk).update(price=Decimal("9.99"))

        result = checkout_cart(customer=self.customer, delivery_address="1 Main St")

        order = result.orders[0]
        self.assertEqual(order.total_amount, Decimal("7.00"))
        item = order.items.get()
        self.assertEqual(item.price, Decimal("3.50"))
        self.assertEqual(item.product_name, "Bread")

    def test_partial_failure_isolated_to_store(self):
        self._fill_cart()
        Product.objects.filter(pk=self.eggs.pk).update(stock_quantity=0)

        result = checkout_cart(customer=self.customer, delivery_address="1 Main St")

        self.assertTrue(result.is_partial)
        self.assertEqual([o.store_id for o in result.orders], [self.bakery.id])
        self.assertEqual(len(result.failures), 1)
        self.assertEqual(result.failures[0].store_id, self.grocer.id)
        self.assertIn("Insufficient stock", result.failures[0].message)

        self.assertFalse(Order.objects.filter(store=self.grocer).exists())
        # milk was reduced before eggs failed; the rollback restores it
        self.assertEqual(Product.objects.get(pk=self.milk.pk).stock_quantity, 10)
        self.assertEqual(CartItem.objects.filter(user=self.customer).count(), 2)

    def test_unavailable_product_fails_group(self):
        add_to_cart(user=self.customer, product_id=self.bread.id, quantity=1)
        Product.objects.filter(pk=self.bread.pk).update(is_available=False)

        result = checkout_cart(customer=self.customer, delivery_address="1 Main St")

        self.assertFalse(result.orders)
        self.assertIn("no longer available", result.failures[0].message)

    def test_no_history_row_on_placement(self):
        self._fill_cart()
        checkout_cart(customer=self.customer, delivery_address="1 Main St")
        self.assertFalse(DeliveryHistory.objects.exists())

    def _stale_groups(self):
        items = list(
            CartItem.objects.select_related("product__store").filter(user=self.customer).order_by("created_at")
        )
        return group_cart_by_store(items)

    def _replay(self, group):
        with transaction.atomic():
            return _place_vendor_group(
                customer=self.customer,
                group=group,
                delivery_address="1 Main St",
                notes="",
            )

    def test_replayed_group_is_not_placed_twice(self):
        add_to_cart(user=self.customer, product_id=self.bread.id, quantity=2)
        stale = self._stale_groups()

        checkout_cart(customer=self.customer, delivery_address="1 Main St")

        with self.assertRaises(CartChangedError):
            self._replay(stale[0])

        self.assertEqual(Order.objects.count(), 1)
        self.assertEqual(Product.objects.get(pk=self.bread.pk).stock_quantity, 8)

    def test_quantity_changed_after_read_is_charged_as_locked(self):
        line = add_to_cart(user=self.customer, product_id=self.bread.id, quantity=2)
        stale = self._stale_groups()

        set_cart_quantity(user=self.customer, item_id=line.id, quantity=3)
        order = self._replay(stale[0])

        self.assertEqual(order.total_amount, Decimal("10.50"))
        self.assertEqual(order.items.get().quantity, 3)
        self.assertEqual(Product.objects.get(pk=self.bread.pk).stock_quantity, 7)

    def test_empty_cart(self):
        with self.assertRaises(EmptyCartError):
            checkout_cart(customer=self.customer, delivery_address="1 Main St")

    def test_address_validated_before_writes(self):
        self._fill_cart()

        with self.assertRaises(InvalidDeliveryAddressError):
            checkout_cart(customer=self.customer, delivery_address="   ")

        self.assertFalse(Order.objects.exists())
        self.assertEqual(CartItem.objects.filter(user=self.customer).count(), 3)

    @override_settings(DELIVERY_ADDRESS_MAX_LENGTH=10)
    def test_address_length_limit(self):
        self.assertEqual(validate_delivery_address("1 Main St"), "1 Main St")
        with self.assertRaises(InvalidDeliveryAddressError):
            validate_delivery_address("12345 Long Avenue")


class CheckoutEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = make_user("cust@test.com")
        self.store_a = make_store(make_user("a@test.com", Role.RETAILER), name="Store A")
        self.store_b = make_store(make_user("b@test.com", Role.RETAILER), name="Store B")
        self.apple = make_product(self.store_a, "APPLE", price="0.50", stock=5)
        self.soap = make_product(self.store_b, "SOAP", price="2.00", stock=5)

        self.client.force_authenticate(self.customer)

    def _checkout(self, address="1 Main St"):
        return self.client.post("/api/orders/checkout/", {"delivery_address": address}, format="json")

    def test_all_placed_is_201(self):
        add_to_cart(user=self.customer, product_id=self.apple.id, quantity=4)
        add_to_cart(user=self.customer, product_id=self.soap.id, quantity=1)

        res = self._checkout()

        self.assertEqual(res.status_code, 201)
        self.assertEqual(len(res.data["orders"]), 2)
        self.assertEqual(res.data["failures"], [])
        totals = sorted(o["total_amount"] for o in res.data["orders"])
        self.assertEqual(totals, ["2.00", "2.00"])

    def test_partial_is_207(self):
        add_to_cart(user=self.customer, product_id=self.apple.id, quantity=1)
        add_to_cart(user=self.customer, product_id=self.soap.id, quantity=3)
        Product.objects.filter(pk=self.soap.pk).update(stock_quantity=2)

        res = self._checkout()

        self.assertEqual(res.status_code, 207)
        self.assertEqual(len(res.data["orders"]), 1)
        self.assertEqual(res.data["failures"][0]["store_name"], "Store B")

    def test_nothing_placed_is_400(self):
        add_to_cart(user=self.customer, product_id=self.soap.id, quantity=3)
        Product.objects.filter(pk=self.soap.pk).update(stock_quantity=0)

        res = self._checkout()

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "CHECKOUT_FAILED")
        self.assertEqual(len(res.data["failures"]), 1)

    def test_empty_cart_is_400(self):
        res = self._checkout()

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "EMPTY_CART")

    def test_blank_address_is_400(self):
        add_to_cart(user=self.customer, product_id=self.apple.id, quantity=1)

        res = self._checkout(address="  ")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_ADDRESS")

    def test_non_customer_forbidden(self):
        self.client.force_authenticate(make_user("d@test.com", Role.DELIVERY_PERSON))
        self.assertEqual(self._checkout().status_code, 403)
