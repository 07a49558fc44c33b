# products/tests/test_inventory.py

from decimal import Decimal

from django.test import TestCase

from products.models import Product
from products.services.inventory import reduce_stock
from store.models import Store
from users.models import Role, User


class ReduceStockTests(TestCase):
    """
    reduce_stock() tests.

    GUARANTEES:
    - decrements exactly by the requested quantity
    - refuses (returns False) instead of going negative
    - rejects non-positive quantities outright
    """

    def setUp(self):
        owner = User.objects.create_user(email="owner@test.com", password="pass1234", role=Role.RETAILER)
        store = Store.objects.create(owner=owner, name="Fruit Stand", address="Market Sq")
        self.product = Product.objects.create(
            store=store, name="Apple", sku="APL", price=Decimal("0.50"), stock_quantity=5
        )

    def test_reduces_stock(self):
        self.assertTrue(reduce_stock(self.product.id, 3))

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 2)

    def test_can_take_the_last_unit(self):
        self.assertTrue(reduce_stock(self.product.id, 5))

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 0)

    def test_insufficient_stock_is_refused_and_untouched(self):
        self.assertFalse(reduce_stock(self.product.id, 6))

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_second_reduction_cannot_oversell(self):
        self.assertTrue(reduce_stock(self.product.id, 4))
        self.assertFalse(reduce_stock(self.product.id, 4))

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 1)

    def test_missing_product_returns_false(self):
        self.assertFalse(reduce_stock("00000000-0000-0000-0000-000000000000", 1))

    def test_non_positive_quantity_raises(self):
        with self.assertRaises(ValueError):
            reduce_stock(self.product.id, 0)
        with self.assertRaises(ValueError):
            reduce_stock(self.product.id, -2)
