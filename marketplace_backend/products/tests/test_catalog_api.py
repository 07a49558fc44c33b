# products/tests/test_catalog_api.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from products.models import Product
from store.models import Store
from users.models import Role, User


class CatalogAPITests(TestCase):
    """
    Catalog + product listing API.

    GUARANTEES:
    - catalog shows only available, in-stock products of open stores
    - only retailers can list products, and only in their own stores
    """

    def setUp(self):
        self.client = APIClient()

        self.retailer = User.objects.create_user(email="r@test.com", password="pass1234", role=Role.RETAILER)
        self.other_retailer = User.objects.create_user(email="r2@test.com", password="pass1234", role=Role.RETAILER)
        self.customer = User.objects.create_user(email="c@test.com", password="pass1234", role=Role.CUSTOMER)

        self.store = Store.objects.create(owner=self.retailer, name="Bakery", address="3 Bread Ln")
        self.closed_store = Store.objects.create(
            owner=self.other_retailer, name="Closed", address="4 Shut St", is_open=False
        )

        self.in_stock = Product.objects.create(
            store=self.store, name="Croissant", sku="CRS", price=Decimal("1.50"), stock_quantity=4, category="bakery"
        )
        Product.objects.create(store=self.store, name="Bagel", sku="BGL", price=Decimal("1.00"), stock_quantity=0)
        Product.objects.create(
            store=self.store, name="Hidden", sku="HID", price=Decimal("1.00"), stock_quantity=3, is_available=False
        )
        Product.objects.create(
            store=self.closed_store, name="Closed item", sku="CLS", price=Decimal("1.00"), stock_quantity=3
        )

    def _ids(self, res):
        data = res.data["results"] if isinstance(res.data, dict) else res.data
        return {str(row["id"]) for row in data}

    def test_catalog_lists_only_purchasable_products(self):
        self.client.force_authenticate(self.customer)
        res = self.client.get("/api/products/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(self._ids(res), {str(self.in_stock.id)})

    def test_catalog_filters_by_category(self):
        self.client.force_authenticate(self.customer)

        res = self.client.get("/api/products/", {"category": "dairy"})
        self.assertEqual(self._ids(res), set())

        res = self.client.get("/api/products/", {"category": "bakery"})
        self.assertEqual(self._ids(res), {str(self.in_stock.id)})

    def test_catalog_requires_authentication(self):
        res = self.client.get("/api/products/")
        self.assertEqual(res.status_code, 401)

    def test_retailer_creates_product_in_own_store(self):
        self.client.force_authenticate(self.retailer)
        res = self.client.post(
            "/api/products/",
            {"store": str(self.store.id), "name": "Baguette", "sku": "bag-1", "price": "2.20", "stock_quantity": 7},
            format="json",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["sku"], "BAG-1")

    def test_retailer_cannot_list_in_someone_elses_store(self):
        self.client.force_authenticate(self.other_retailer)
        res = self.client.post(
            "/api/products/",
            {"store": str(self.store.id), "name": "Sneaky", "sku": "SNK", "price": "2.00", "stock_quantity": 1},
            format="json",
        )

        self.assertEqual(res.status_code, 400)

    def test_customer_cannot_create_products(self):
        self.client.force_authenticate(self.customer)
        res = self.client.post(
            "/api/products/",
            {"store": str(self.store.id), "name": "Nope", "sku": "NOPE", "price": "2.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 403)

    def test_duplicate_sku_in_store_is_rejected(self):
        self.client.force_authenticate(self.retailer)
        res = self.client.post(
            "/api/products/",
            {"store": str(self.store.id), "name": "Croissant 2", "sku": "crs", "price": "1.60"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertIn("sku", res.data)
