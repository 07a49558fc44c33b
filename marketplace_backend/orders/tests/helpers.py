# orders/tests/helpers.py

from decimal import Decimal

from orders.models import Order
from products.models import Product
from store.models import Store
from users.models import Role, User


def make_user(email, role=Role.CUSTOMER, **extra):
    return User.objects.create_user(email=email, password="pass1234", role=role, **extra)


def make_store(owner, name="Corner Shop", **extra):
    return Store.objects.create(owner=owner, name=name, address=f"{name} street 1", **extra)


def make_product(store, sku, price="2.00", stock=10, **extra):
    return Product.objects.create(
        store=store,
        sku=sku,
        name=extra.pop("name", sku.title()),
        price=Decimal(price),
        stock_quantity=stock,
        **extra,
    )


def make_order(customer, store, status=Order.Status.READY_FOR_PICKUP, courier=None, total="10.00"):
    return Order.objects.create(
        customer=customer,
        store=store,
        courier=courier,
        status=status,
        total_amount=Decimal(total),
        delivery_address="42 Delivery Road",
        payment_status=Order.PaymentStatus.PAID,
        paid_amount=Decimal(total),
        delivery_earning=Decimal("5.00"),
    )
