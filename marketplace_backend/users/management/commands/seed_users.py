# users/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from products.models import Product, ProductCategory
from store.models import Store
from users.models import Role


@dataclass(frozen=True)
class SeedUserSpec:
    label: str
    role: str
    email: str
    full_name: str
    phone: str = ""


USER_SPECS = [
    SeedUserSpec("Customer", Role.CUSTOMER, "customer@example.com", "Demo Customer", "555-0101"),
    SeedUserSpec("Retailer", Role.RETAILER, "retailer@example.com", "Demo Retailer", "555-0102"),
    SeedUserSpec("Courier", Role.DELIVERY_PERSON, "courier@example.com", "Demo Courier", "555-0103"),
]

DEMO_STORE_NAME = "Demo Corner Shop"

DEMO_PRODUCTS = [
    ("BREAD-WHITE", "White bread", ProductCategory.BAKERY, "2.50", 40),
    ("MILK-1L", "Milk 1L", ProductCategory.DAIRY, "1.20", 60),
    ("APPLE-KG", "Apples 1kg", ProductCategory.FRUITS, "3.10", 25),
    ("SOAP-BAR", "Soap bar", ProductCategory.PERSONAL_CARE, "0.90", 80),
]


class Command(BaseCommand):
    help = "Seed one user per role plus a demo store with products (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )
        parser.add_argument(
            "--skip-catalog",
            action="store_true",
            help="Only seed users; no store or products.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if not password or len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()

        self.stdout.write("Seeding marketplace users ...")

        created_count = 0
        pw_reset_count = 0
        seeded = {}

        for spec in USER_SPECS:
            user = User.objects.filter(email=spec.email).first()

            if user is None:
                user = User.objects.create_user(
                    email=spec.email,
                    password=password,
                    role=spec.role,
                    full_name=spec.full_name,
                    phone=spec.phone,
                )
                created_count += 1
                self.stdout.write(f"created: {spec.label} ({spec.role}) -> {spec.email}")
            else:
                if user.role != spec.role:
                    raise CommandError(
                        f"{spec.email} already exists with role '{user.role}', expected '{spec.role}'."
                    )
                if force_password:
                    user.set_password(password)
                    user.save(update_fields=["password"])
                    pw_reset_count += 1
                self.stdout.write(f"exists:  {spec.label} ({spec.role}) -> {spec.email}")

            seeded[spec.role] = user

        if not options.get("skip_catalog"):
            self._seed_catalog(seeded[Role.RETAILER])

        self.stdout.write("\n--- Summary ---")
        self.stdout.write(f"Users created: {created_count}")
        if force_password:
            self.stdout.write(f"Passwords reset: {pw_reset_count}")

    def _seed_catalog(self, owner):
        store, created = Store.objects.get_or_create(
            owner=owner,
            name=DEMO_STORE_NAME,
            defaults={"address": "1 Market Street", "phone": "555-0199"},
        )
        self.stdout.write(f"{'created' if created else 'exists: '} store -> {store.name}")

        for sku, name, category, price, stock in DEMO_PRODUCTS:
            Product.objects.get_or_create(
                store=store,
                sku=sku,
                defaults={
                    "name": name,
                    "category": category,
                    "price": Decimal(price),
                    "stock_quantity": stock,
                },
            )
        self.stdout.write(f"products in store: {store.products.count()}")
