"""
PATH: users/models/user.py

CUSTOM USER MODEL

One account per person, one role per account:
- customer         browses stores, fills a cart, checks out, rates deliveries
- retailer         owns stores, manages products, moves orders to ready_for_pickup
- delivery_person  claims ready orders and delivers them

Rules:
- role is a closed enumeration; anything else is rejected by full_clean().
- email is the login identity; username is optional and auto-derived.
- full_name / phone are the display fields shown to the other parties of an order.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models


class Role(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    RETAILER = "retailer", "Retailer"
    DELIVERY_PERSON = "delivery_person", "Delivery person"


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, email=None, password=None, **extra_fields):
        """
        Rules:
        - Must provide at least one of: email or username.
        - If email missing but username present: email becomes <username>@local.test
        - If username missing but email present: username becomes email local-part (uniqueness ensured)
        """
        username = (extra_fields.get("username") or "").strip()
        email = (email or extra_fields.get("email") or "").strip()

        if not email and not username:
            raise ValueError("Provide at least email or username")

        if not email and username:
            email = f"{username.lower()}@local.test"

        email = self.normalize_email(email)

        if email and not username:
            base = (email.split("@")[0] or "user").strip().lower()
            candidate = base
            i = 1
            while self.model.objects.filter(username__iexact=candidate).exists():
                i += 1
                candidate = f"{base}{i}"
            username = candidate

        extra_fields["email"] = email
        extra_fields["username"] = username or None
        extra_fields.setdefault("is_active", True)

        user = self.model(**extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Superuser must have an email")
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", Role.RETAILER)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    username = models.CharField(max_length=150, unique=True, null=True, blank=True)

    # Canonical identity
    email = models.EmailField(unique=True)

    full_name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)

    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CUSTOMER)

    # Courier reputation (delivery ratings land here)
    rating_avg = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal("0.00"))
    rating_count = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).strip()
        if self.username is not None:
            self.username = self.username.strip() or None

        if not self.email and not self.username:
            raise ValidationError("User must have at least email or username")

        if self.role not in Role.values:
            raise ValidationError({"role": f"Unknown role '{self.role}'"})

    @property
    def display_name(self) -> str:
        return (self.full_name or "").strip() or self.email

    @property
    def is_courier(self) -> bool:
        return self.role == Role.DELIVERY_PERSON

    @property
    def is_retailer(self) -> bool:
        return self.role == Role.RETAILER

    @property
    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER

    def __str__(self):
        ident = self.username or self.email
        return f"{ident} ({self.role})"
