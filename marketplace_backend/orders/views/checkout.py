# orders/views/checkout.py

"""
CHECKOUT ENDPOINT

POST /api/orders/checkout/  {"delivery_address": "...", "notes": "..."}

- 201: every store's order was placed
- 207: some stores placed, some failed (see `failures`)
- 400: empty cart, bad address, or no store could be placed
"""

from __future__ import annotations

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.serializers import OrderSerializer
from orders.services import (
    EmptyCartError,
    InvalidDeliveryAddressError,
    checkout_cart,
)
from orders.views.common import error_response
from users.permissions import IsCustomer


class CheckoutInputSerializer(serializers.Serializer):
    delivery_address = serializers.CharField(allow_blank=True, trim_whitespace=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


def _failures_payload(failures):
    return [
        {"store_id": str(f.store_id), "store_name": f.store_name, "message": f.message}
        for f in failures
    ]


class CheckoutView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @extend_schema(
        request=CheckoutInputSerializer,
        responses={201: dict, 207: dict, 400: dict},
        description="Place one order per store in the cart. Each store succeeds or fails on its own.",
    )
    def post(self, request):
        serializer = CheckoutInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = checkout_cart(
                customer=request.user,
                delivery_address=serializer.validated_data["delivery_address"],
                notes=serializer.validated_data.get("notes", ""),
            )
        except EmptyCartError as exc:
            return error_response(code="EMPTY_CART", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)
        except InvalidDeliveryAddressError as exc:
            return error_response(
                code="INVALID_ADDRESS",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        failures = _failures_payload(result.failures)

        if not result.orders:
            return error_response(
                code="CHECKOUT_FAILED",
                message="No order could be placed",
                http_status=status.HTTP_400_BAD_REQUEST,
                failures=failures,
            )

        body = {
            "orders": OrderSerializer(result.orders, many=True).data,
            "failures": failures,
            "delivery_earning": settings.DELIVERY_EARNING_AMOUNT,
        }
        http_status = status.HTTP_207_MULTI_STATUS if result.is_partial else status.HTTP_201_CREATED
        return Response(body, status=http_status)
