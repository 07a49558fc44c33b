# orders/views/assignment.py

"""
ASSIGNMENT ENDPOINTS

- POST /api/accept-order/  {"orderId": "<uuid>"}
- POST /api/reject-order/  {"orderId": "<uuid>", "reason": "..."}

These two keep their own flat, camelCase response bodies (the courier app
matches on `error == "OrderAlreadyAssigned"` / `"DuplicateRejection"`),
rather than the nested error envelope used elsewhere.

Status codes:
- 200 ok
- 400 orderId missing, or orderId / reason not a string
- 401 no / bad Bearer token
- 403 caller is not a delivery account
- 404 order missing (or not claimable, for accept)
- 409 lost the claim race / already declined
- 500 anything unexpected (logged with traceback)
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.serializers import OrderSerializer
from orders.services import (
    DuplicateRejection,
    OrderAlreadyAssigned,
    OrderUnavailable,
    claim_order,
    decline_order,
)
from orders.views.common import iso
from users.permissions import IsCourier

logger = logging.getLogger(__name__)


# =====================================================
# INPUT SERIALIZERS
# =====================================================

class StrictCharField(serializers.CharField):
    """CharField that refuses numbers and booleans instead of coercing them."""

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(data)


class AcceptOrderInputSerializer(serializers.Serializer):
    orderId = StrictCharField(required=False, allow_blank=True)


class RejectOrderInputSerializer(serializers.Serializer):
    orderId = StrictCharField(required=False, allow_blank=True)
    reason = StrictCharField(required=False, allow_blank=True, allow_null=True)


def _validated_input(serializer_class, request):
    """
    Returns (data, None) or (None, flat 400 response).
    """
    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        return None, Response(
            {"error": "Invalid request", "details": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return serializer.validated_data, None


def _internal_error(exc):
    return Response(
        {"error": "Internal server error", "details": str(exc)},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AcceptOrderView(APIView):
    permission_classes = [IsAuthenticated, IsCourier]

    @extend_schema(
        request=AcceptOrderInputSerializer,
        responses={200: dict, 404: dict, 409: dict},
        description="Claim a ready order. Exactly one courier wins; losers get 409 naming the winner.",
        examples=[
            OpenApiExample(
                "Lost the race",
                response_only=True,
                status_codes=["409"],
                value={
                    "error": "OrderAlreadyAssigned",
                    "message": "This order has already been accepted by another delivery person",
                    "assignedTo": {"id": "9b0c...", "name": "Ada"},
                    "assignedAt": "2025-10-17T12:00:00+00:00",
                },
            )
        ],
    )
    def post(self, request):
        data, invalid = _validated_input(AcceptOrderInputSerializer, request)
        if invalid is not None:
            return invalid

        order_id = data.get("orderId") or ""
        if not order_id:
            return Response({"error": "Order ID is required"}, status=status.HTTP_400_BAD_REQUEST)

        courier = request.user
        logger.info("Claim attempt", extra={"order_id": order_id, "courier_id": str(courier.pk)})

        try:
            result = claim_order(order_id=order_id, courier=courier)
        except OrderAlreadyAssigned as exc:
            return Response(
                {
                    "error": "OrderAlreadyAssigned",
                    "message": str(exc),
                    "assignedTo": {"id": str(exc.courier_id), "name": exc.courier_name},
                    "assignedAt": iso(exc.assigned_at),
                },
                status=status.HTTP_409_CONFLICT,
            )
        except OrderUnavailable as exc:
            return Response({"error": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except Exception as exc:
            logger.exception("Unexpected error accepting order", extra={"order_id": order_id})
            return _internal_error(exc)

        order = result.order
        return Response(
            {
                "success": True,
                "orderId": str(order.pk),
                "status": order.status,
                "assignedTo": {"id": str(courier.pk), "name": courier.display_name},
                "assignedAt": iso(result.assigned_at),
                "order": OrderSerializer(order).data,
            },
            status=status.HTTP_200_OK,
        )


class RejectOrderView(APIView):
    permission_classes = [IsAuthenticated, IsCourier]

    @extend_schema(
        request=RejectOrderInputSerializer,
        responses={200: dict, 404: dict, 409: dict},
        description="Decline an order; it is hidden from you for the cooldown window.",
    )
    def post(self, request):
        data, invalid = _validated_input(RejectOrderInputSerializer, request)
        if invalid is not None:
            return invalid

        order_id = data.get("orderId") or ""
        if not order_id:
            return Response({"error": "Order ID is required"}, status=status.HTTP_400_BAD_REQUEST)

        reason = data.get("reason")
        courier = request.user

        try:
            result = decline_order(order_id=order_id, courier=courier, reason=reason)
        except DuplicateRejection as exc:
            return Response(
                {
                    "error": "DuplicateRejection",
                    "message": str(exc),
                    "orderId": str(exc.order_id),
                    "reofferableAfter": iso(exc.reofferable_after),
                },
                status=status.HTTP_409_CONFLICT,
            )
        except OrderUnavailable as exc:
            return Response({"error": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except Exception as exc:
            logger.exception("Unexpected error rejecting order", extra={"order_id": order_id})
            return _internal_error(exc)

        return Response(
            {
                "success": True,
                "message": "Order rejected successfully",
                "orderId": str(result.order_id),
                "rejectedAt": iso(result.rejected_at),
                "reofferableAfter": iso(result.reofferable_after),
            },
            status=status.HTTP_200_OK,
        )
