# orders/views/orders.py

"""
ORDER READ + STATUS ENDPOINTS

- GET  /api/orders/available/             courier: claimable now (cooldown applied)
- GET  /api/orders/active/                courier: my orders in progress
- GET  /api/orders/mine/                  any role: orders I take part in
- GET  /api/orders/<id>/history/          participants: audit rows
- GET  /api/orders/changes/?since=<iso>[&after_id=<id>]
                                          any role: orders of mine changed since
- POST /api/orders/<id>/status/           move an order forward

The changes endpoint replaces "refetch everything on any order change":
clients poll it with the server_time of their previous call and get only
rows they are entitled to see.
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import DeliveryHistory, Order, OrderRejection
from orders.serializers import DeliveryHistorySerializer, OrderSerializer
from orders.services import (
    InvalidOrderTransitionError,
    OrderNotFoundError,
    TransitionNotPermittedError,
    advance_order_status,
    available_orders_for_courier,
)
from orders.views.common import error_response, iso
from users.permissions import IsCourier

ACTIVE_DELIVERY_STATES = (
    Order.Status.ASSIGNED,
    Order.Status.PICKED_UP,
    Order.Status.DELIVERING,
)


def _participant_filter(user) -> Q:
    return Q(customer=user) | Q(courier=user) | Q(store__owner=user)


def _with_relations(qs):
    return qs.select_related("store", "customer", "courier").prefetch_related("items")


class StatusUpdateInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


# =====================================================
# COURIER LISTINGS
# =====================================================

class AvailableOrdersView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, IsCourier]
    serializer_class = OrderSerializer

    def get_queryset(self):
        return available_orders_for_courier(self.request.user).prefetch_related("items")


class ActiveDeliveriesView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, IsCourier]
    serializer_class = OrderSerializer

    def get_queryset(self):
        qs = Order.objects.filter(courier=self.request.user, status__in=ACTIVE_DELIVERY_STATES)
        return _with_relations(qs).order_by("updated_at")


# =====================================================
# PARTICIPANT VIEWS
# =====================================================

class MyOrdersView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    filterset_fields = ["status", "store"]

    def get_queryset(self):
        qs = Order.objects.filter(_participant_filter(self.request.user)).distinct()
        return _with_relations(qs).order_by("-created_at")


class OrderHistoryView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: DeliveryHistorySerializer(many=True)})
    def get(self, request, order_id):
        order = Order.objects.select_related("store").filter(pk=order_id).first()
        if order is None:
            return error_response(code="NOT_FOUND", message="Order not found", http_status=status.HTTP_404_NOT_FOUND)

        if not order.is_participant(request.user):
            return error_response(
                code="FORBIDDEN",
                message="You are not part of this order",
                http_status=status.HTTP_403_FORBIDDEN,
            )

        rows = DeliveryHistory.objects.filter(order=order).order_by("created_at")
        return Response(DeliveryHistorySerializer(rows, many=True).data, status=status.HTTP_200_OK)


class OrderChangesView(APIView):
    """
    Scoped poll. A courier additionally sees orders that became claimable
    for them; nobody sees orders they have no part in.

    Paging is keyset on (updated_at, id): a truncated page returns the last
    row's updated_at as `server_time` and its id as `after_id`; pass both
    back to continue without skipping rows that share a timestamp.

    A cooldown running out does not touch the order row, so such orders
    would never surface through updated_at. For couriers they are returned
    separately in `reoffered`: still claimable, and this courier's cooldown
    on them ended in (since, now].
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[
            OpenApiParameter(name="since", required=True, type=str, description="ISO-8601 timestamp"),
            OpenApiParameter(
                name="after_id",
                required=False,
                type=str,
                description="id of the last order of a truncated page",
            ),
        ],
        responses={200: dict},
    )
    def get(self, request):
        raw = (request.query_params.get("since") or "").strip()
        try:
            since = parse_datetime(raw) if raw else None
        except ValueError:
            since = None
        if since is None:
            return error_response(
                code="INVALID_SINCE",
                message="since must be an ISO-8601 timestamp",
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        if timezone.is_naive(since):
            since = timezone.make_aware(since, timezone.get_current_timezone())

        raw_after = (request.query_params.get("after_id") or "").strip()
        after_id = None
        if raw_after:
            try:
                after_id = uuid.UUID(raw_after)
            except ValueError:
                return error_response(
                    code="INVALID_AFTER_ID",
                    message="after_id must be an order id",
                    http_status=status.HTTP_400_BAD_REQUEST,
                )

        now = timezone.now()
        user = request.user

        scope = _participant_filter(user)
        claimable_ids = None
        if user.is_courier:
            claimable_ids = available_orders_for_courier(user, now=now).values("pk")
            scope = scope | Q(pk__in=claimable_ids)

        changed = Q(updated_at__gt=since)
        if after_id is not None:
            changed |= Q(updated_at=since, pk__gt=after_id)

        limit = int(settings.ORDER_CHANGES_MAX_RESULTS)
        qs = _with_relations(
            Order.objects.filter(scope).filter(changed).distinct()
        ).order_by("updated_at", "pk")

        rows = list(qs[: limit + 1])
        has_more = len(rows) > limit
        rows = rows[:limit]

        if has_more:
            next_since, next_after = rows[-1].updated_at, str(rows[-1].pk)
        else:
            next_since, next_after = now, None

        reoffered = []
        if claimable_ids is not None:
            expired = OrderRejection.objects.filter(
                courier=user,
                reofferable_after__gt=since,
                reofferable_after__lte=now,
            ).values("order_id")
            reoffered = list(
                _with_relations(
                    Order.objects.filter(pk__in=claimable_ids).filter(pk__in=expired)
                ).order_by("created_at")
            )

        return Response(
            {
                "orders": OrderSerializer(rows, many=True).data,
                "has_more": has_more,
                "server_time": iso(next_since),
                "after_id": next_after,
                "reoffered": OrderSerializer(reoffered, many=True).data,
            },
            status=status.HTTP_200_OK,
        )


# =====================================================
# STATUS
# =====================================================

class OrderStatusView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=StatusUpdateInputSerializer, responses={200: OrderSerializer})
    def post(self, request, order_id):
        serializer = StatusUpdateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            advance_order_status(
                order_id=order_id,
                actor=request.user,
                target_status=serializer.validated_data["status"],
            )
        except OrderNotFoundError as exc:
            return error_response(code="NOT_FOUND", message=str(exc), http_status=status.HTTP_404_NOT_FOUND)
        except TransitionNotPermittedError as exc:
            return error_response(code="FORBIDDEN", message=str(exc), http_status=status.HTTP_403_FORBIDDEN)
        except InvalidOrderTransitionError as exc:
            return error_response(
                code="INVALID_TRANSITION",
                message=str(exc),
                http_status=status.HTTP_409_CONFLICT,
            )

        order = _with_relations(Order.objects.filter(pk=order_id)).get()
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
