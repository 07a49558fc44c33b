# cart/views/api.py

"""
CART API VIEWS

Purpose:
- Customer cart lifecycle: view (grouped by store), add, change quantity, remove.

Hard rules:
- Money is server-owned: price_snapshot comes from Product on first add.
- Customers only touch their own lines (other users' lines are a 404).
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.models import CartItem
from cart.serializers import CartItemSerializer, CartSerializer
from cart.serializers.cart_item import AddCartItemInputSerializer, UpdateCartItemInputSerializer
from cart.services import (
    CartError,
    ProductUnavailableError,
    add_to_cart,
    group_cart_by_store,
    set_cart_quantity,
)
from users.permissions import IsCustomer


# =====================================================
# API ERROR NORMALIZATION
# =====================================================

def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def _cart_payload(user):
    items = CartItem.objects.select_related("product__store").filter(user=user).order_by("created_at")
    return CartSerializer(group_cart_by_store(items)).data


# =====================================================
# CART API VIEWS
# =====================================================

class CartDetailView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @extend_schema(responses={200: dict}, description="The caller's cart, grouped by store")
    def get(self, request):
        return Response(_cart_payload(request.user), status=status.HTTP_200_OK)


class AddCartItemView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={201: CartItemSerializer},
        description="Add a product to the cart (increments quantity if already present)",
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item = add_to_cart(
                user=request.user,
                product_id=serializer.validated_data["product_id"],
                quantity=serializer.validated_data["quantity"],
            )
        except ProductUnavailableError as exc:
            return error_response(
                code="PRODUCT_UNAVAILABLE",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        except CartError as exc:
            return error_response(
                code="CART_ERROR",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(CartItemSerializer(item).data, status=status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @extend_schema(
        request=UpdateCartItemInputSerializer,
        responses={200: dict},
        description="Set a line's quantity; 0 removes the line",
    )
    def patch(self, request, item_id):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            set_cart_quantity(
                user=request.user,
                item_id=item_id,
                quantity=serializer.validated_data["quantity"],
            )
        except CartItem.DoesNotExist:
            return error_response(
                code="NOT_FOUND",
                message="Cart item not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )
        except CartError as exc:
            return error_response(
                code="CART_ERROR",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(_cart_payload(request.user), status=status.HTTP_200_OK)

    @extend_schema(responses={200: dict}, description="Remove a line from the cart")
    def delete(self, request, item_id):
        deleted, _ = CartItem.objects.filter(pk=item_id, user=request.user).delete()
        if not deleted:
            return error_response(
                code="NOT_FOUND",
                message="Cart item not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )

        return Response(_cart_payload(request.user), status=status.HTTP_200_OK)
