# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Catalog browsing for every signed-in user (available + in stock only)
- Retailers list and edit products in stores they own

Endpoints:
- GET   /api/products/?store=<uuid>&category=<slug>&q=<search>
- GET   /api/products/mine/       every product across the caller's stores
- POST  /api/products/
- PATCH /api/products/<id>/
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import permissions, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from products.models import Product
from products.serializers import ProductSerializer
from users.permissions import IsRetailer


class IsProductStoreOwner(permissions.BasePermission):
    def has_object_permission(self, request, view, obj):
        return obj.store.is_owned_by(request.user)


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    http_method_names = ["get", "post", "patch", "head", "options"]
    filterset_fields = ["store", "category"]

    def get_permissions(self):
        if self.action in ("create", "partial_update", "mine"):
            return [permissions.IsAuthenticated(), IsRetailer(), IsProductStoreOwner()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):
        qs = Product.objects.select_related("store")

        if self.action in ("list", "retrieve"):
            qs = qs.filter(is_available=True, stock_quantity__gt=0, store__is_open=True)

            q = (self.request.query_params.get("q") or "").strip()
            if q:
                qs = qs.filter(Q(name__icontains=q) | Q(description__icontains=q))

        return qs.order_by("-created_at")

    @extend_schema(
        parameters=[
            OpenApiParameter(name="q", required=False, type=str, description="Search name/description"),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        qs = (
            Product.objects.select_related("store")
            .filter(store__owner=request.user)
            .order_by("store__name", "name")
        )
        return Response(ProductSerializer(qs, many=True, context={"request": request}).data)
