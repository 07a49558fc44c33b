# store/views/store.py

"""
STORE VIEWSET

- GET   /api/store/          open stores, best rated first
- GET   /api/store/mine/     the retailer's own stores (open or closed)
- POST  /api/store/          retailer opens a store (owner = caller)
- PATCH /api/store/<id>/     owner edits their store
"""

from rest_framework import permissions, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from store.models import Store
from store.serializers import StoreSerializer
from users.permissions import IsRetailer


class IsStoreOwner(permissions.BasePermission):
    def has_object_permission(self, request, view, obj):
        return obj.is_owned_by(request.user)


class StoreViewSet(viewsets.ModelViewSet):
    serializer_class = StoreSerializer
    http_method_names = ["get", "post", "patch", "head", "options"]
    filterset_fields = ["is_open"]

    def get_queryset(self):
        if self.action in ("list", "retrieve"):
            return Store.objects.filter(is_open=True).order_by("-rating_avg", "name")
        return Store.objects.all()

    def get_permissions(self):
        if self.action in ("create", "partial_update", "mine"):
            return [permissions.IsAuthenticated(), IsRetailer(), IsStoreOwner()]
        return [permissions.IsAuthenticated()]

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        qs = Store.objects.filter(owner=request.user).order_by("name")
        return Response(StoreSerializer(qs, many=True).data)
