# store/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from store.views import StoreViewSet

router = SimpleRouter()
router.register(r"", StoreViewSet, basename="stores")

urlpatterns = [
    path("", include(router.urls)),
]
