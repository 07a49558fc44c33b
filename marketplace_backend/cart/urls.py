# cart/urls.py

from django.urls import path

from cart.views import AddCartItemView, CartDetailView, CartItemDetailView

urlpatterns = [
    path("", CartDetailView.as_view(), name="cart-detail"),
    path("items/", AddCartItemView.as_view(), name="cart-add-item"),
    path("items/<uuid:item_id>/", CartItemDetailView.as_view(), name="cart-item-detail"),
]
