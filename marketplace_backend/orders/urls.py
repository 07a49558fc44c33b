# orders/urls.py

"""
ORDERS URLS (mounted at /api/orders/)

accept-order / reject-order are mounted at /api/ directly; see
assignment_urlpatterns below and backend/urls.py.
"""

from django.urls import path, re_path

from orders.views import (
    AcceptOrderView,
    ActiveDeliveriesView,
    AvailableOrdersView,
    CheckoutView,
    MyOrdersView,
    OrderChangesView,
    OrderHistoryView,
    OrderStatusView,
    RateOrderView,
    RejectOrderView,
)

urlpatterns = [
    path("available/", AvailableOrdersView.as_view(), name="orders-available"),
    path("active/", ActiveDeliveriesView.as_view(), name="orders-active"),
    path("mine/", MyOrdersView.as_view(), name="orders-mine"),
    path("changes/", OrderChangesView.as_view(), name="orders-changes"),
    path("checkout/", CheckoutView.as_view(), name="orders-checkout"),
    path("<uuid:order_id>/status/", OrderStatusView.as_view(), name="orders-status"),
    path("<uuid:order_id>/history/", OrderHistoryView.as_view(), name="orders-history"),
    path("<uuid:order_id>/ratings/", RateOrderView.as_view(), name="orders-ratings"),
]

# Courier apps post to both "accept-order" and "accept-order/".
assignment_urlpatterns = [
    re_path(r"^accept-order/?$", AcceptOrderView.as_view(), name="accept-order"),
    re_path(r"^reject-order/?$", RejectOrderView.as_view(), name="reject-order"),
]
