from .assignment import AcceptOrderView, RejectOrderView
from .checkout import CheckoutView
from .orders import (
    ActiveDeliveriesView,
    AvailableOrdersView,
    MyOrdersView,
    OrderChangesView,
    OrderHistoryView,
    OrderStatusView,
)
from .ratings import RateOrderView

__all__ = [
    "AcceptOrderView",
    "RejectOrderView",
    "CheckoutView",
    "ActiveDeliveriesView",
    "AvailableOrdersView",
    "MyOrdersView",
    "OrderChangesView",
    "OrderHistoryView",
    "OrderStatusView",
    "RateOrderView",
]
