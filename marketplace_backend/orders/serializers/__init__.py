from .history import DeliveryHistorySerializer
from .order import OrderItemSerializer, OrderSerializer
from .rating import RatingSerializer

__all__ = [
    "DeliveryHistorySerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "RatingSerializer",
]
