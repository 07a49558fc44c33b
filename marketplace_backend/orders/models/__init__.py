"""
PATH: orders/models/__init__.py

Orders models export surface.
"""

from .delivery_history import DeliveryHistory
from .order import Order, OrderItem
from .rating import Rating
from .rejection import OrderRejection

__all__ = [
    "Order",
    "OrderItem",
    "OrderRejection",
    "DeliveryHistory",
    "Rating",
]
