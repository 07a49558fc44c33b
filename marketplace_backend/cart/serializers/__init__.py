from .cart_item import CartItemSerializer, CartSerializer, VendorGroupSerializer

__all__ = ["CartItemSerializer", "CartSerializer", "VendorGroupSerializer"]
