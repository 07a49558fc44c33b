from .api import AddCartItemView, CartDetailView, CartItemDetailView

__all__ = ["AddCartItemView", "CartDetailView", "CartItemDetailView"]
