from .cart_service import (
    CartError,
    ProductUnavailableError,
    VendorGroup,
    add_to_cart,
    group_cart_by_store,
    set_cart_quantity,
)

__all__ = [
    "CartError",
    "ProductUnavailableError",
    "VendorGroup",
    "add_to_cart",
    "group_cart_by_store",
    "set_cart_quantity",
]
