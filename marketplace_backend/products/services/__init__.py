from .inventory import reduce_stock

__all__ = [
    "reduce_stock",
]
