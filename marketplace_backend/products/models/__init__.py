"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .product import Product, ProductCategory

__all__ = [
    "Product",
    "ProductCategory",
]
