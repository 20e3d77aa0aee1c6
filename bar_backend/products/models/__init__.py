"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .product import DEFAULT_CATEGORY, Product
from .stock_audit import StockAuditEvent

__all__ = [
    "DEFAULT_CATEGORY",
    "Product",
    "StockAuditEvent",
]
