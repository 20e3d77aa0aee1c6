# products/serializers/__init__.py

from .product import MostConsumedProductSerializer, ProductSerializer, StockAdjustSerializer

__all__ = [
    "ProductSerializer",
    "StockAdjustSerializer",
    "MostConsumedProductSerializer",
]
