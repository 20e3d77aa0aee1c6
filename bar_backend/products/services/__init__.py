from .stock import adjust_stock, low_stock_products, record_skipped_restore, warn_if_low_stock

__all__ = [
    "adjust_stock",
    "low_stock_products",
    "record_skipped_restore",
    "warn_if_low_stock",
]
