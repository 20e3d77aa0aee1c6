from .sale import DateRangeSerializer, SaleCreateSerializer, SaleSerializer, SaleStatisticsSerializer, SaleStatusSerializer
from .sale_item import SaleItemInputSerializer, SaleItemSerializer

__all__ = [
    "DateRangeSerializer",
    "SaleCreateSerializer",
    "SaleItemInputSerializer",
    "SaleItemSerializer",
    "SaleSerializer",
    "SaleStatisticsSerializer",
    "SaleStatusSerializer",
]
