from .sale_lifecycle import update_sale_status
from .sale_service import SaleLine, create_sale

__all__ = ["SaleLine", "create_sale", "update_sale_status"]
