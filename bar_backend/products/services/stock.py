# products/services/stock.py

"""
STOCK ADJUSTMENT SERVICE

The single choke point for every stock mutation (direct adjustments, sale
decrements, cancellation restores).

Rules:
- quantity_delta must be a non-zero integer (bools rejected)
- stock += delta is applied as ONE conditional UPDATE:
      UPDATE product SET stock = stock + delta
      WHERE id = <id> AND stock >= -delta
  so two concurrent writers can never drive stock below zero
- zero rows updated -> NotFound (no such product) or InsufficientStock
- every successful call appends a StockAuditEvent
- resulting stock <= min_stock -> low-stock warning in the log
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from backend.errors import InsufficientStock, NotFound, ValidationError
from products.models import Product, StockAuditEvent

logger = logging.getLogger(__name__)


def to_int_delta(value, *, field: str = "quantity") -> int:
    if value is None or value == "":
        raise ValidationError(f"{field} is required", errors={field: ["This field is required."]})

    if isinstance(value, bool):
        # bool is an int subclass in Python
        raise ValidationError(f"{field} must be an integer", errors={field: ["Must be an integer."]})

    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field} must be an integer", errors={field: ["Must be an integer."]})

    try:
        delta = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", errors={field: ["Must be an integer."]})

    if delta == 0:
        raise ValidationError(f"{field} cannot be 0", errors={field: ["Cannot be 0."]})

    return delta


def adjust_stock(
    product_id,
    quantity_delta,
    *,
    kind: str = StockAuditEvent.Kind.ADJUSTMENT,
    sale=None,
    user=None,
    note: str = "",
) -> Product:
    """
    Apply `stock += quantity_delta` atomically and return the fresh product.

    Raises:
    - ValidationError   delta is not a non-zero integer
    - NotFound          product does not exist
    - InsufficientStock result would be negative
    """
    delta = to_int_delta(quantity_delta)

    with transaction.atomic():
        updated = Product.objects.filter(pk=product_id, stock__gte=-delta).update(
            stock=F("stock") + delta,
            updated_at=timezone.now(),
        )

        if not updated:
            current = Product.objects.filter(pk=product_id).values("name", "stock").first()
            if current is None:
                raise NotFound(f"Product not found: {product_id}", product_id=str(product_id))
            raise InsufficientStock(
                f"Insufficient stock for: {current['name']}",
                product_id=str(product_id),
                product_name=current["name"],
                available=current["stock"],
                requested=-delta,
            )

        product = Product.objects.get(pk=product_id)

        StockAuditEvent.objects.create(
            product=product,
            product_ref=str(product.pk),
            sale=sale,
            kind=kind,
            quantity_delta=delta,
            stock_after=product.stock,
            performed_by=user if getattr(user, "is_authenticated", False) else None,
            note=note[:255],
        )

    logger.info(
        "Stock adjusted",
        extra={
            "product_id": str(product.pk),
            "delta": delta,
            "stock_after": product.stock,
            "kind": str(kind),
            "sale_id": str(sale.pk) if sale is not None else None,
        },
    )
    warn_if_low_stock(product)

    return product


def record_skipped_restore(*, product_ref, quantity: int, sale=None, user=None) -> StockAuditEvent:
    """
    Audit a cancellation restore that could not be applied (product gone).
    """
    logger.warning(
        "Stock restore skipped: product %s no longer exists",
        product_ref,
        extra={
            "product_ref": str(product_ref),
            "quantity": quantity,
            "sale_id": str(sale.pk) if sale is not None else None,
        },
    )
    return StockAuditEvent.objects.create(
        product=None,
        product_ref=str(product_ref),
        sale=sale,
        kind=StockAuditEvent.Kind.RESTORE_SKIPPED,
        quantity_delta=int(quantity),
        stock_after=None,
        performed_by=user if getattr(user, "is_authenticated", False) else None,
        note="Product missing at cancellation; reconcile manually",
    )


def warn_if_low_stock(product: Product) -> bool:
    if not product.is_low_stock:
        return False
    logger.warning(
        "LOW STOCK: %s has %s %s (minimum: %s)",
        product.name,
        product.stock,
        product.unit,
        product.min_stock,
        extra={"product_id": str(product.pk)},
    )
    return True


def low_stock_products():
    return Product.objects.low_stock().order_by("stock", "name")
