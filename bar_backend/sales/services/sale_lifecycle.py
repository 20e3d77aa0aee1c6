"""
SALE LIFECYCLE

The only place a sale's status changes.

RULES:
- target must be one of pending / completed / cancelled
- moving into `cancelled` restores every line's stock exactly once
- `cancelled` is terminal: cancelled -> cancelled is an idempotent no-op,
  any other move out of it is rejected with InvalidStatus
- a line whose product is gone is skipped (warning + audit event);
  the cancellation itself never fails because of it
- the sale row is locked for the duration, so concurrent cancellations
  serialize and only the first one restores
"""

import logging

from django.db import transaction
from django.utils import timezone

from backend.errors import InvalidStatus, NotFound
from products.models import Product, StockAuditEvent
from products.services.stock import adjust_stock, record_skipped_restore
from sales.models import Sale

logger = logging.getLogger(__name__)

TERMINAL_STATES = {
    Sale.STATUS_CANCELLED,
}


def validate_transition(*, sale: Sale, target_status: str):
    if sale.status in TERMINAL_STATES and target_status != sale.status:
        raise InvalidStatus(
            f"Sale cannot transition from '{sale.status}' to '{target_status}'",
            errors={"status": [f"A {sale.status} sale cannot be reopened."]},
            sale_id=str(sale.pk),
        )


def _restore_stock(sale: Sale, *, user=None) -> int:
    restored = 0
    existing = set(
        Product.objects.filter(
            pk__in=[i.product_id for i in sale.items.all() if i.product_id]
        ).values_list("pk", flat=True)
    )

    for item in sale.items.all():
        if item.product_id is None or item.product_id not in existing:
            record_skipped_restore(
                product_ref=item.product_ref or item.product_id or item.pk,
                quantity=item.quantity,
                sale=sale,
                user=user,
            )
            continue

        adjust_stock(
            item.product_id,
            item.quantity,
            kind=StockAuditEvent.Kind.CANCELLATION,
            sale=sale,
            user=user,
        )
        restored += 1

    return restored


@transaction.atomic
def update_sale_status(sale_id, status, *, user=None) -> Sale:
    if status not in Sale.valid_statuses():
        raise InvalidStatus(
            "Invalid status",
            errors={"status": [f"Must be one of: {', '.join(sorted(Sale.valid_statuses()))}."]},
        )

    sale = Sale.objects.select_for_update().filter(pk=sale_id).first()
    if sale is None:
        raise NotFound("Sale not found", sale_id=str(sale_id))

    previous = sale.status

    if status == previous:
        logger.info(
            "Sale status unchanged",
            extra={"sale_id": str(sale.pk), "status": status},
        )
        return sale

    validate_transition(sale=sale, target_status=status)

    update_fields = ["status", "updated_at"]

    if status == Sale.STATUS_CANCELLED:
        restored = _restore_stock(sale, user=user)
        sale.cancelled_at = timezone.now()
        update_fields.append("cancelled_at")
        logger.info(
            "Sale cancelled, stock restored",
            extra={"sale_id": str(sale.pk), "lines_restored": restored},
        )

    sale.status = status
    sale.save(update_fields=update_fields)

    logger.info(
        "Sale status updated",
        extra={"sale_id": str(sale.pk), "from": previous, "to": status},
    )
    return sale
