# products/models/stock_audit.py

"""
STOCK AUDIT LEDGER

Immutable record of every stock mutation, plus every restoration that had
to be skipped because the product no longer exists.

GUARANTEES:
- Append-only (no updates, no deletes)
- `product_ref` keeps the product id as text, so rows survive product deletion
- `restore_skipped` rows are how operators find stock to reconcile by hand
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class StockAuditEvent(models.Model):
    class Kind(models.TextChoices):
        SALE = "sale", "Sale"
        CANCELLATION = "cancellation", "Sale cancellation"
        ADJUSTMENT = "adjustment", "Manual adjustment"
        RESTORE_SKIPPED = "restore_skipped", "Restoration skipped (product missing)"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_events",
    )
    product_ref = models.CharField(max_length=64, db_index=True)

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_events",
    )

    kind = models.CharField(max_length=20, choices=Kind.choices)
    quantity_delta = models.IntegerField()
    stock_after = models.IntegerField(null=True, blank=True)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_events",
    )

    note = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["kind", "created_at"], name="stockaudit_kind_created_idx"),
            models.Index(fields=["sale", "created_at"], name="stockaudit_sale_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockAuditEvent records are immutable")
        if not self.product_ref and self.product_id:
            self.product_ref = str(self.product_id)
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("StockAuditEvent records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.product_ref} | {self.kind} | {self.quantity_delta:+d}"
