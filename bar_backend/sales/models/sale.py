# sales/models/sale.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q


class Sale(models.Model):
    """
    A bar sale ledger entry.

    GUARANTEES:
    - Line items are fixed once created; only `status` moves afterwards
    - `total` is computed server-side from the items
    - Stock is mutated ONLY via products.services.stock.adjust_stock
    - `cancelled_at` is written once, in the same transaction that
      restores stock, so restoration can never happen twice
    """

    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    PAYMENT_CASH = "cash"
    PAYMENT_CREDIT = "credit"
    PAYMENT_CARD = "card"

    PAYMENT_CHOICES = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_CREDIT, "Credit"),
        (PAYMENT_CARD, "Card"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    payment_method = models.CharField(max_length=16, choices=PAYMENT_CHOICES)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)

    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
        help_text="Staff member who recorded the sale",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="sale_created_idx"),
            models.Index(fields=["status", "created_at"], name="sale_status_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(total__gte=0), name="sale_total_non_negative"),
        ]

    @classmethod
    def valid_statuses(cls):
        return {value for value, _ in cls.STATUS_CHOICES}

    def __str__(self):
        return f"{self.pk} | {self.status} | {self.total}"
