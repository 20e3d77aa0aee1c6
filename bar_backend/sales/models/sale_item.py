# sales/models/sale_item.py

"""
SALE ITEM (IMMUTABLE SNAPSHOT)

One sold line, captured at sale time.

Notes:
- product is a weak reference: deleting a product keeps the line,
  and `product_ref` / `product_name` preserve what was sold
- subtotal = quantity * unit_price, computed on create
- rows cannot be edited once saved
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .sale import Sale


class SaleItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sale_items",
    )
    product_ref = models.CharField(max_length=64, blank=True, default="")
    product_name = models.CharField(max_length=100, blank=True, default="")

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
    )

    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["sale", "position"]
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gte=1), name="saleitem_quantity_positive"),
            models.CheckConstraint(condition=models.Q(unit_price__gte=0), name="saleitem_price_non_negative"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleItem records are immutable once created")

        self.subtotal = Decimal(self.unit_price) * int(self.quantity)
        if self.product is not None:
            self.product_ref = self.product_ref or str(self.product.pk)
            self.product_name = self.product_name or self.product.name

        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_name or self.product_id} x{self.quantity}"
