# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q

DEFAULT_CATEGORY = "Sin categoría"


class ProductQuerySet(models.QuerySet):
    def low_stock(self):
        """Products at or below their own minimum stock."""
        return self.filter(stock__lte=F("min_stock"))

    def out_of_stock(self):
        return self.filter(stock=0)


class Product(models.Model):
    """
    A sellable bar product.

    STOCK MODEL (IMPORTANT):
    - `stock` is a plain counter on the row.
    - It is mutated ONLY through products.services.stock.adjust_stock,
      which applies a single conditional UPDATE (never read-modify-write).
    - The database refuses negative stock (check constraint), so the
      invariant holds even if a caller bypasses the service.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100, db_index=True)
    description = models.TextField(blank=True, default="")

    stock = models.PositiveIntegerField(default=0)
    min_stock = models.PositiveIntegerField(default=0)

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    unit = models.CharField(max_length=50)
    category = models.CharField(max_length=100, default=DEFAULT_CATEGORY, db_index=True)

    # Optional; unique only when present (NULL never collides).
    barcode = models.CharField(max_length=64, unique=True, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(condition=Q(stock__gte=0), name="product_stock_non_negative"),
            models.CheckConstraint(condition=Q(price__gte=0), name="product_price_non_negative"),
        ]

    def __str__(self):
        return f"{self.name} ({self.stock} {self.unit})"

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Name is required"})

        self.barcode = (self.barcode or "").strip() or None
        self.category = (self.category or "").strip() or DEFAULT_CATEGORY

        if self.price is not None and Decimal(self.price) < 0:
            raise ValidationError({"price": "Price cannot be negative"})

    @property
    def is_low_stock(self) -> bool:
        return int(self.stock or 0) <= int(self.min_stock or 0)
