# clients/models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q


class ClientQuerySet(models.QuerySet):
    def exceeded_credit(self):
        return self.filter(current_balance__gt=F("credit_limit"))


class Client(models.Model):
    """
    A bar customer who may buy on credit.

    - email / phone are optional but unique when present (NULL never collides)
    - current_balance is what the client owes; it only moves through
      clients.services.adjust_balance, which refuses to exceed credit_limit
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100, db_index=True)
    email = models.EmailField(unique=True, null=True, blank=True)
    phone = models.CharField(max_length=32, unique=True, null=True, blank=True)

    credit_limit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    current_balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ClientQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(current_balance__gte=0), name="client_balance_non_negative"
            ),
            models.CheckConstraint(
                condition=Q(credit_limit__gte=0), name="client_credit_limit_non_negative"
            ),
        ]

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Name is required"})
        self.email = (self.email or "").strip().lower() or None
        self.phone = (self.phone or "").strip() or None

    @property
    def has_exceeded_credit(self) -> bool:
        return Decimal(self.current_balance or 0) > Decimal(self.credit_limit or 0)

    def __str__(self):
        return self.name
