# clients/services.py

"""
CLIENT BALANCE SERVICE

current_balance += amount, as ONE conditional UPDATE:
- charges (amount > 0) must keep the balance within credit_limit
- payments (amount < 0) must keep the balance >= 0
Zero rows updated -> NotFound, or ValidationError naming the broken rule.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from django.db.models import F
from django.utils import timezone

from backend.errors import NotFound, ValidationError
from clients.models import Client

logger = logging.getLogger(__name__)


def _to_amount(value) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError("amount must be a number", errors={"amount": ["Must be a number."]})
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("amount must be a number", errors={"amount": ["Must be a number."]})
    if not amount.is_finite():
        raise ValidationError("amount must be a number", errors={"amount": ["Must be a number."]})
    return amount.quantize(Decimal("0.01"))


def adjust_balance(client_id, amount) -> Client:
    """
    Charge (positive) or pay down (negative) a client's balance.
    """
    amount = _to_amount(amount)

    qs = Client.objects.filter(pk=client_id)
    if amount > 0:
        qs = qs.filter(current_balance__lte=F("credit_limit") - amount)
    else:
        qs = qs.filter(current_balance__gte=-amount)

    updated = qs.update(current_balance=F("current_balance") + amount, updated_at=timezone.now())

    if not updated:
        client = Client.objects.filter(pk=client_id).first()
        if client is None:
            raise NotFound(f"Client not found: {client_id}", client_id=str(client_id))
        if amount < 0:
            raise ValidationError(
                "Balance cannot be negative",
                errors={"amount": ["Resulting balance would be negative."]},
                client_id=str(client_id),
            )
        logger.warning(
            "Credit limit exceeded for client %s",
            client.name,
            extra={"client_id": str(client.pk), "amount": str(amount)},
        )
        raise ValidationError(
            "Credit limit exceeded",
            errors={"amount": ["Resulting balance would exceed the credit limit."]},
            client_id=str(client_id),
        )

    client = Client.objects.get(pk=client_id)
    logger.info(
        "Client balance adjusted",
        extra={
            "client_id": str(client.pk),
            "amount": str(amount),
            "balance": str(client.current_balance),
        },
    )
    return client
