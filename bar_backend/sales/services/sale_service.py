# sales/services/sale_service.py

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from backend.errors import InsufficientStock, NotFound, ValidationError
from clients.models import Client
from products.models import Product, StockAuditEvent
from products.services.stock import adjust_stock
from sales.models import Sale, SaleItem

logger = logging.getLogger(__name__)

# Largest value a numeric(12, 2) money column holds.
MAX_AMOUNT = Decimal("9999999999.99")


@dataclass(frozen=True)
class SaleLine:
    product_id: object
    quantity: int
    unit_price: Decimal | None = None


def _validate_lines(lines):
    """
    Resolve every product and check stock BEFORE anything is written.

    Quantities are summed per product so two lines of the same product
    cannot each pass on their own and overdraw together.
    """
    products = {}
    requested = OrderedDict()

    for line in lines:
        key = str(line.product_id)
        if key not in products:
            product = Product.objects.filter(pk=line.product_id).first()
            if product is None:
                raise NotFound(f"Product not found: {line.product_id}", product_id=key)
            products[key] = product
        requested[key] = requested.get(key, 0) + int(line.quantity)

    for key, quantity in requested.items():
        product = products[key]
        if product.stock < quantity:
            raise InsufficientStock(
                f"Insufficient stock for: {product.name}",
                product_id=key,
                product_name=product.name,
                available=product.stock,
                requested=quantity,
            )

    return products


@transaction.atomic
def create_sale(
    *,
    lines,
    payment_method: str,
    client_id=None,
    total=None,
    user=None,
) -> Sale:
    """
    CORE SALES DOMAIN SERVICE

    SINGLE SOURCE OF TRUTH for:
    - Sale + SaleItem creation
    - Stock decrement
    - Totals calculation

    GUARANTEES:
    - Every line is validated before any stock moves
    - Fully atomic: a failure leaves no sale, no items, no stock change
    - `total` is computed here; a disagreeing client total is logged and ignored
    """
    lines = list(lines)
    if not lines:
        raise ValidationError("Sale must have at least one item", errors={"items": ["At least one item is required."]})

    if payment_method not in dict(Sale.PAYMENT_CHOICES):
        raise ValidationError(
            "Invalid payment method",
            errors={"paymentMethod": [f"Must be one of: {', '.join(dict(Sale.PAYMENT_CHOICES))}."]},
        )

    client = None
    if client_id:
        client = Client.objects.filter(pk=client_id).first()
        if client is None:
            raise NotFound(f"Client not found: {client_id}", client_id=str(client_id))

    products = _validate_lines(lines)

    priced = []
    computed = Decimal("0.00")
    for line in lines:
        product = products[str(line.product_id)]
        unit_price = product.price if line.unit_price is None else Decimal(line.unit_price)
        priced.append((product, line, unit_price))
        computed += unit_price * int(line.quantity)

    if computed > MAX_AMOUNT:
        raise ValidationError(
            "Sale total is too large",
            errors={"items": [f"Sale total cannot exceed {MAX_AMOUNT}."]},
            computed=str(computed),
        )

    sale = Sale.objects.create(
        payment_method=payment_method,
        status=Sale.STATUS_PENDING,
        client=client,
        created_by=user if getattr(user, "is_authenticated", False) else None,
    )

    for position, (product, line, unit_price) in enumerate(priced):
        SaleItem.objects.create(
            sale=sale,
            product=product,
            product_name=product.name,
            quantity=line.quantity,
            unit_price=unit_price,
            position=position,
        )

        # Concurrent writers are still caught here by the conditional UPDATE.
        adjust_stock(
            product.pk,
            -int(line.quantity),
            kind=StockAuditEvent.Kind.SALE,
            sale=sale,
            user=user,
        )

    if total is not None and Decimal(total) != computed:
        logger.warning(
            "Client-supplied sale total ignored",
            extra={"sale_id": str(sale.pk), "supplied": str(total), "computed": str(computed)},
        )

    sale.total = computed
    sale.save(update_fields=["total", "updated_at"])

    logger.info(
        "Sale created",
        extra={
            "sale_id": str(sale.pk),
            "total": str(computed),
            "items": len(lines),
            "payment_method": payment_method,
        },
    )
    return sale
