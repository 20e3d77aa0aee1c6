# sales/tests/test_sales.py

from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError as DjangoValidationError
from django.test import TestCase

from backend.errors import InsufficientStock, InvalidStatus, NotFound, ValidationError
from clients.models import Client
from products.models import Product, StockAuditEvent
from sales.models import Sale, SaleItem
from sales.services import SaleLine, create_sale, sale_service, update_sale_status


class CreateSaleTests(TestCase):
    """
    Sale creation.

    GUARANTEES:
    - subtotal = quantity x unit_price, total = sum of subtotals
    - every line is validated before any stock moves
    - a failed sale leaves no sale, no items and no stock change
    """

    def setUp(self):
        self.beer = Product.objects.create(name="Cerveza", price=Decimal("1000.00"), unit="botella", stock=10)
        self.peanuts = Product.objects.create(name="Maní", price=Decimal("500.00"), unit="bolsa", stock=5)

    def test_totals_are_computed(self):
        sale = create_sale(
            lines=[
                SaleLine(self.beer.pk, 2, Decimal("1000")),
                SaleLine(self.peanuts.pk, 1, Decimal("500")),
            ],
            payment_method="cash",
        )

        items = list(sale.items.order_by("position"))
        self.assertEqual([i.subtotal for i in items], [Decimal("2000.00"), Decimal("500.00")])
        self.assertEqual(sale.total, Decimal("2500.00"))
        self.assertEqual(sale.status, Sale.STATUS_PENDING)

    def test_stock_is_decremented_and_audited(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 4)], payment_method="card")

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 6)

        event = StockAuditEvent.objects.get(sale=sale)
        self.assertEqual(event.kind, StockAuditEvent.Kind.SALE)
        self.assertEqual(event.quantity_delta, -4)

    def test_unit_price_defaults_to_product_price(self):
        sale = create_sale(lines=[SaleLine(self.peanuts.pk, 3)], payment_method="cash")

        self.assertEqual(sale.items.get().unit_price, Decimal("500.00"))
        self.assertEqual(sale.total, Decimal("1500.00"))

    def test_client_supplied_total_is_ignored(self):
        sale = create_sale(
            lines=[SaleLine(self.beer.pk, 1, Decimal("1000"))],
            payment_method="cash",
            total=Decimal("1.00"),
        )
        self.assertEqual(sale.total, Decimal("1000.00"))

    def test_insufficient_stock_leaves_no_mutation(self):
        """A later failing line must not leave earlier lines applied."""
        with self.assertRaises(InsufficientStock) as ctx:
            create_sale(
                lines=[
                    SaleLine(self.beer.pk, 2),
                    SaleLine(self.peanuts.pk, 6),
                ],
                payment_method="cash",
            )

        self.assertEqual(ctx.exception.product_name, "Maní")
        self.assertIn("Maní", ctx.exception.message)

        self.beer.refresh_from_db()
        self.peanuts.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)
        self.assertEqual(self.peanuts.stock, 5)
        self.assertFalse(Sale.objects.exists())
        self.assertFalse(SaleItem.objects.exists())
        self.assertFalse(StockAuditEvent.objects.exists())

    def test_stock_drop_after_validation_rolls_back_sale(self):
        """A concurrent writer between validation and decrement still fails the whole sale."""
        validate = sale_service._validate_lines

        def validate_then_drain(lines):
            products = validate(lines)
            Product.objects.filter(pk=self.peanuts.pk).update(stock=1)
            return products

        with mock.patch.object(sale_service, "_validate_lines", side_effect=validate_then_drain):
            with self.assertRaises(InsufficientStock) as ctx:
                create_sale(
                    lines=[SaleLine(self.beer.pk, 2), SaleLine(self.peanuts.pk, 3)],
                    payment_method="cash",
                )

        self.assertEqual(ctx.exception.product_name, "Maní")

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)
        self.assertFalse(Sale.objects.exists())
        self.assertFalse(SaleItem.objects.exists())
        self.assertFalse(StockAuditEvent.objects.exists())

    def test_total_beyond_money_precision_is_rejected(self):
        vintage = Product.objects.create(name="Reserva", price=Decimal("1000000000.00"), unit="botella", stock=100)

        with self.assertRaises(ValidationError) as ctx:
            create_sale(lines=[SaleLine(vintage.pk, 11)], payment_method="cash")

        self.assertIn("items", ctx.exception.errors)
        vintage.refresh_from_db()
        self.assertEqual(vintage.stock, 100)
        self.assertFalse(Sale.objects.exists())

    def test_repeated_product_quantities_are_summed(self):
        with self.assertRaises(InsufficientStock):
            create_sale(
                lines=[SaleLine(self.peanuts.pk, 3), SaleLine(self.peanuts.pk, 3)],
                payment_method="cash",
            )

        self.peanuts.refresh_from_db()
        self.assertEqual(self.peanuts.stock, 5)

    def test_missing_product_is_not_found(self):
        missing = "00000000-0000-0000-0000-000000000000"
        with self.assertRaises(NotFound) as ctx:
            create_sale(lines=[SaleLine(self.beer.pk, 1), SaleLine(missing, 1)], payment_method="cash")

        self.assertIn(missing, ctx.exception.message)
        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)

    def test_empty_sale_and_bad_payment_method_are_rejected(self):
        with self.assertRaises(ValidationError):
            create_sale(lines=[], payment_method="cash")
        with self.assertRaises(ValidationError):
            create_sale(lines=[SaleLine(self.beer.pk, 1)], payment_method="bitcoin")

    def test_sale_can_reference_client(self):
        client = Client.objects.create(name="Juan", credit_limit=Decimal("10000"))
        sale = create_sale(lines=[SaleLine(self.beer.pk, 1)], payment_method="credit", client_id=client.pk)

        self.assertEqual(sale.client, client)

    def test_items_are_immutable(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 1)], payment_method="cash")
        item = sale.items.get()

        item.quantity = 5
        with self.assertRaises(DjangoValidationError):
            item.save()


class SaleLifecycleTests(TestCase):
    """
    Status transitions.

    GUARANTEES:
    - cancellation restores stock exactly once
    - cancelled -> cancelled is an idempotent no-op
    - cancelled is terminal: reopening is rejected
    - a missing product never blocks a cancellation
    """

    def setUp(self):
        self.beer = Product.objects.create(name="Cerveza", price=Decimal("1000.00"), unit="botella", stock=10)

    def test_full_lifecycle_restores_stock(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 4)], payment_method="cash")
        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 6)

        sale = update_sale_status(sale.pk, Sale.STATUS_CANCELLED)
        self.beer.refresh_from_db()

        self.assertEqual(self.beer.stock, 10)
        self.assertEqual(sale.status, Sale.STATUS_CANCELLED)
        self.assertIsNotNone(sale.cancelled_at)

    def test_cancel_twice_restores_once(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 4)], payment_method="cash")

        update_sale_status(sale.pk, Sale.STATUS_CANCELLED)
        again = update_sale_status(sale.pk, Sale.STATUS_CANCELLED)

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)
        self.assertEqual(again.status, Sale.STATUS_CANCELLED)
        self.assertEqual(
            StockAuditEvent.objects.filter(sale=sale, kind=StockAuditEvent.Kind.CANCELLATION).count(),
            1,
        )

    def test_cancelled_sale_cannot_be_reopened(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 4)], payment_method="cash")
        update_sale_status(sale.pk, Sale.STATUS_CANCELLED)

        for target in (Sale.STATUS_PENDING, Sale.STATUS_COMPLETED):
            with self.assertRaises(InvalidStatus) as ctx:
                update_sale_status(sale.pk, target)
            self.assertIn("status", ctx.exception.errors)

        sale.refresh_from_db()
        self.beer.refresh_from_db()
        self.assertEqual(sale.status, Sale.STATUS_CANCELLED)
        self.assertEqual(self.beer.stock, 10)
        self.assertEqual(
            StockAuditEvent.objects.filter(sale=sale, kind=StockAuditEvent.Kind.CANCELLATION).count(),
            1,
        )

    def test_complete_does_not_touch_stock(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 4)], payment_method="cash")
        sale = update_sale_status(sale.pk, Sale.STATUS_COMPLETED)

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 6)
        self.assertEqual(sale.status, Sale.STATUS_COMPLETED)
        self.assertIsNone(sale.cancelled_at)

    def test_missing_product_is_skipped_on_cancel(self):
        gin = Product.objects.create(name="Gin", price=Decimal("8000.00"), unit="botella", stock=3)
        sale = create_sale(lines=[SaleLine(self.beer.pk, 2), SaleLine(gin.pk, 1)], payment_method="cash")
        gin_ref = str(gin.pk)
        gin.delete()

        with self.assertLogs("products.services.stock", level="WARNING"):
            sale = update_sale_status(sale.pk, Sale.STATUS_CANCELLED)

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)
        self.assertEqual(sale.status, Sale.STATUS_CANCELLED)

        skipped = StockAuditEvent.objects.get(kind=StockAuditEvent.Kind.RESTORE_SKIPPED)
        self.assertEqual(skipped.product_ref, gin_ref)
        self.assertEqual(skipped.quantity_delta, 1)

    def test_invalid_status(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 1)], payment_method="cash")
        with self.assertRaises(InvalidStatus):
            update_sale_status(sale.pk, "refunded")

    def test_unknown_sale(self):
        with self.assertRaises(NotFound):
            update_sale_status("00000000-0000-0000-0000-000000000000", Sale.STATUS_COMPLETED)
