# products/tests/test_products.py

from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import TestCase

from products.models import DEFAULT_CATEGORY, Product


class ProductModelTests(TestCase):
    """
    Product model tests.

    GUARANTEES:
    - Products can be created safely
    - Barcode uniqueness is enforced (only when present)
    - Stock can never be stored negative
    """

    def test_product_creation(self):
        """A valid product should be created with sane defaults."""
        product = Product.objects.create(
            name="Cerveza Rubia",
            price=Decimal("1000.00"),
            unit="botella",
            stock=24,
            min_stock=6,
        )

        self.assertEqual(product.name, "Cerveza Rubia")
        self.assertEqual(product.category, DEFAULT_CATEGORY)
        self.assertIsNone(product.barcode)
        self.assertFalse(product.is_low_stock)

    def test_barcode_must_be_unique(self):
        """Barcode duplication must be rejected."""
        Product.objects.create(name="Fernet", price=Decimal("5000.00"), unit="botella", barcode="779000001")

        with self.assertRaises(IntegrityError):
            Product.objects.create(name="Fernet 2", price=Decimal("5200.00"), unit="botella", barcode="779000001")

    def test_missing_barcodes_do_not_collide(self):
        """Any number of products may have no barcode."""
        Product.objects.create(name="Hielo", price=Decimal("300.00"), unit="bolsa")
        Product.objects.create(name="Limón", price=Decimal("100.00"), unit="unidad")

        self.assertEqual(Product.objects.filter(barcode__isnull=True).count(), 2)

    def test_stock_cannot_be_negative_at_database_level(self):
        product = Product.objects.create(name="Gin", price=Decimal("8000.00"), unit="botella", stock=1)

        with self.assertRaises(IntegrityError), transaction.atomic():
            Product.objects.filter(pk=product.pk).update(stock=-1)

    def test_low_stock_is_inclusive(self):
        """stock == min_stock counts as low."""
        at_minimum = Product.objects.create(name="Vodka", price=Decimal("1.00"), unit="botella", stock=5, min_stock=5)
        above = Product.objects.create(name="Ron", price=Decimal("1.00"), unit="botella", stock=6, min_stock=5)

        self.assertTrue(at_minimum.is_low_stock)
        self.assertFalse(above.is_low_stock)
        self.assertEqual(list(Product.objects.low_stock()), [at_minimum])

    def test_clean_normalizes_optional_fields(self):
        product = Product(name="  Tónica  ", price=Decimal("900.00"), unit="lata", category="  ", barcode="  ")
        product.full_clean()

        self.assertEqual(product.name, "Tónica")
        self.assertEqual(product.category, DEFAULT_CATEGORY)
        self.assertIsNone(product.barcode)

    def test_product_string_representation(self):
        product = Product.objects.create(name="Agua", price=Decimal("500.00"), unit="botella", stock=3)
        self.assertIn("Agua", str(product))
