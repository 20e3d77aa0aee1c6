# products/management/commands/seed_products.py

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import Product

# (name, category, unit, price, opening stock, min stock, barcode)
PRODUCTS_DATA = [
    ("Cerveza Águila 330ml", "Cervezas", "botella", Decimal("3500"), 120, 24, "7702004003331"),
    ("Cerveza Club Colombia 330ml", "Cervezas", "botella", Decimal("4000"), 96, 24, "7702004003348"),
    ("Ron Medellín Añejo 750ml", "Licores", "botella", Decimal("65000"), 12, 3, "7702049001236"),
    ("Aguardiente Antioqueño 750ml", "Licores", "botella", Decimal("55000"), 18, 4, "7702049000123"),
    ("Whisky Old Parr 750ml", "Licores", "botella", Decimal("160000"), 6, 2, None),
    ("Gaseosa Coca-Cola 350ml", "Bebidas", "lata", Decimal("3000"), 48, 12, "7702535001011"),
    ("Agua con gas 600ml", "Bebidas", "botella", Decimal("2500"), 36, 12, None),
    ("Limón", "Insumos", "unidad", Decimal("300"), 200, 50, None),
    ("Hielo 2kg", "Insumos", "bolsa", Decimal("4500"), 20, 5, None),
    ("Maní salado 100g", "Snacks", "paquete", Decimal("3500"), 30, 10, None),
]


class Command(BaseCommand):
    help = "Seed a sample bar catalogue (idempotent by product name)."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding products..."))

        created_count = 0

        for name, category, unit, price, stock, min_stock, barcode in PRODUCTS_DATA:
            _product, created = Product.objects.get_or_create(
                name=name,
                defaults={
                    "category": category,
                    "unit": unit,
                    "price": price,
                    "stock": stock,
                    "min_stock": min_stock,
                    "barcode": barcode,
                },
            )
            if created:
                created_count += 1
                self.stdout.write(f"created: {name}")
            else:
                self.stdout.write(f"exists:  {name}")

        self.stdout.write(
            self.style.SUCCESS(f"Products seeded ({created_count} new, {len(PRODUCTS_DATA)} total).")
        )
