# products/management/commands/check_low_stock.py

from django.core.management.base import BaseCommand

from products.services.stock import low_stock_products, warn_if_low_stock


class Command(BaseCommand):
    help = "List products at or below their minimum stock (and log a warning for each)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--fail",
            action="store_true",
            help="Exit with status 1 when any product is low on stock (for cron/CI alerts).",
        )

    def handle(self, *args, **options):
        products = list(low_stock_products())

        if not products:
            self.stdout.write(self.style.SUCCESS("No products below minimum stock."))
            return

        self.stdout.write(self.style.WARNING(f"{len(products)} product(s) low on stock:"))
        for product in products:
            warn_if_low_stock(product)
            self.stdout.write(
                f"  {product.name}: {product.stock} {product.unit} (minimum: {product.min_stock})"
            )

        if options.get("fail"):
            raise SystemExit(1)
