# reports/services.py

"""
REPORT BUILDERS

Pure read-side aggregations; nothing here writes.

- sales_summary(days)     completed sales in the last N days
- inventory_status()      catalogue health + stock value
- user_activity()         accounts, recent logins, role counts
- export_rows(type)       header + rows for CSV export
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Count, DecimalField, ExpressionWrapper, F, Sum, Value
from django.db.models.functions import Coalesce, TruncDate
from django.utils import timezone

from products.models import Product
from sales.models import Sale, SaleItem

DEFAULT_SUMMARY_DAYS = 30
MAX_SUMMARY_DAYS = 366
TOP_PRODUCTS_LIMIT = 5
ACTIVE_USER_WINDOW_DAYS = 30
LOGIN_HISTORY_LIMIT = 20

EXPORT_TYPES = ("sales", "inventory")

MONEY = DecimalField(max_digits=14, decimal_places=2)


def _money(value) -> str:
    return str(Decimal(value or 0).quantize(Decimal("0.01")))


def sales_summary(days: int = DEFAULT_SUMMARY_DAYS) -> dict:
    since = timezone.now() - timedelta(days=days)
    completed = Sale.objects.filter(status=Sale.STATUS_COMPLETED, created_at__gte=since)

    totals = completed.order_by().aggregate(
        total_sales=Count("id"),
        total_revenue=Coalesce(Sum("total"), Value(Decimal("0.00")), output_field=MONEY),
    )

    top_products = (
        SaleItem.objects.filter(sale__in=completed)
        .values("product_ref", "product_name")
        .annotate(quantity=Sum("quantity"), revenue=Sum("subtotal"))
        .order_by("-quantity", "product_name")[:TOP_PRODUCTS_LIMIT]
    )

    by_date = (
        completed.annotate(day=TruncDate("created_at"))
        .values("day")
        .annotate(count=Count("id"), revenue=Sum("total"))
        .order_by("day")
    )

    return {
        "totalSales": totals["total_sales"] or 0,
        "totalRevenue": _money(totals["total_revenue"]),
        "topProducts": [
            {
                "productId": row["product_ref"] or None,
                "name": row["product_name"],
                "quantity": row["quantity"],
                "revenue": _money(row["revenue"]),
            }
            for row in top_products
        ],
        "salesByDate": [
            {"date": row["day"].isoformat(), "count": row["count"], "revenue": _money(row["revenue"])}
            for row in by_date
        ],
        "period": f"last-{days}-days",
    }


def _stock_row(product: Product) -> dict:
    return {
        "id": str(product.pk),
        "name": product.name,
        "stock": product.stock,
        "minStock": product.min_stock,
        "unit": product.unit,
        "category": product.category,
    }


def inventory_status() -> dict:
    value = Product.objects.order_by().aggregate(
        total_value=Coalesce(
            Sum(ExpressionWrapper(F("stock") * F("price"), output_field=MONEY)),
            Value(Decimal("0.00")),
            output_field=MONEY,
        )
    )["total_value"]

    return {
        "totalProducts": Product.objects.count(),
        "lowStockProducts": [_stock_row(p) for p in Product.objects.low_stock().order_by("stock", "name")],
        "outOfStockProducts": [_stock_row(p) for p in Product.objects.out_of_stock().order_by("name")],
        "totalValue": _money(value),
        "lastUpdated": timezone.now().isoformat(),
    }


def user_activity() -> dict:
    User = get_user_model()
    since = timezone.now() - timedelta(days=ACTIVE_USER_WINDOW_DAYS)

    def _row(u):
        return {
            "id": str(u.pk),
            "username": u.username,
            "role": u.role,
            "lastLogin": u.last_login.isoformat() if u.last_login else None,
        }

    active = User.objects.filter(is_active=True, last_login__gte=since).order_by("-last_login")
    history = User.objects.filter(last_login__isnull=False).order_by("-last_login")[:LOGIN_HISTORY_LIMIT]
    roles = User.objects.order_by().values("role").annotate(count=Count("id"))

    return {
        "totalUsers": User.objects.count(),
        "activeUsers": [_row(u) for u in active],
        "loginHistory": [_row(u) for u in history],
        "userRoles": {row["role"]: row["count"] for row in roles},
    }


def export_rows(export_type: str):
    """Return (header, rows) for a CSV export."""
    if export_type == "sales":
        header = ["sale_id", "created_at", "status", "payment_method", "client", "product", "quantity", "unit_price", "subtotal", "total"]
        items = SaleItem.objects.select_related("sale", "sale__client").order_by("-sale__created_at", "position")
        rows = (
            [
                str(i.sale_id),
                i.sale.created_at.isoformat(),
                i.sale.status,
                i.sale.payment_method,
                i.sale.client.name if i.sale.client else "",
                i.product_name,
                i.quantity,
                _money(i.unit_price),
                _money(i.subtotal),
                _money(i.sale.total),
            ]
            for i in items.iterator()
        )
        return header, rows

    if export_type == "inventory":
        header = ["id", "name", "category", "unit", "stock", "min_stock", "price", "barcode", "low_stock"]
        rows = (
            [
                str(p.pk),
                p.name,
                p.category,
                p.unit,
                p.stock,
                p.min_stock,
                _money(p.price),
                p.barcode or "",
                "yes" if p.is_low_stock else "no",
            ]
            for p in Product.objects.order_by("name").iterator()
        )
        return header, rows

    raise ValueError(f"Unknown export type: {export_type}")
