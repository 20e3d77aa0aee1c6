# products/admin.py
"""
PATH: products/admin.py

Admin rules:
- Product stock is read-only here; it only moves through
  products.services.stock.adjust_stock (API: PATCH /products/<id>/stock/).
- StockAuditEvent rows are immutable: view-only in admin.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product, StockAuditEvent


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "stock", "min_stock", "price", "unit", "barcode")
    list_filter = ("category",)
    search_fields = ("name", "barcode", "category")
    ordering = ("name",)

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return ("created_at", "updated_at")
        return ("stock", "created_at", "updated_at")


@admin.register(StockAuditEvent)
class StockAuditEventAdmin(admin.ModelAdmin):
    list_display = ("created_at", "kind", "product_ref", "quantity_delta", "stock_after", "sale", "performed_by")
    list_filter = ("kind",)
    search_fields = ("product_ref", "note")
    ordering = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
