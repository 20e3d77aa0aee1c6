# sales/admin.py

from django.contrib import admin

from sales.models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    can_delete = False
    fields = ("position", "product", "product_name", "quantity", "unit_price", "subtotal")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    """
    Read-mostly: status changes must go through the API so that
    cancellations restore stock.
    """

    list_display = ("id", "status", "payment_method", "total", "client", "created_by", "created_at")
    list_filter = ("status", "payment_method", "created_at")
    search_fields = ("id", "client__name", "created_by__username")
    readonly_fields = (
        "total",
        "payment_method",
        "status",
        "client",
        "created_by",
        "created_at",
        "updated_at",
        "cancelled_at",
    )
    inlines = [SaleItemInline]

    def has_add_permission(self, request):
        return False
