# products/serializers/product.py

"""
PRODUCT SERIALIZERS

Wire format is camelCase (minStock, isLowStock, createdAt...) to match the
bar frontend; model fields stay snake_case.

Stock rules:
- `stock` may be set when a product is created (opening stock).
- After creation it only moves through PATCH /products/<id>/stock/
  (products.services.stock.adjust_stock), so updates that try to
  change it are rejected.
"""

from decimal import Decimal

from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from products.models import DEFAULT_CATEGORY, Product


class ProductSerializer(serializers.ModelSerializer):
    """
    Canonical Product serializer.

    GUARANTEES:
    - stock/minStock are non-negative integers
    - price is a non-negative decimal
    - barcode is unique when present (blank -> null)
    """

    minStock = serializers.IntegerField(source="min_stock", min_value=0)
    stock = serializers.IntegerField(min_value=0, required=False, default=0)
    category = serializers.CharField(
        max_length=100, required=False, allow_blank=True, default=DEFAULT_CATEGORY
    )
    barcode = serializers.CharField(
        max_length=64,
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[UniqueValidator(queryset=Product.objects.all(), message="Barcode already in use")],
    )
    isLowStock = serializers.BooleanField(source="is_low_stock", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "stock",
            "minStock",
            "price",
            "unit",
            "category",
            "barcode",
            "isLowStock",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "isLowStock", "createdAt", "updatedAt"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate_unit(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Unit is required")
        return value

    def validate_price(self, value):
        if value is None or value < Decimal("0"):
            raise serializers.ValidationError("Price cannot be negative")
        return value

    def validate_category(self, value):
        return (value or "").strip() or DEFAULT_CATEGORY

    def validate_barcode(self, value):
        return (value or "").strip() or None

    def validate(self, attrs):
        if self.instance is not None and "stock" in self.initial_data:
            requested = attrs.get("stock", self.instance.stock)
            if requested != self.instance.stock:
                raise serializers.ValidationError(
                    {"stock": "Stock can only be changed through the stock adjustment endpoint"}
                )
        if self.instance is not None:
            attrs.pop("stock", None)
        return attrs


class StockAdjustSerializer(serializers.Serializer):
    """Signed delta: positive restocks, negative removes."""

    quantity = serializers.IntegerField()
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    def validate_quantity(self, value):
        if value == 0:
            raise serializers.ValidationError("Quantity cannot be 0")
        return value


class MostConsumedProductSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    unit = serializers.CharField()
    category = serializers.CharField()
    stock = serializers.IntegerField()
    totalQuantity = serializers.IntegerField(source="total_quantity")
    totalRevenue = serializers.DecimalField(source="total_revenue", max_digits=14, decimal_places=2)
