# sales/serializers/sale_item.py

from rest_framework import serializers

from sales.models import SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    """Sale line (read-only)."""

    productId = serializers.UUIDField(source="product_id", read_only=True, allow_null=True)
    productName = serializers.CharField(source="product_name", read_only=True)
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = SaleItem
        fields = ["id", "productId", "productName", "quantity", "unitPrice", "subtotal"]
        read_only_fields = fields


class SaleItemInputSerializer(serializers.Serializer):
    productId = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    unitPrice = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )
