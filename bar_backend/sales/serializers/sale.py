# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale
from sales.services import SaleLine

from .sale_item import SaleItemInputSerializer, SaleItemSerializer


class SaleSerializer(serializers.ModelSerializer):
    """
    CANONICAL SALE SERIALIZER (read side)

    Items come back in the order they were submitted.
    """

    items = SaleItemSerializer(many=True, read_only=True)
    paymentMethod = serializers.CharField(source="payment_method", read_only=True)
    clientId = serializers.UUIDField(source="client_id", read_only=True, allow_null=True)
    createdBy = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    cancelledAt = serializers.DateTimeField(source="cancelled_at", read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "items",
            "total",
            "paymentMethod",
            "status",
            "clientId",
            "createdBy",
            "createdAt",
            "updatedAt",
            "cancelledAt",
        ]
        read_only_fields = fields

    def get_createdBy(self, obj):
        user = getattr(obj, "created_by", None)
        return getattr(user, "username", None)


class SaleCreateSerializer(serializers.Serializer):
    """
    Sale input.

    `total` is accepted for compatibility but never trusted; the service
    recomputes it from the items.
    """

    items = SaleItemInputSerializer(many=True, allow_empty=False)
    paymentMethod = serializers.ChoiceField(choices=Sale.PAYMENT_CHOICES)
    clientId = serializers.UUIDField(required=False, allow_null=True)
    total = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )

    def to_service_kwargs(self) -> dict:
        data = self.validated_data
        return {
            "lines": [
                SaleLine(
                    product_id=item["productId"],
                    quantity=item["quantity"],
                    unit_price=item.get("unitPrice"),
                )
                for item in data["items"]
            ],
            "payment_method": data["paymentMethod"],
            "client_id": data.get("clientId"),
            "total": data.get("total"),
        }


class SaleStatusSerializer(serializers.Serializer):
    # Free-form on purpose: unknown values surface as InvalidStatus.
    status = serializers.CharField()


class DateRangeSerializer(serializers.Serializer):
    startDate = serializers.DateField()
    endDate = serializers.DateField()

    def validate(self, attrs):
        if attrs["startDate"] > attrs["endDate"]:
            raise serializers.ValidationError({"endDate": "endDate must be on or after startDate"})
        return attrs


class SaleStatisticsSerializer(serializers.Serializer):
    totalSales = serializers.IntegerField()
    totalRevenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    averageSale = serializers.DecimalField(max_digits=14, decimal_places=2)
