# clients/serializers.py

from decimal import Decimal

from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from clients.models import Client


class ClientSerializer(serializers.ModelSerializer):
    """
    Client CRUD representation (camelCase on the wire).

    currentBalance may be set on create (opening balance); afterwards it
    moves only through PATCH /clients/<id>/balance/.
    """

    email = serializers.EmailField(
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[
            UniqueValidator(
                queryset=Client.objects.all(),
                lookup="iexact",
                message="A client with this email already exists",
            )
        ],
    )
    phone = serializers.CharField(
        max_length=32,
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[
            UniqueValidator(queryset=Client.objects.all(), message="A client with this phone already exists")
        ],
    )
    creditLimit = serializers.DecimalField(
        source="credit_limit", max_digits=12, decimal_places=2, min_value=Decimal("0")
    )
    currentBalance = serializers.DecimalField(
        source="current_balance",
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        default=Decimal("0.00"),
    )
    hasExceededCredit = serializers.BooleanField(source="has_exceeded_credit", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Client
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "creditLimit",
            "currentBalance",
            "hasExceededCredit",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "hasExceededCredit", "createdAt", "updatedAt"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate_email(self, value):
        return (value or "").strip().lower() or None

    def validate_phone(self, value):
        return (value or "").strip() or None

    def validate(self, attrs):
        if self.instance is not None and "currentBalance" in self.initial_data:
            requested = attrs.get("current_balance", self.instance.current_balance)
            if requested != self.instance.current_balance:
                raise serializers.ValidationError(
                    {"currentBalance": "Balance can only be changed through the balance endpoint"}
                )
        if self.instance is not None:
            attrs.pop("current_balance", None)
        return attrs


class BalanceAdjustSerializer(serializers.Serializer):
    """Signed amount: positive charges the client, negative records a payment."""

    amount = serializers.DecimalField(max_digits=12, decimal_places=2)

    def validate_amount(self, value):
        if value == 0:
            raise serializers.ValidationError("Amount cannot be 0")
        return value
