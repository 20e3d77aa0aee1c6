# sales/views/sale.py

"""
SALE VIEWSET

Purpose:
- Record sales (stock decremented atomically, total computed server-side)
- Sales history (list + retrieve)
- Status transitions (cancellation restores stock exactly once)
- Date-range listing and statistics over completed sales

Security:
- Requires IsAuthenticated and role tier >= user
"""

from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import ROLE_USER, HasMinimumRole
from sales.models import Sale
from sales.serializers import (
    DateRangeSerializer,
    SaleCreateSerializer,
    SaleSerializer,
    SaleStatisticsSerializer,
    SaleStatusSerializer,
)
from sales.services import create_sale, update_sale_status

DATE_RANGE_PARAMETERS = [
    OpenApiParameter(name="startDate", type=str, location=OpenApiParameter.QUERY, required=True, description="YYYY-MM-DD (inclusive)"),
    OpenApiParameter(name="endDate", type=str, location=OpenApiParameter.QUERY, required=True, description="YYYY-MM-DD (inclusive)"),
]


class SaleViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    - POST  /api/sales/
    - GET   /api/sales/
    - GET   /api/sales/<id>/
    - PATCH /api/sales/<id>/status/           {"status": "completed" | "cancelled" | "pending"}
    - GET   /api/sales/date-range/?startDate=&endDate=
    - GET   /api/sales/statistics/?startDate=&endDate=
    """

    serializer_class = SaleSerializer
    permission_classes = [IsAuthenticated, HasMinimumRole]
    minimum_role = ROLE_USER

    filterset_fields = ["status", "payment_method", "client"]

    def get_queryset(self):
        return (
            Sale.objects.all()
            .select_related("client", "created_by")
            .prefetch_related("items")
            .order_by("-created_at")
        )

    def _in_range(self, request):
        ser = DateRangeSerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        return self.get_queryset().filter(
            created_at__date__gte=ser.validated_data["startDate"],
            created_at__date__lte=ser.validated_data["endDate"],
        )

    # ======================================================
    # CREATE
    # ======================================================
    @extend_schema(
        request=SaleCreateSerializer,
        responses={
            201: SaleSerializer,
            400: OpenApiResponse(description="Validation error or insufficient stock"),
            404: OpenApiResponse(description="Product or client not found"),
        },
    )
    def create(self, request, *args, **kwargs):
        ser = SaleCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        sale = create_sale(user=request.user, **ser.to_service_kwargs())
        sale = self.get_queryset().get(pk=sale.pk)

        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)

    # ======================================================
    # STATUS
    # ======================================================
    @extend_schema(
        request=SaleStatusSerializer,
        responses={
            200: SaleSerializer,
            400: OpenApiResponse(description="Invalid status"),
            404: OpenApiResponse(description="Sale not found"),
        },
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        ser = SaleStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        sale = update_sale_status(pk, ser.validated_data["status"].strip().lower(), user=request.user)
        sale = self.get_queryset().get(pk=sale.pk)

        return Response(SaleSerializer(sale).data)

    # ======================================================
    # REPORTING
    # ======================================================
    @extend_schema(parameters=DATE_RANGE_PARAMETERS, responses={200: SaleSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="date-range")
    def date_range(self, request):
        return Response(SaleSerializer(self._in_range(request), many=True).data)

    @extend_schema(parameters=DATE_RANGE_PARAMETERS, responses={200: SaleStatisticsSerializer})
    @action(detail=False, methods=["get"], url_path="statistics")
    def statistics(self, request):
        agg = (
            self._in_range(request)
            .filter(status=Sale.STATUS_COMPLETED)
            .order_by()
            .aggregate(
                total_sales=Count("id"),
                total_revenue=Coalesce(
                    Sum("total"),
                    Value(Decimal("0.00")),
                    output_field=DecimalField(max_digits=14, decimal_places=2),
                ),
            )
        )

        count = agg["total_sales"] or 0
        revenue = Decimal(agg["total_revenue"] or 0)
        average = (revenue / count).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) if count else Decimal("0.00")

        payload = {"totalSales": count, "totalRevenue": revenue, "averageSale": average}
        return Response(SaleStatisticsSerializer(payload).data)
