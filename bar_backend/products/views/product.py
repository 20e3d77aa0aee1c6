# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Product CRUD (writes need role tier >= admin, reads >= user)
- Low-stock alert list
- Most-consumed ranking (units sold in non-cancelled sales)
- Barcode lookup
- Signed stock adjustment, routed through products.services.stock
"""

from decimal import Decimal

from django.db.models import DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.errors import NotFound, ValidationError
from permissions.roles import ROLE_ADMIN, ROLE_USER, HasMinimumRole
from products.models import Product
from products.serializers import (
    MostConsumedProductSerializer,
    ProductSerializer,
    StockAdjustSerializer,
)
from products.services.stock import adjust_stock, low_stock_products

CONSUMING_SALE_STATUSES = ("pending", "completed")

MOST_CONSUMED_DEFAULT_LIMIT = 10
MOST_CONSUMED_MAX_LIMIT = 100


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    - GET    /api/products/
    - POST   /api/products/
    - GET    /api/products/<id>/
    - PUT    /api/products/<id>/
    - PATCH  /api/products/<id>/
    - DELETE /api/products/<id>/            (204)
    - GET    /api/products/low-stock/
    - GET    /api/products/most-consumed/?limit=10
    - GET    /api/products/by-barcode/<code>/
    - PATCH  /api/products/<id>/stock/      {"quantity": <signed int>}
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated, HasMinimumRole]
    minimum_role = ROLE_USER
    write_minimum_role = ROLE_ADMIN

    filterset_fields = {
        "category": ["exact", "iexact"],
        "name": ["icontains"],
    }

    def get_queryset(self):
        return Product.objects.all().order_by("name")

    # -----------------------------
    # Alerts: Low stock
    # -----------------------------
    @extend_schema(responses={200: ProductSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        """
        Products whose stock is at or below their own min_stock.
        """
        data = self.get_serializer(low_stock_products(), many=True).data
        return Response(data)

    # -----------------------------
    # Ranking: Most consumed
    # -----------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description=f"Max rows (default {MOST_CONSUMED_DEFAULT_LIMIT}, max {MOST_CONSUMED_MAX_LIMIT})",
            ),
        ],
        responses={200: MostConsumedProductSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="most-consumed")
    def most_consumed(self, request):
        raw_limit = (request.query_params.get("limit") or "").strip()
        limit = MOST_CONSUMED_DEFAULT_LIMIT
        if raw_limit:
            try:
                limit = int(raw_limit)
                if limit < 1:
                    raise ValueError
            except ValueError:
                raise ValidationError(
                    "limit must be a positive integer",
                    errors={"limit": ["Must be a positive integer."]},
                )
        limit = min(limit, MOST_CONSUMED_MAX_LIMIT)

        counted = Q(sale_items__sale__status__in=CONSUMING_SALE_STATUSES)
        qs = (
            Product.objects.annotate(
                total_quantity=Coalesce(Sum("sale_items__quantity", filter=counted), 0),
                total_revenue=Coalesce(
                    Sum("sale_items__subtotal", filter=counted),
                    Value(Decimal("0.00")),
                    output_field=DecimalField(max_digits=14, decimal_places=2),
                ),
            )
            .filter(total_quantity__gt=0)
            .order_by("-total_quantity", "name")[:limit]
        )

        return Response(MostConsumedProductSerializer(qs, many=True).data)

    # -----------------------------
    # Lookup: barcode
    # -----------------------------
    @extend_schema(
        responses={
            200: ProductSerializer,
            404: OpenApiResponse(description="No product with this barcode"),
        }
    )
    @action(detail=False, methods=["get"], url_path=r"by-barcode/(?P<code>[^/]+)")
    def by_barcode(self, request, code=None):
        code = (code or "").strip()
        product = Product.objects.filter(barcode=code).first() if code else None
        if product is None:
            raise NotFound(f"No product with barcode: {code}", barcode=code)
        return Response(self.get_serializer(product).data)

    # -----------------------------
    # Stock adjustment
    # -----------------------------
    @extend_schema(
        request=StockAdjustSerializer,
        responses={
            200: ProductSerializer,
            400: OpenApiResponse(description="Invalid quantity or stock would go negative"),
            404: OpenApiResponse(description="Product not found"),
        },
    )
    @action(detail=True, methods=["patch"], url_path="stock")
    def stock(self, request, pk=None):
        product = self.get_object()

        ser = StockAdjustSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        updated = adjust_stock(
            product.pk,
            ser.validated_data["quantity"],
            user=request.user,
            note=ser.validated_data.get("note", ""),
        )
        return Response(self.get_serializer(updated).data, status=status.HTTP_200_OK)
