# reports/views.py

"""
REPORTS (role tier: superadmin)

- GET /api/reports/sales-summary/?days=30
- GET /api/reports/inventory-status/
- GET /api/reports/user-activity/
- GET /api/reports/export/<type>/        type: sales | inventory  (CSV)
"""

import csv
import logging

from django.http import HttpResponse
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.errors import ValidationError
from permissions.roles import IsSuperAdmin
from reports import services

logger = logging.getLogger(__name__)


def _report(data, message):
    return Response({"success": True, "data": data, "message": message})


class ReportView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin]

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        logger.info(
            "Report requested",
            extra={"report": self.__class__.__name__, "username": getattr(request.user, "username", None)},
        )


class SalesSummaryView(ReportView):
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="days",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description=f"Window size (default {services.DEFAULT_SUMMARY_DAYS})",
            )
        ]
    )
    def get(self, request):
        raw = (request.query_params.get("days") or "").strip()
        days = services.DEFAULT_SUMMARY_DAYS
        if raw:
            try:
                days = int(raw)
            except ValueError:
                days = 0
            if not 1 <= days <= services.MAX_SUMMARY_DAYS:
                raise ValidationError(
                    "days must be an integer between 1 and %d" % services.MAX_SUMMARY_DAYS,
                    errors={"days": ["Out of range."]},
                )

        return _report(services.sales_summary(days), "Sales report generated")


class InventoryStatusView(ReportView):
    def get(self, request):
        return _report(services.inventory_status(), "Inventory report generated")


class UserActivityView(ReportView):
    def get(self, request):
        return _report(services.user_activity(), "User activity report generated")


class ExportReportView(ReportView):
    @extend_schema(responses={200: OpenApiResponse(description="CSV file"), 400: OpenApiResponse(description="Unknown type")})
    def get(self, request, export_type):
        if export_type not in services.EXPORT_TYPES:
            raise ValidationError(
                f"Unknown report type: {export_type}",
                errors={"type": [f"Must be one of: {', '.join(services.EXPORT_TYPES)}."]},
            )

        header, rows = services.export_rows(export_type)

        filename = f"report-{export_type}-{timezone.now():%Y%m%d%H%M%S}.csv"
        response = HttpResponse(content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'

        writer = csv.writer(response)
        writer.writerow(header)
        writer.writerows(rows)

        return response
