# reports/urls.py

from django.urls import path

from reports.views import ExportReportView, InventoryStatusView, SalesSummaryView, UserActivityView

app_name = "reports"

urlpatterns = [
    path("sales-summary/", SalesSummaryView.as_view(), name="sales-summary"),
    path("inventory-status/", InventoryStatusView.as_view(), name="inventory-status"),
    path("user-activity/", UserActivityView.as_view(), name="user-activity"),
    path("export/<str:export_type>/", ExportReportView.as_view(), name="export"),
]
