# sales/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from sales.views import SaleViewSet

router = SimpleRouter()
router.register(r"", SaleViewSet, basename="sales")

urlpatterns = [
    path("", include(router.urls)),
]
