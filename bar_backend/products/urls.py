# products/urls.py

"""
PRODUCTS URLS

Registers product routes directly under /api/products/
(SimpleRouter: no browsable API root competing with the list route).
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import ProductViewSet

router = SimpleRouter()
router.register(r"", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
