# sales/tests/test_api.py

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from products.models import Product
from sales.models import Sale
from sales.services import SaleLine, create_sale

User = get_user_model()

SALES_URL = "/api/sales/"


class SaleApiTests(TestCase):
    """
    Sale endpoints.

    GUARANTEES:
    - POST returns 201 with server-computed totals
    - stock failures map to 400, missing products to 404
    - PATCH status drives the lifecycle
    """

    def setUp(self):
        self.user = User.objects.create_user(
            username="cashier",
            email="cashier@bar.com",
            password="Pass1234!",
            role="user",
        )
        self.client = APIClient()
        self.client.force_authenticate(self.user)

        self.beer = Product.objects.create(name="Cerveza", price=Decimal("1000.00"), unit="botella", stock=10)
        self.peanuts = Product.objects.create(name="Maní", price=Decimal("500.00"), unit="bolsa", stock=5)

    def _post_sale(self, items, **extra):
        payload = {"items": items, "paymentMethod": "cash", **extra}
        return self.client.post(SALES_URL, payload, format="json")

    def test_anonymous_is_rejected(self):
        self.client.force_authenticate(None)
        res = self.client.get(SALES_URL)
        self.assertEqual(res.status_code, 401)

    def test_create_sale(self):
        res = self._post_sale(
            [
                {"productId": str(self.beer.pk), "quantity": 2, "unitPrice": "1000"},
                {"productId": str(self.peanuts.pk), "quantity": 1, "unitPrice": "500"},
            ],
            total="2500",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["total"], "2500.00")
        self.assertEqual(res.data["status"], "pending")
        self.assertEqual(res.data["paymentMethod"], "cash")
        self.assertEqual(res.data["createdBy"], "cashier")
        self.assertEqual([i["subtotal"] for i in res.data["items"]], ["2000.00", "500.00"])
        self.assertEqual(res.data["items"][0]["productName"], "Cerveza")

    def test_create_sale_insufficient_stock(self):
        res = self._post_sale(
            [
                {"productId": str(self.beer.pk), "quantity": 2},
                {"productId": str(self.peanuts.pk), "quantity": 50},
            ]
        )

        self.assertEqual(res.status_code, 400)
        self.assertFalse(res.data["success"])
        self.assertEqual(res.data["message"], "Insufficient stock for: Maní")
        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)
        self.assertFalse(Sale.objects.exists())

    def test_create_sale_missing_product(self):
        res = self._post_sale([{"productId": "00000000-0000-0000-0000-000000000000", "quantity": 1}])
        self.assertEqual(res.status_code, 404)

    def test_create_sale_validation(self):
        cases = [
            {"items": [], "paymentMethod": "cash"},
            {"items": [{"productId": str(self.beer.pk), "quantity": 0}], "paymentMethod": "cash"},
            {"items": [{"productId": str(self.beer.pk), "quantity": 1}], "paymentMethod": "bitcoin"},
            {"items": [{"productId": "not-a-uuid", "quantity": 1}], "paymentMethod": "cash"},
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                res = self.client.post(SALES_URL, payload, format="json")
                self.assertEqual(res.status_code, 400)
                self.assertEqual(res.data["message"], "Validation error")

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)

    def test_oversized_total_is_400(self):
        res = self._post_sale([{"productId": str(self.beer.pk), "quantity": 10, "unitPrice": "9999999999.99"}])

        self.assertEqual(res.status_code, 400)
        self.assertIn("items", res.data["errors"])
        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)

    def test_lifecycle_through_api(self):
        created = self._post_sale([{"productId": str(self.beer.pk), "quantity": 4}])
        sale_url = f"{SALES_URL}{created.data['id']}/"
        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 6)

        res = self.client.patch(f"{sale_url}status/", {"status": "cancelled"}, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["status"], "cancelled")
        self.assertIsNotNone(res.data["cancelledAt"])

        again = self.client.patch(f"{sale_url}status/", {"status": "cancelled"}, format="json")
        self.assertEqual(again.status_code, 200)

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)

    def test_reopening_cancelled_sale_is_400(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 4)], payment_method="cash")
        sale_url = f"{SALES_URL}{sale.pk}/status/"
        self.client.patch(sale_url, {"status": "cancelled"}, format="json")

        res = self.client.patch(sale_url, {"status": "completed"}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertFalse(res.data["success"])
        self.assertIn("status", res.data["errors"])

        today = timezone.localdate().isoformat()
        stats = self.client.get(f"{SALES_URL}statistics/", {"startDate": today, "endDate": today})
        self.assertEqual(stats.data["totalSales"], 0)
        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 10)

    def test_invalid_status_is_400(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 1)], payment_method="cash")
        res = self.client.patch(f"{SALES_URL}{sale.pk}/status/", {"status": "shipped"}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("status", res.data["errors"])

    def test_status_of_unknown_sale_is_404(self):
        res = self.client.patch(
            f"{SALES_URL}00000000-0000-0000-0000-000000000000/status/",
            {"status": "completed"},
            format="json",
        )
        self.assertEqual(res.status_code, 404)

    def test_list_and_retrieve(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 1)], payment_method="cash")

        listed = self.client.get(SALES_URL)
        detail = self.client.get(f"{SALES_URL}{sale.pk}/")

        self.assertEqual(listed.status_code, 200)
        self.assertEqual(len(listed.data), 1)
        self.assertEqual(detail.data["id"], str(sale.pk))

    def test_sales_cannot_be_deleted(self):
        sale = create_sale(lines=[SaleLine(self.beer.pk, 1)], payment_method="cash")
        res = self.client.delete(f"{SALES_URL}{sale.pk}/")
        self.assertEqual(res.status_code, 405)


class SaleReportingApiTests(TestCase):
    """
    GUARANTEES:
    - date-range is inclusive on both ends
    - statistics only count completed sales
    """

    def setUp(self):
        self.user = User.objects.create_user(
            username="manager1",
            email="manager1@bar.com",
            password="Pass1234!",
            role="manager",
        )
        self.client = APIClient()
        self.client.force_authenticate(self.user)

        self.beer = Product.objects.create(name="Cerveza", price=Decimal("1000.00"), unit="botella", stock=100)

        self.completed_a = create_sale(lines=[SaleLine(self.beer.pk, 1)], payment_method="cash")
        self.completed_b = create_sale(lines=[SaleLine(self.beer.pk, 2)], payment_method="card")
        self.pending = create_sale(lines=[SaleLine(self.beer.pk, 5)], payment_method="cash")
        Sale.objects.filter(pk__in=[self.completed_a.pk, self.completed_b.pk]).update(status=Sale.STATUS_COMPLETED)

        self.today = timezone.localdate()

    def test_date_range(self):
        res = self.client.get(f"{SALES_URL}date-range/", {"startDate": self.today.isoformat(), "endDate": self.today.isoformat()})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 3)

    def test_date_range_excludes_other_days(self):
        tomorrow = self.today + timedelta(days=1)
        res = self.client.get(f"{SALES_URL}date-range/", {"startDate": tomorrow.isoformat(), "endDate": tomorrow.isoformat()})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, [])

    def test_date_range_requires_dates(self):
        res = self.client.get(f"{SALES_URL}date-range/")
        self.assertEqual(res.status_code, 400)
        self.assertIn("startDate", res.data["errors"])

    def test_statistics_count_completed_only(self):
        res = self.client.get(f"{SALES_URL}statistics/", {"startDate": self.today.isoformat(), "endDate": self.today.isoformat()})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["totalSales"], 2)
        self.assertEqual(res.data["totalRevenue"], "3000.00")
        self.assertEqual(res.data["averageSale"], "1500.00")

    def test_statistics_empty_range(self):
        tomorrow = self.today + timedelta(days=1)
        res = self.client.get(f"{SALES_URL}statistics/", {"startDate": tomorrow.isoformat(), "endDate": tomorrow.isoformat()})

        self.assertEqual(res.data["totalSales"], 0)
        self.assertEqual(res.data["averageSale"], "0.00")
