# backend/tests/test_api.py

from unittest import mock

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from rest_framework import serializers
from rest_framework.test import APIRequestFactory

from backend.errors import InsufficientStock, NotFound
from backend.exceptions import api_exception_handler
from backend.health import database_status
from permissions.roles import role_satisfies

HIERARCHY = {"superadmin": 4, "admin": 3, "manager": 2, "user": 1}


class RoleHierarchyTests(SimpleTestCase):
    def test_higher_roles_satisfy_lower(self):
        self.assertTrue(role_satisfies("superadmin", "user", HIERARCHY))
        self.assertTrue(role_satisfies("admin", "admin", HIERARCHY))
        self.assertFalse(role_satisfies("manager", "admin", HIERARCHY))

    def test_unknown_roles_never_satisfy(self):
        self.assertFalse(role_satisfies("owner", "user", HIERARCHY))
        self.assertFalse(role_satisfies(None, "user", HIERARCHY))
        self.assertFalse(role_satisfies("admin", "owner", HIERARCHY))

    def test_hierarchy_is_injected(self):
        flat = {"admin": 1, "user": 1}
        self.assertTrue(role_satisfies("user", "admin", flat))


class ExceptionHandlerTests(SimpleTestCase):
    """
    GUARANTEES:
    - every error body is {"success": false, "message": ...}
    - validation errors carry "errors"
    - unexpected exceptions become a generic 500
    """

    def setUp(self):
        request = APIRequestFactory().get("/api/anything/")
        self.context = {"request": request, "view": None}

    def test_domain_error(self):
        res = api_exception_handler(NotFound("Product not found: x"), self.context)

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data, {"success": False, "message": "Product not found: x"})

    def test_insufficient_stock_is_400(self):
        res = api_exception_handler(InsufficientStock("Insufficient stock for: Gin", product_name="Gin"), self.context)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["message"], "Insufficient stock for: Gin")

    def test_drf_validation_error(self):
        exc = serializers.ValidationError({"price": ["Price cannot be negative"]})
        res = api_exception_handler(exc, self.context)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["message"], "Validation error")
        self.assertEqual(res.data["errors"], {"price": ["Price cannot be negative"]})

    def test_unexpected_exception(self):
        with self.assertLogs("backend.exceptions", level="ERROR"):
            res = api_exception_handler(RuntimeError("boom"), self.context)

        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.data, {"success": False, "message": "Internal server error"})


class HealthCheckTests(TestCase):
    def test_health_ok(self):
        res = self.client.get("/api/health/")

        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["db"], "ok")

    def test_health_degraded(self):
        with mock.patch("backend.health.database_status", return_value=(False, "connection refused")):
            res = self.client.get("/api/health/")

        self.assertEqual(res.status_code, 503)
        self.assertEqual(res.json()["db"], "down")

    def test_database_status_reports_errors(self):
        with mock.patch("backend.health.connections") as conns:
            conns.__getitem__.return_value.cursor.side_effect = DatabaseError("down")
            ok, error = database_status()

        self.assertFalse(ok)
        self.assertEqual(error, "down")

    def test_api_root_is_public(self):
        res = self.client.get("/api/")

        self.assertEqual(res.status_code, 200)
        self.assertIn("products", res.json()["modules"])
