# users/tests/test_auth.py

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

User = get_user_model()

AUTH_URL = "/api/auth/"


class UserModelTests(TestCase):
    """
    GUARANTEES:
    - username + email are both required
    - email is stored lowercased
    - superusers get the superadmin role
    """

    def test_create_user(self):
        user = User.objects.create_user(username="pepe", email="Pepe@Bar.COM", password="Pass1234!")

        self.assertEqual(user.email, "pepe@bar.com")
        self.assertEqual(user.role, "user")
        self.assertTrue(user.check_password("Pass1234!"))
        self.assertFalse(user.is_staff)

    def test_username_too_short(self):
        with self.assertRaises(DjangoValidationError):
            User.objects.create_user(username="ab", email="ab@bar.com", password="Pass1234!")

    def test_missing_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(username="pepe", email="", password="Pass1234!")

    def test_create_superuser(self):
        user = User.objects.create_superuser(username="root", email="root@bar.com", password="Pass1234!")

        self.assertEqual(user.role, "superadmin")
        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_superuser)


class AuthApiTests(TestCase):
    """
    Auth endpoints.

    GUARANTEES:
    - register returns 201 with a token pair and the user
    - login accepts username or email, stamps last_login
    - elevated roles need an admin caller
    """

    def setUp(self):
        self.api = APIClient()

    def _register(self, **overrides):
        payload = {"username": "pepe", "email": "pepe@bar.com", "password": "secret1"}
        payload.update(overrides)
        return self.api.post(f"{AUTH_URL}register/", payload, format="json")

    def test_register(self):
        res = self._register()

        self.assertEqual(res.status_code, 201, res.data)
        self.assertTrue(res.data["success"])
        self.assertTrue(res.data["token"])
        self.assertTrue(res.data["refresh"])
        self.assertEqual(res.data["user"]["username"], "pepe")
        self.assertEqual(res.data["user"]["role"], "user")
        self.assertNotIn("password", res.data["user"])

    def test_token_carries_role_claim(self):
        res = self._register()
        token = AccessToken(res.data["token"])

        self.assertEqual(token["role"], "user")
        self.assertEqual(token["username"], "pepe")

    def test_register_validation(self):
        User.objects.create_user(username="taken", email="taken@bar.com", password="Pass1234!")

        cases = [
            {"username": "ab"},
            {"password": "12345"},
            {"email": "not-an-email"},
            {"username": "TAKEN"},
            {"email": "Taken@bar.com"},
        ]
        for overrides in cases:
            with self.subTest(overrides=overrides):
                res = self._register(**overrides)
                self.assertEqual(res.status_code, 400)
                self.assertEqual(res.data["message"], "Validation error")

    def test_anonymous_cannot_register_admin(self):
        res = self._register(role="admin")

        self.assertEqual(res.status_code, 403)
        self.assertFalse(User.objects.filter(username="pepe").exists())

    def test_admin_can_register_manager(self):
        admin = User.objects.create_user(username="boss", email="boss@bar.com", password="Pass1234!", role="admin")
        self.api.force_authenticate(admin)

        res = self._register(role="manager")

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["user"]["role"], "manager")

    def test_admin_cannot_register_superadmin(self):
        admin = User.objects.create_user(username="boss", email="boss@bar.com", password="Pass1234!", role="admin")
        self.api.force_authenticate(admin)

        res = self._register(role="superadmin")
        self.assertEqual(res.status_code, 403)

    def test_login_with_username_and_email(self):
        user = User.objects.create_user(username="pepe", email="pepe@bar.com", password="Pass1234!")

        by_name = self.api.post(f"{AUTH_URL}login/", {"username": "pepe", "password": "Pass1234!"}, format="json")
        by_email = self.api.post(f"{AUTH_URL}login/", {"username": "PEPE@bar.com", "password": "Pass1234!"}, format="json")

        self.assertEqual(by_name.status_code, 200, by_name.data)
        self.assertEqual(by_email.status_code, 200, by_email.data)
        self.assertEqual(by_name.data["user"]["id"], str(user.pk))

        user.refresh_from_db()
        self.assertIsNotNone(user.last_login)

    def test_login_with_bad_credentials(self):
        User.objects.create_user(username="pepe", email="pepe@bar.com", password="Pass1234!")

        wrong = self.api.post(f"{AUTH_URL}login/", {"username": "pepe", "password": "nope"}, format="json")
        unknown = self.api.post(f"{AUTH_URL}login/", {"username": "ghost", "password": "nope"}, format="json")

        for res in (wrong, unknown):
            self.assertEqual(res.status_code, 401)
            self.assertEqual(res.data, {"success": False, "message": "Invalid credentials"})

    def test_inactive_user_cannot_login(self):
        User.objects.create_user(username="pepe", email="pepe@bar.com", password="Pass1234!", is_active=False)

        res = self.api.post(f"{AUTH_URL}login/", {"username": "pepe", "password": "Pass1234!"}, format="json")
        self.assertEqual(res.status_code, 401)

    def test_bearer_token_authenticates(self):
        token = self._register().data["token"]
        self.api.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        res = self.api.get(f"{AUTH_URL}profile/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["user"]["username"], "pepe")

    def test_invalid_token_is_401(self):
        self.api.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        res = self.api.get(f"{AUTH_URL}profile/")

        self.assertEqual(res.status_code, 401)
        self.assertFalse(res.data["success"])

    def test_refresh_and_logout_blacklists(self):
        tokens = self._register().data
        self.api.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['token']}")

        refreshed = self.api.post(f"{AUTH_URL}jwt/refresh/", {"refresh": tokens["refresh"]}, format="json")
        self.assertEqual(refreshed.status_code, 200)
        rotated = refreshed.data["refresh"]

        # rotation blacklists the original refresh token
        stale = self.api.post(f"{AUTH_URL}jwt/refresh/", {"refresh": tokens["refresh"]}, format="json")
        self.assertEqual(stale.status_code, 401)

        logout = self.api.post(f"{AUTH_URL}logout/", {"refresh": rotated}, format="json")
        self.assertEqual(logout.status_code, 200)

        reused = self.api.post(f"{AUTH_URL}jwt/refresh/", {"refresh": rotated}, format="json")
        self.assertEqual(reused.status_code, 401)

    def test_logout_with_garbage_refresh(self):
        self.api.force_authenticate(User.objects.create_user(username="pepe", email="pepe@bar.com", password="x123456"))
        res = self.api.post(f"{AUTH_URL}logout/", {"refresh": "garbage"}, format="json")

        self.assertEqual(res.status_code, 400)


class ProfileApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="pepe", email="pepe@bar.com", password="Pass1234!")
        self.api = APIClient()
        self.api.force_authenticate(self.user)

    def test_anonymous_profile_is_401(self):
        self.api.force_authenticate(None)
        self.assertEqual(self.api.get(f"{AUTH_URL}profile/").status_code, 401)

    def test_update_profile(self):
        res = self.api.put(f"{AUTH_URL}profile/", {"email": "NEW@bar.com"}, format="json")

        self.assertEqual(res.status_code, 200, res.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.email, "new@bar.com")
        self.assertEqual(self.user.username, "pepe")

    def test_update_profile_keeps_own_email(self):
        res = self.api.put(f"{AUTH_URL}profile/", {"email": "pepe@bar.com"}, format="json")
        self.assertEqual(res.status_code, 200, res.data)

    def test_update_profile_rejects_taken_username(self):
        User.objects.create_user(username="other", email="other@bar.com", password="Pass1234!")
        res = self.api.put(f"{AUTH_URL}profile/", {"username": "other"}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("username", res.data["errors"])

    def test_change_password(self):
        res = self.api.put(
            f"{AUTH_URL}change-password/",
            {"currentPassword": "Pass1234!", "newPassword": "newpass1"},
            format="json",
        )

        self.assertEqual(res.status_code, 200, res.data)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("newpass1"))

    def test_change_password_wrong_current(self):
        res = self.api.put(
            f"{AUTH_URL}change-password/",
            {"currentPassword": "wrong", "newPassword": "newpass1"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertIn("currentPassword", res.data["errors"])
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("Pass1234!"))
