"""
USER AUTH VIEWS

- Register: username + email + password -> 201 + tokens + user
- Login:    username (or email) + password -> tokens + user; stamps last_login
- Logout:   blacklists the supplied refresh token (access tokens expire on their own)

Elevated roles at registration:
- Anonymous callers always get role "user".
- Anything above "user" requires an authenticated caller at tier >= admin
  who also sits at or above the requested role.
"""

from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from backend.errors import Forbidden, Unauthorized, ValidationError
from permissions.roles import ROLE_ADMIN, ROLE_USER, get_role_hierarchy, role_satisfies
from users.serializers import (
    LoginSerializer,
    LogoutSerializer,
    RegisterSerializer,
    UserSerializer,
)
from users.tokens import issue_tokens_for

logger = logging.getLogger(__name__)


def _auth_payload(user, message: str) -> dict:
    tokens = issue_tokens_for(user)
    return {
        "success": True,
        "message": message,
        "token": tokens["access"],
        "refresh": tokens["refresh"],
        "user": UserSerializer(user).data,
    }


# ---------------- REGISTER ----------------
class RegisterView(generics.GenericAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]

    @extend_schema(
        request=RegisterSerializer,
        responses={201: dict},
        description="Register a new user account and return a token pair",
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        requested_role = serializer.validated_data.get("role", ROLE_USER)
        if requested_role != ROLE_USER:
            actor = request.user
            hierarchy = get_role_hierarchy()
            actor_role = getattr(actor, "role", None)
            if not (
                actor.is_authenticated
                and role_satisfies(actor_role, ROLE_ADMIN, hierarchy)
                and role_satisfies(actor_role, requested_role, hierarchy)
            ):
                raise Forbidden(
                    "Only administrators can register users with elevated roles",
                    requested_role=requested_role,
                )

        user = serializer.save()

        logger.info(
            "User registered",
            extra={"user_id": str(user.pk), "role": user.role},
        )

        return Response(
            _auth_payload(user, "User registered successfully"),
            status=status.HTTP_201_CREATED,
        )


# ---------------- LOGIN (JWT) ----------------
class LoginView(generics.GenericAPIView):
    serializer_class = LoginSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        request=LoginSerializer,
        responses={200: dict},
        description="Authenticate with username (or email) and password",
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        identifier = serializer.validated_data["username"].strip()

        user = authenticate(
            request=request,
            username=identifier,
            password=serializer.validated_data["password"],
        )

        if user is None:
            logger.info("Login failed", extra={"identifier": identifier})
            raise Unauthorized("Invalid credentials")

        update_last_login(None, user)

        logger.info("User logged in", extra={"user_id": str(user.pk)})

        return Response(_auth_payload(user, "Login successful"), status=status.HTTP_200_OK)


# ---------------- LOGOUT ----------------
class LogoutView(generics.GenericAPIView):
    serializer_class = LogoutSerializer
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=LogoutSerializer,
        responses={200: dict},
        description="Log out; blacklists the refresh token when one is supplied",
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        raw_refresh = (serializer.validated_data.get("refresh") or "").strip()
        if raw_refresh:
            try:
                RefreshToken(raw_refresh).blacklist()
            except TokenError as exc:
                raise ValidationError("Invalid refresh token") from exc

        logger.info("User logged out", extra={"user_id": str(request.user.pk)})

        return Response({"success": True, "message": "Logout successful"})
