from __future__ import annotations

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.errors import ValidationError
from users.serializers import ChangePasswordSerializer, ProfileUpdateSerializer, UserSerializer

logger = logging.getLogger(__name__)


class ProfileView(generics.GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProfileUpdateSerializer

    @extend_schema(
        responses={200: UserSerializer},
        description="Get the authenticated user's profile",
    )
    def get(self, request):
        return Response({"success": True, "user": UserSerializer(request.user).data})

    @extend_schema(
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
        description="Update username and/or email",
    )
    def put(self, request):
        serializer = self.get_serializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info(
            "Profile updated",
            extra={"user_id": str(user.pk), "fields": sorted(serializer.validated_data)},
        )

        return Response(
            {
                "success": True,
                "message": "Profile updated successfully",
                "user": UserSerializer(user).data,
            }
        )


class ChangePasswordView(generics.GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ChangePasswordSerializer

    @extend_schema(
        request=ChangePasswordSerializer,
        responses={200: dict},
        description="Change password (requires the current password)",
    )
    def put(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        if not user.check_password(serializer.validated_data["currentPassword"]):
            raise ValidationError(
                "Current password is incorrect",
                errors={"currentPassword": ["Current password is incorrect"]},
            )

        user.set_password(serializer.validated_data["newPassword"])
        user.save(update_fields=["password", "updated_at"])

        logger.info("Password changed", extra={"user_id": str(user.pk)})

        return Response({"success": True, "message": "Password changed successfully"})
