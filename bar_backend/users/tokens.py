"""
PATH: users/tokens.py

JWT issuance (SimpleJWT).

Every token binds the user id (SimpleJWT's `user_id` claim) and the user's
`role`, so clients can render role-aware UI without an extra request.
Role enforcement still happens server-side against the database user.
"""

from __future__ import annotations

from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class RoleTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = user.role
        token["username"] = user.username
        return token


def issue_tokens_for(user) -> dict:
    """
    Access + refresh pair for an already-authenticated user.
    """
    refresh = RoleTokenObtainPairSerializer.get_token(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }
