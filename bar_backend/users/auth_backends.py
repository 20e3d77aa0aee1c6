"""
PATH: users/auth_backends.py

AUTH BACKEND: Username OR Email login

Rules:
- The identifier is a username unless it contains "@", then it is an email.
- Inactive users never authenticate.
- Lookups are case-insensitive.

Extends ModelBackend so Django admin permission checks keep working.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

User = get_user_model()


class UsernameOrEmailBackend(ModelBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        identifier = (username or kwargs.get("email") or "").strip()
        if not identifier or password is None:
            return None

        lookup = {"email__iexact": identifier} if "@" in identifier else {"username__iexact": identifier}

        try:
            user = User.objects.get(**lookup)
        except User.DoesNotExist:
            # Run the hasher anyway to even out timing between known/unknown users.
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user

        return None
