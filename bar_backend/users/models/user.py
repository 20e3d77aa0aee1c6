"""
PATH: users/models/user.py

CUSTOM USER MODEL

- Login identity is `username` (3-50 chars, unique).
- `email` is required and unique; stored lowercased.
- `role` drives authorization through permissions.roles (tier hierarchy).
- `last_login` comes from AbstractBaseUser and is stamped by the login view.
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator
from django.db import models

from permissions.roles import ROLE_CHOICES, ROLE_SUPERADMIN, ROLE_USER


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, username=None, email=None, password=None, **extra_fields):
        """
        Rules:
        - username and email are both required.
        - email is normalized + lowercased.
        - password is hashed; no password -> unusable password.
        """
        username = (username or "").strip()
        email = (email or "").strip()

        if not username:
            raise ValueError("Users must have a username")
        if not email:
            raise ValueError("Users must have an email")

        extra_fields.setdefault("role", ROLE_USER)
        extra_fields.setdefault("is_active", True)

        user = self.model(
            username=username,
            email=self.normalize_email(email).lower(),
            **extra_fields,
        )

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, username, email, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", ROLE_SUPERADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(username, email, password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_CHOICES = ROLE_CHOICES

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    username = models.CharField(
        max_length=50,
        unique=True,
        validators=[MinLengthValidator(3)],
    )
    email = models.EmailField(unique=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "username"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["email"]

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        super().clean()
        self.username = (self.username or "").strip()
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).strip().lower()
        if not self.username:
            raise ValidationError({"username": "Username is required"})

    def __str__(self):
        return f"{self.username} ({self.role})"
