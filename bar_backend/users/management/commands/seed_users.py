# users/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_MANAGER, ROLE_SUPERADMIN, ROLE_USER


@dataclass(frozen=True)
class SeedUserSpec:
    label: str
    role: str
    username: str
    email: str


DEFAULT_SPECS = [
    SeedUserSpec("Admin", ROLE_ADMIN, "admin", "admin@bar.com"),
    SeedUserSpec("Manager", ROLE_MANAGER, "manager", "manager@bar.com"),
    SeedUserSpec("User", ROLE_USER, "user", "user@bar.com"),
]

SUPERADMIN_SPEC = SeedUserSpec("Super Admin", ROLE_SUPERADMIN, "superadmin", "superadmin@bar.com")


class Command(BaseCommand):
    help = "Seed bar staff users (admin, manager, user; optionally superadmin). Idempotent."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--superadmin",
            action="store_true",
            help="Also seed a superadmin account (Django superuser).",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()

        specs = list(DEFAULT_SPECS)
        if options.get("superadmin"):
            specs.insert(0, SUPERADMIN_SPEC)

        created_count = 0
        updated_count = 0

        for spec in specs:
            is_superadmin = spec.role == ROLE_SUPERADMIN
            user = User.objects.filter(username__iexact=spec.username).first()

            if user is None:
                User.objects.create_user(
                    username=spec.username,
                    email=spec.email,
                    password=password,
                    role=spec.role,
                    is_staff=is_superadmin or spec.role == ROLE_ADMIN,
                    is_superuser=is_superadmin,
                )
                created_count += 1
                self.stdout.write(f"created: {spec.label} ({spec.role}) -> {spec.username}")
                continue

            dirty = False
            if user.role != spec.role:
                user.role = spec.role
                dirty = True
            if not user.is_active:
                user.is_active = True
                dirty = True
            if force_password:
                user.set_password(password)
                dirty = True

            if dirty:
                user.save()
                updated_count += 1

            self.stdout.write(f"exists:  {spec.label} ({spec.role}) -> {spec.username}")

        self.stdout.write("\n--- Summary ---")
        self.stdout.write(f"Created: {created_count}")
        self.stdout.write(f"Updated: {updated_count}")
        self.stdout.write(self.style.SUCCESS("Users seeded."))
