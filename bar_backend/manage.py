#!/usr/bin/env python
"""
Bar backend management entrypoint.

Settings selection:
- DJANGO_SETTINGS_MODULE unset, or pointing at the bare `backend.settings`
  package, falls back to `backend.settings.dev`.
- Deployments set `backend.settings.prod` explicitly and it is left alone.

Useful commands:
    python manage.py migrate
    python manage.py seed_users --superadmin
    python manage.py seed_products
    python manage.py check_low_stock --fail
    python manage.py check_cors_origins https://bar-invt-front.vercel.app
    python manage.py check_database
"""

from __future__ import annotations

import os
import sys

DEFAULT_SETTINGS = "backend.settings.dev"


def _ensure_settings_module() -> None:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()

    # The package itself defines no settings.
    if current in ("", "backend.settings"):
        os.environ["DJANGO_SETTINGS_MODULE"] = DEFAULT_SETTINGS


def main() -> None:
    _ensure_settings_module()

    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
