# backend/management/commands/check_database.py

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from backend.health import database_status


class Command(BaseCommand):
    help = "Verify that the configured database(s) accept connections and answer a trivial query."

    def add_arguments(self, parser):
        parser.add_argument(
            "--database",
            action="append",
            dest="aliases",
            help="Connection alias to check (repeatable). Defaults to every configured alias.",
        )

    def handle(self, *args, **options):
        aliases = options.get("aliases") or list(settings.DATABASES.keys())
        failed = []

        for alias in aliases:
            if alias not in settings.DATABASES:
                raise CommandError(f"Unknown database alias: {alias}")

            engine = settings.DATABASES[alias].get("ENGINE", "")
            ok, error = database_status(alias)
            if ok:
                self.stdout.write(self.style.SUCCESS(f"[{alias}] OK ({engine})"))
            else:
                failed.append(alias)
                self.stdout.write(self.style.ERROR(f"[{alias}] FAILED ({engine}): {error}"))

        if failed:
            raise CommandError(f"Database check failed for: {', '.join(failed)}")
