# backend/management/commands/check_cors_origins.py

from django.core.management.base import BaseCommand

from backend.cors import get_policy_config, origin_decision


class Command(BaseCommand):
    help = "Show the active CORS policy and evaluate it against the given origins."

    def add_arguments(self, parser):
        parser.add_argument("origins", nargs="*", help="Origins to test, e.g. https://example.vercel.app")
        parser.add_argument(
            "--fail",
            action="store_true",
            help="Exit with status 1 if any given origin is denied.",
        )

    def handle(self, *args, **options):
        config = get_policy_config()

        self.stdout.write(f"Environment: {'production' if config.is_production else 'non-production'}")
        self.stdout.write("Allowed origins:")
        for origin in sorted(config.allowed_origins) or ["(none)"]:
            self.stdout.write(f"  - {origin}")
        pattern = config.preview_pattern.pattern if config.preview_pattern else "(none)"
        self.stdout.write(f"Preview pattern: {pattern}")

        denied = 0
        for origin in options["origins"]:
            allowed, rule = origin_decision(origin, config=config)
            if allowed:
                self.stdout.write(self.style.SUCCESS(f"ALLOW {origin} ({rule})"))
            else:
                denied += 1
                self.stdout.write(self.style.ERROR(f"DENY  {origin}"))

        if denied and options.get("fail"):
            raise SystemExit(1)
