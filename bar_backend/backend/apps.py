# backend/apps.py

"""
BACKEND APP CONFIG

Project-level app so that project concerns (CORS policy, management
commands, cross-cutting tests) load like any other Django app.
"""

from django.apps import AppConfig


class BackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "backend"
    verbose_name = "Bar Inventory Backend"

    def ready(self):
        from corsheaders.signals import check_request_enabled
        from django.core.signals import setting_changed

        from backend.cors import cors_allow_by_policy, reset_policy_config

        check_request_enabled.connect(cors_allow_by_policy, dispatch_uid="backend.cors.policy")
        setting_changed.connect(reset_policy_config, dispatch_uid="backend.cors.reset")
