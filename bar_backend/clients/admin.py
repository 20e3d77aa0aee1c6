# clients/admin.py

from django.contrib import admin

from clients.models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "phone", "credit_limit", "current_balance")
    search_fields = ("name", "email", "phone")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")
