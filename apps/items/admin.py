"""Admin registration for items."""

from __future__ import annotations

from django.contrib import admin

from .models import Item


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "owner",
        "daily_rate",
        "weekly_rate",
        "monthly_rate",
        "is_active",
        "created_at",
    )
    list_filter = ("is_active",)
    search_fields = ("title", "owner__email")
    readonly_fields = ("created_at", "updated_at")
