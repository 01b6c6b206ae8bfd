"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "item",
        "renter",
        "owner",
        "status",
        "start_date",
        "end_date",
        "total_amount",
        "rating",
        "created_at",
    )
    list_filter = ("status", "start_date", "end_date")
    search_fields = ("item__title", "renter__email", "owner__email")
    # Status changes go through the lifecycle service
    readonly_fields = (
        "status",
        "version",
        "owner",
        "total_days",
        "daily_rate",
        "weekly_rate",
        "monthly_rate",
        "total_amount",
        "platform_fee",
        "rating",
        "confirmed_at",
        "started_at",
        "completed_at",
        "cancelled_at",
        "disputed_at",
        "created_at",
        "updated_at",
    )
