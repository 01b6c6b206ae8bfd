"""Serializers for the booking domain."""

from __future__ import annotations

from decimal import Decimal

from django.utils import timezone  # type: ignore

from rest_framework import serializers  # type: ignore

from .domain.state_machine import BookingStatus
from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Booking request sent by a renter."""

    item_id = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    total_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01"), required=False
    )
    deposit_amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date must not be before start date."})
        if attrs["start_date"] < timezone.localdate():
            raise serializers.ValidationError({"start_date": "Start date cannot be in the past."})
        return attrs


class BookingSerializer(serializers.ModelSerializer):
    """Full booking representation."""

    item_id = serializers.UUIDField(read_only=True)
    item_title = serializers.ReadOnlyField(source="item.title")
    renter_id = serializers.ReadOnlyField()
    owner_id = serializers.ReadOnlyField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "item_id",
            "item_title",
            "renter_id",
            "owner_id",
            "start_date",
            "end_date",
            "total_days",
            "daily_rate",
            "weekly_rate",
            "monthly_rate",
            "total_amount",
            "platform_fee",
            "deposit_amount",
            "status",
            "notes",
            "cancellation_reason",
            "rating",
            "feedback",
            "version",
            "confirmed_at",
            "started_at",
            "completed_at",
            "cancelled_at",
            "disputed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TransitionNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")
    # Older clients send the cancellation reason as ``reason``
    reason = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        attrs["notes"] = attrs.get("notes") or attrs.pop("reason", "")
        attrs.pop("reason", None)
        return attrs


class StatusUpdateSerializer(TransitionNotesSerializer):
    status = serializers.ChoiceField(choices=BookingStatus.choices())


class RatingSerializer(serializers.Serializer):
    # Type and range are checked by the rating policy so the error carries its own code
    rating = serializers.JSONField()
    feedback = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")
