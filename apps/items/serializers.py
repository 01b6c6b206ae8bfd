"""Serializers for the item catalog."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Item


class ItemSerializer(serializers.ModelSerializer):
    owner_id = serializers.ReadOnlyField(source="owner.id")

    class Meta:
        model = Item
        fields = [
            "id",
            "owner_id",
            "title",
            "description",
            "daily_rate",
            "weekly_rate",
            "monthly_rate",
            "security_amount",
            "min_rental_days",
            "max_rental_days",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AvailabilityQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date must not be before start date."})
        return attrs
