"""FilterSet definitions for booking lists."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Booking


class CharInFilter(django_filters.BaseInFilter, django_filters.CharFilter):
    pass


class BookingFilter(django_filters.FilterSet):
    """Filters shared by ``/bookings/`` and ``/bookings/my/``."""

    # CSV of statuses, e.g. ?status=pending,confirmed
    status = CharInFilter(field_name="status", lookup_expr="in")
    role = django_filters.ChoiceFilter(
        choices=[("renter", "renter"), ("owner", "owner"), ("both", "both")],
        method="filter_role",
    )
    start_date = django_filters.DateFilter(field_name="start_date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="end_date", lookup_expr="lte")
    item = django_filters.UUIDFilter(field_name="item_id")

    class Meta:
        model = Booking
        fields = ["status", "role", "start_date", "end_date", "item"]

    def filter_role(self, queryset, name, value):  # type: ignore
        user = getattr(self.request, "user", None)
        if user is None or not user.is_authenticated:
            return queryset.none()
        if value == "renter":
            return queryset.filter(renter=user)
        if value == "owner":
            return queryset.filter(owner=user)
        return queryset.filter(Q(renter=user) | Q(owner=user))
