"""API views for the item catalog."""

from __future__ import annotations

from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from apps.bookings.services import check_item_availability
from shared.infrastructure.api import success_response

from .models import Item
from .serializers import AvailabilityQuerySerializer, ItemSerializer


class ItemViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only access to active items and their availability calendar."""

    queryset = Item.objects.filter(is_active=True).select_related("owner")
    serializer_class = ItemSerializer
    permission_classes = [permissions.AllowAny]

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        return success_response(self.get_serializer(self.get_object()).data)

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        """Tell whether the item is free for ``start_date``..``end_date`` (inclusive)."""
        item = self.get_object()
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = check_item_availability(
            item.pk,
            query.validated_data["start_date"],
            query.validated_data["end_date"],
        )
        data = {
            "item_id": str(item.pk),
            "start_date": query.validated_data["start_date"],
            "end_date": query.validated_data["end_date"],
            "available": result.available,
        }
        if result.conflicting_range is not None:
            data["conflicting_start_date"] = result.conflicting_range.start_date
            data["conflicting_end_date"] = result.conflicting_range.end_date
        return success_response(data)
