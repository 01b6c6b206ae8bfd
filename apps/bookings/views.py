"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from shared.infrastructure.api import success_response

from .domain.exceptions import InvalidTransitionError
from .domain.state_machine import BookingStatus
from .filters import BookingFilter
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    RatingSerializer,
    StatusUpdateSerializer,
    TransitionNotesSerializer,
)
from .services import ROLE_BOTH, BookingLifecycleService


class BookingViewSet(viewsets.GenericViewSet):
    """Booking lifecycle endpoints.

    Access rules are enforced by ``BookingLifecycleService``; the view only
    requires an authenticated user, and staff for the global list.
    """

    queryset = Booking.objects.select_related("item", "renter", "owner").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = BookingFilter
    service_class = BookingLifecycleService

    def get_permissions(self):  # type: ignore
        if self.action == "list":
            return [permissions.IsAdminUser()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "update_status":
            return StatusUpdateSerializer
        if self.action in {"confirm", "start", "complete", "cancel"}:
            return TransitionNotesSerializer
        if self.action == "rating":
            return RatingSerializer
        return BookingSerializer

    @property
    def service(self) -> BookingLifecycleService:
        return self.service_class()

    def _paginated(self, queryset):
        page = self.paginate_queryset(self.filter_queryset(queryset))
        return self.get_paginated_response(BookingSerializer(page, many=True).data)

    def list(self, request, *args, **kwargs):  # type: ignore
        return self._paginated(self.get_queryset())

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = self.service.create_booking(
            data["item_id"],
            request.user,
            data["start_date"],
            data["end_date"],
            total_amount=data.get("total_amount"),
            deposit_amount=data.get("deposit_amount"),
            notes=data.get("notes", ""),
        )
        return success_response(
            BookingSerializer(booking).data,
            status_code=status.HTTP_201_CREATED,
            message="Booking created successfully",
        )

    def retrieve(self, request, pk=None, *args, **kwargs):  # type: ignore
        booking = self.service.get_booking(pk, request.user)
        return success_response(BookingSerializer(booking).data)

    @action(detail=False, methods=["get"])
    def my(self, request):  # type: ignore
        """Bookings of the current user as renter and/or owner."""
        return self._paginated(self.service.list_bookings(request.user, role=ROLE_BOTH))

    @action(detail=False, methods=["get"], url_path="my/stats")
    def my_stats(self, request):  # type: ignore
        role = request.query_params.get("role", ROLE_BOTH)
        return success_response(self.service.get_stats(request.user, role=role))

    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = self.service.transition(
            pk,
            request.user,
            serializer.validated_data["status"],
            notes=serializer.validated_data["notes"],
        )
        return success_response(BookingSerializer(booking).data, message="Booking status updated")

    def _transition_action(self, request, pk, target: BookingStatus, message: str):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            booking = self.service.transition(
                pk,
                request.user,
                target,
                notes=serializer.validated_data["notes"],
            )
        except InvalidTransitionError as exc:
            # Named actions report an impossible move as a bad request
            exc.status_code = status.HTTP_400_BAD_REQUEST
            raise
        return success_response(BookingSerializer(booking).data, message=message)

    @action(detail=True, methods=["put"])
    def confirm(self, request, pk=None):  # type: ignore
        return self._transition_action(request, pk, BookingStatus.CONFIRMED, "Booking confirmed")

    @action(detail=True, methods=["put"])
    def start(self, request, pk=None):  # type: ignore
        return self._transition_action(request, pk, BookingStatus.ACTIVE, "Booking started")

    @action(detail=True, methods=["put"])
    def complete(self, request, pk=None):  # type: ignore
        return self._transition_action(request, pk, BookingStatus.COMPLETED, "Booking completed")

    @action(detail=True, methods=["put"])
    def cancel(self, request, pk=None):  # type: ignore
        return self._transition_action(request, pk, BookingStatus.CANCELLED, "Booking cancelled")

    @action(detail=True, methods=["post"])
    def rating(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = self.service.rate(
            pk,
            request.user,
            serializer.validated_data["rating"],
            feedback=serializer.validated_data["feedback"],
        )
        return success_response(BookingSerializer(booking).data, message="Rating added")
