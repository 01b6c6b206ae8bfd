"""Booking lifecycle services.

All writes to a booking go through ``BookingLifecycleService``. Creation
serializes on the item row lock; transitions and ratings lock the booking
row and persist with a compare-and-swap on ``(id, status, version)``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable

import structlog
from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Avg, Count, F, Q, QuerySet, Sum  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.items.lookup import get_item_terms
from shared.domain.value_objects import DateRange

from .domain.availability import BLOCKING_STATUSES, AvailabilityResult, find_conflict
from .domain.exceptions import (
    BookingValidationError,
    ConcurrentUpdateError,
    DateConflictError,
    NotAuthorizedError,
    NotFoundError,
)
from .domain.pricing import calculate_platform_fee, quote, to_money
from .domain.rating import ensure_can_rate, validate_rating_value
from .domain.state_machine import (
    STATUS_TIMESTAMP_FIELDS,
    BookingStatus,
    append_notes,
    ensure_transition,
)
from .models import Booking

logger = structlog.get_logger(__name__)

ROLE_RENTER = "renter"
ROLE_OWNER = "owner"
ROLE_BOTH = "both"
LIST_ROLES = (ROLE_RENTER, ROLE_OWNER, ROLE_BOTH)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def _engine_setting(name: str, default: Any) -> Any:
    return getattr(settings, "RENTAL_ENGINE", {}).get(name, default)


def check_item_availability(
    item_id,
    start_date: date,
    end_date: date,
    exclude_booking_id=None,
) -> AvailabilityResult:
    """Report whether ``item_id`` is free for ``start_date``..``end_date`` (inclusive)."""

    candidate = DateRange(start_date, end_date)
    overlapping = Booking.objects.filter(
        item_id=item_id,
        status__in=[status.value for status in BLOCKING_STATUSES],
        start_date__lte=candidate.end_date,
        end_date__gte=candidate.start_date,
    )
    if exclude_booking_id is not None:
        overlapping = overlapping.exclude(pk=exclude_booking_id)

    rows = overlapping.order_by("start_date").values_list("id", "start_date", "end_date", "status")[:1]
    return find_conflict(candidate, rows, exclude_booking_id=exclude_booking_id)


class BookingLifecycleService:
    """Create, move and rate bookings on behalf of an acting user."""

    def __init__(
        self,
        *,
        item_lookup: Callable[..., Any] = get_item_terms,
        today: Callable[[], date] = timezone.localdate,
    ) -> None:
        self.item_lookup = item_lookup
        self.today = today

    # Creation

    def create_booking(
        self,
        item_id,
        renter,
        start_date: date,
        end_date: date,
        total_amount: Decimal | None = None,
        deposit_amount: Decimal | None = None,
        notes: str = "",
    ) -> Booking:
        """
        Reserve an item for ``renter``.

        Raises:
            BookingValidationError: bad dates, own item, duration outside the
                item limits or negative amounts.
            NotFoundError: unknown or inactive item.
            DateConflictError: the range overlaps a blocking booking.
        """
        if start_date > end_date:
            raise BookingValidationError("End date must not be before start date")
        if start_date < self.today():
            raise BookingValidationError("Start date cannot be in the past")
        if total_amount is not None and total_amount <= 0:
            raise BookingValidationError("Total amount must be positive")
        if deposit_amount is not None and deposit_amount < 0:
            raise BookingValidationError("Deposit amount must not be negative")

        with transaction.atomic():
            terms = self.item_lookup(item_id, lock=True)

            if terms.owner_id == renter.pk:
                raise BookingValidationError("You cannot book your own item")

            price = quote(start_date, end_date, terms.daily_rate, terms.weekly_rate, terms.monthly_rate)
            if price.total_days < terms.min_rental_days:
                raise BookingValidationError(f"Minimum rental period is {terms.min_rental_days} days")
            if price.total_days > terms.max_rental_days:
                raise BookingValidationError(f"Maximum rental period is {terms.max_rental_days} days")

            amount = price.amount
            if total_amount is not None:
                amount = to_money(total_amount)
                if amount != price.amount:
                    logger.warning(
                        "booking_amount_override",
                        item_id=str(item_id),
                        renter_id=renter.pk,
                        computed_amount=str(price.amount),
                        requested_amount=str(amount),
                    )

            availability = check_item_availability(item_id, start_date, end_date)
            if not availability.available:
                logger.info(
                    "booking_conflict",
                    item_id=str(item_id),
                    renter_id=renter.pk,
                    start_date=start_date.isoformat(),
                    end_date=end_date.isoformat(),
                    conflicting_booking_id=str(availability.conflicting_booking_id),
                )
                raise DateConflictError()

            booking = Booking.objects.create(
                item_id=terms.item_id,
                renter=renter,
                owner_id=terms.owner_id,
                start_date=start_date,
                end_date=end_date,
                total_days=price.total_days,
                daily_rate=terms.daily_rate,
                weekly_rate=terms.weekly_rate,
                monthly_rate=terms.monthly_rate,
                total_amount=amount,
                platform_fee=calculate_platform_fee(
                    amount,
                    _engine_setting("PLATFORM_FEE_RATE", Decimal("0.05")),
                    _engine_setting("PLATFORM_FEE_MIN", Decimal("10")),
                    _engine_setting("PLATFORM_FEE_MAX", Decimal("500")),
                ),
                deposit_amount=deposit_amount if deposit_amount is not None else terms.security_amount,
                status=BookingStatus.PENDING.value,
                notes=(notes or "").strip(),
            )

        logger.info(
            "booking_created",
            booking_id=str(booking.pk),
            item_id=str(booking.item_id),
            renter_id=booking.renter_id,
            owner_id=booking.owner_id,
            total_days=booking.total_days,
            total_amount=str(booking.total_amount),
        )
        return booking

    # Reads

    def get_booking(self, booking_id, actor) -> Booking:
        booking = self._load(booking_id, Booking.objects.select_related("item", "renter", "owner"))
        if booking.role_of(actor) is None:
            raise NotAuthorizedError(f"User {actor.pk} has no access to booking {booking_id}")
        return booking

    def list_bookings(
        self,
        actor,
        role: str = ROLE_BOTH,
        statuses: Iterable[str] | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> QuerySet:
        """
        Bookings where ``actor`` is the renter, the owner, or either.

        ``start``/``end`` keep bookings starting on or after ``start`` and
        ending on or before ``end``.
        """
        if role == ROLE_RENTER:
            queryset = Booking.objects.filter(renter=actor)
        elif role == ROLE_OWNER:
            queryset = Booking.objects.filter(owner=actor)
        elif role == ROLE_BOTH:
            queryset = Booking.objects.filter(Q(renter=actor) | Q(owner=actor))
        else:
            raise BookingValidationError(f"Unknown role {role!r}, expected one of {', '.join(LIST_ROLES)}")

        if statuses:
            queryset = queryset.filter(status__in=list(statuses))
        if start is not None:
            queryset = queryset.filter(start_date__gte=start)
        if end is not None:
            queryset = queryset.filter(end_date__lte=end)
        return queryset.select_related("item", "renter", "owner").order_by("-created_at")

    def get_stats(self, user, role: str = ROLE_BOTH) -> dict:
        """Aggregate a user's bookings per side at read time."""
        if role not in LIST_ROLES:
            raise BookingValidationError(f"Unknown role {role!r}, expected one of {', '.join(LIST_ROLES)}")

        stats: dict[str, Any] = {"role": role}
        if role in (ROLE_OWNER, ROLE_BOTH):
            stats["as_owner"] = self._side_stats(Booking.objects.filter(owner=user))
        if role in (ROLE_RENTER, ROLE_BOTH):
            stats["as_renter"] = self._side_stats(Booking.objects.filter(renter=user))

        limit = _engine_setting("STATS_RECENT_LIMIT", 5)
        recent = self.list_bookings(user, role=role)[:limit]
        stats["recent"] = [
            {
                "id": str(booking.pk),
                "item_id": str(booking.item_id),
                "item_title": booking.item.title,
                "status": booking.status,
                "start_date": booking.start_date.isoformat(),
                "end_date": booking.end_date.isoformat(),
                "total_amount": str(booking.total_amount),
                "role": ROLE_OWNER if booking.owner_id == user.pk else ROLE_RENTER,
            }
            for booking in recent
        ]
        return stats

    @staticmethod
    def _side_stats(queryset: QuerySet) -> dict:
        counts = {
            row["status"]: row["total"]
            for row in queryset.order_by().values("status").annotate(total=Count("id"))
        }
        by_status = {status.value: counts.get(status.value, 0) for status in BookingStatus}
        totals = queryset.exclude(status=BookingStatus.CANCELLED.value).aggregate(
            total_amount=Sum("total_amount"),
            average_rating=Avg("rating"),
        )
        average = totals["average_rating"]
        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "total_amount": str(to_money(totals["total_amount"] or 0)),
            "average_rating": round(float(average), 2) if average is not None else None,
        }

    # Writes

    def transition(self, booking_id, actor, target_status, notes: str = "") -> Booking:
        """
        Move a booking to ``target_status`` on behalf of ``actor``.

        Raises:
            NotFoundError: unknown booking.
            NotAuthorizedError: actor is not a party, or may not trigger it.
            InvalidTransitionError: the transition is not allowed.
            ConcurrentUpdateError: the booking changed while being updated.
        """
        try:
            target = BookingStatus(target_status)
        except ValueError:
            raise BookingValidationError(f"Unknown booking status {target_status!r}") from None

        with transaction.atomic():
            booking = self._load(booking_id, _lock_queryset_if_possible(Booking.objects.all()))
            current = BookingStatus(booking.status)
            ensure_transition(current, target, booking.role_of(actor))

            now = timezone.now()
            changes: dict[str, Any] = {
                "status": target.value,
                "notes": append_notes(booking.notes, notes),
                "version": F("version") + 1,
                "updated_at": now,
                STATUS_TIMESTAMP_FIELDS[target]: now,
            }
            if target is BookingStatus.CANCELLED and (notes or "").strip():
                changes["cancellation_reason"] = notes.strip()

            self._compare_and_swap(booking, {"status": current.value}, changes)

        booking.refresh_from_db()
        logger.info(
            "booking_transitioned",
            booking_id=str(booking.pk),
            actor_id=actor.pk,
            from_status=current.value,
            to_status=target.value,
            version=booking.version,
        )
        return booking

    def rate(self, booking_id, actor, rating, feedback: str = "") -> Booking:
        """Attach the renter's rating to a completed booking."""
        validate_rating_value(rating)

        with transaction.atomic():
            booking = self._load(booking_id, _lock_queryset_if_possible(Booking.objects.all()))
            value = ensure_can_rate(
                status=BookingStatus(booking.status),
                actor_role=booking.role_of(actor),
                rating=rating,
                existing_rating=booking.rating,
            )
            self._compare_and_swap(
                booking,
                {"status": booking.status, "rating__isnull": True},
                {
                    "rating": value,
                    "feedback": (feedback or "").strip(),
                    "version": F("version") + 1,
                    "updated_at": timezone.now(),
                },
            )

        booking.refresh_from_db()
        logger.info("booking_rated", booking_id=str(booking.pk), actor_id=actor.pk, rating=value)
        return booking

    # Helpers

    @staticmethod
    def _load(booking_id, queryset: QuerySet) -> Booking:
        try:
            return queryset.get(pk=booking_id)
        except (Booking.DoesNotExist, DjangoValidationError):
            raise NotFoundError(f"Booking {booking_id} not found") from None

    @staticmethod
    def _compare_and_swap(booking: Booking, expected: dict, changes: dict) -> None:
        updated = Booking.objects.filter(pk=booking.pk, version=booking.version, **expected).update(**changes)
        if updated != 1:
            logger.warning("booking_concurrent_update", booking_id=str(booking.pk), version=booking.version)
            raise ConcurrentUpdateError()
