"""
Availability Rule

Two bookings of the same item conflict when their inclusive date ranges
share at least one day and neither booking is cancelled.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from shared.domain.value_objects import DateRange

from .state_machine import BookingStatus

BLOCKING_STATUSES = frozenset(
    status for status in BookingStatus if status is not BookingStatus.CANCELLED
)

# (booking id, start date, end date, status)
Reservation = Tuple[object, object, object, str]


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    conflicting_booking_id: Optional[object] = None
    conflicting_range: Optional[DateRange] = None


def find_conflict(
    candidate: DateRange,
    reservations: Iterable[Reservation],
    *,
    exclude_booking_id=None,
) -> AvailabilityResult:
    """Return the first reservation blocking ``candidate``, if any."""
    for booking_id, start_date, end_date, status in reservations:
        if exclude_booking_id is not None and booking_id == exclude_booking_id:
            continue
        if BookingStatus(status) not in BLOCKING_STATUSES:
            continue
        existing = DateRange(start_date, end_date)
        if candidate.overlaps_with(existing):
            return AvailabilityResult(
                available=False,
                conflicting_booking_id=booking_id,
                conflicting_range=existing,
            )
    return AvailabilityResult(available=True)
