"""
Booking Domain Errors

Every failure of the booking engine is one of these types. The API layer
maps them to HTTP responses through ``status_code`` and ``error_code``.
"""

from shared.domain.exceptions import (
    BusinessValidationError,
    DomainError,
    NotAuthorizedError,
    NotFoundError,
)

__all__ = [
    'BookingValidationError',
    'ConcurrentUpdateError',
    'DateConflictError',
    'InvalidRatingValueError',
    'InvalidTransitionError',
    'NotAuthorizedError',
    'NotCompletedError',
    'NotFoundError',
    'RatingAlreadyAttachedError',
]


class BookingValidationError(BusinessValidationError):
    """Dates, amounts or durations of a booking request are not acceptable."""


class DateConflictError(DomainError):
    """The requested range overlaps a booking that still holds the item."""

    status_code = 409
    error_code = 'DATE_CONFLICT'
    default_message = 'Item is not available for the selected dates'


class ConcurrentUpdateError(DomainError):
    """The booking changed between read and write."""

    status_code = 409
    error_code = 'CONCURRENT_UPDATE'
    default_message = 'Booking was modified by another request, retry'


class InvalidTransitionError(DomainError):
    status_code = 422
    error_code = 'INVALID_TRANSITION'
    default_message = 'Status transition is not allowed'


class NotCompletedError(DomainError):
    status_code = 422
    error_code = 'NOT_COMPLETED'
    default_message = 'Only completed bookings can be rated'


class InvalidRatingValueError(DomainError):
    status_code = 400
    error_code = 'INVALID_RATING'
    default_message = 'Rating must be an integer between 1 and 5'


class RatingAlreadyAttachedError(DomainError):
    status_code = 422
    error_code = 'ALREADY_RATED'
    default_message = 'Booking has already been rated'
