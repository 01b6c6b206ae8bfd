"""
Rating Attachment Policy

A booking takes at most one rating, given by its renter once the rental
is completed.
"""

from typing import Optional

from .exceptions import (
    InvalidRatingValueError,
    NotAuthorizedError,
    NotCompletedError,
    RatingAlreadyAttachedError,
)
from .state_machine import ActorRole, BookingStatus

MIN_RATING = 1
MAX_RATING = 5


def validate_rating_value(rating) -> int:
    # bool is an int subclass; True must not pass as 1
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRatingValueError()
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRatingValueError()
    return rating


def ensure_can_rate(
    *,
    status: BookingStatus,
    actor_role: Optional[ActorRole],
    rating,
    existing_rating: Optional[int],
) -> int:
    """
    Validate a rating for a booking and return the value to store.

    Raises:
        InvalidRatingValueError: if the value is not an integer in 1..5.
        NotAuthorizedError: if the actor is not the renter.
        NotCompletedError: if the booking is not completed.
        RatingAlreadyAttachedError: if a rating is already attached.
    """
    value = validate_rating_value(rating)
    if actor_role is not ActorRole.RENTER:
        raise NotAuthorizedError('Only the renter can rate a booking')
    if BookingStatus(status) is not BookingStatus.COMPLETED:
        raise NotCompletedError()
    if existing_rating is not None:
        raise RatingAlreadyAttachedError()
    return value
