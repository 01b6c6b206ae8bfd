"""
Booking Status Machine

State transitions:
- PENDING -> CONFIRMED (owner accepts)
- PENDING -> CANCELLED (renter withdraws or owner declines)
- CONFIRMED -> ACTIVE (owner hands the item over)
- CONFIRMED -> CANCELLED (either party)
- ACTIVE -> COMPLETED (owner takes the item back)
- ACTIVE -> DISPUTED (either party)
- COMPLETED -> DISPUTED (either party)
- DISPUTED -> COMPLETED | CANCELLED (owner or arbiter resolves)

CANCELLED is terminal. Every status except CANCELLED keeps the item's dates
blocked.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from .exceptions import InvalidTransitionError, NotAuthorizedError


class BookingStatus(str, Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    ACTIVE = 'active'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    DISPUTED = 'disputed'

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def choices(cls):
        return [(status.value, status.label) for status in cls]


class ActorRole(str, Enum):
    """Relation of a user to a particular booking."""

    RENTER = 'renter'
    OWNER = 'owner'
    ARBITER = 'arbiter'


ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.ACTIVE, BookingStatus.CANCELLED}),
    BookingStatus.ACTIVE: frozenset({BookingStatus.COMPLETED, BookingStatus.DISPUTED}),
    BookingStatus.COMPLETED: frozenset({BookingStatus.DISPUTED}),
    BookingStatus.DISPUTED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
}

_PARTIES = frozenset({ActorRole.RENTER, ActorRole.OWNER})
_OWNER_ONLY = frozenset({ActorRole.OWNER})
_RESOLVERS = frozenset({ActorRole.OWNER, ActorRole.ARBITER})

TRANSITION_ROLES: Dict[Tuple[BookingStatus, BookingStatus], FrozenSet[ActorRole]] = {
    (BookingStatus.PENDING, BookingStatus.CONFIRMED): _OWNER_ONLY,
    (BookingStatus.PENDING, BookingStatus.CANCELLED): _PARTIES,
    (BookingStatus.CONFIRMED, BookingStatus.ACTIVE): _OWNER_ONLY,
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED): _PARTIES,
    (BookingStatus.ACTIVE, BookingStatus.COMPLETED): _OWNER_ONLY,
    (BookingStatus.ACTIVE, BookingStatus.DISPUTED): _PARTIES,
    (BookingStatus.COMPLETED, BookingStatus.DISPUTED): _PARTIES,
    (BookingStatus.DISPUTED, BookingStatus.COMPLETED): _RESOLVERS,
    (BookingStatus.DISPUTED, BookingStatus.CANCELLED): _RESOLVERS,
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)

# Model field stamped when a booking enters the status
STATUS_TIMESTAMP_FIELDS: Dict[BookingStatus, str] = {
    BookingStatus.CONFIRMED: 'confirmed_at',
    BookingStatus.ACTIVE: 'started_at',
    BookingStatus.COMPLETED: 'completed_at',
    BookingStatus.CANCELLED: 'cancelled_at',
    BookingStatus.DISPUTED: 'disputed_at',
}


def resolve_actor_role(
    actor_id,
    renter_id,
    owner_id,
    *,
    is_arbiter: bool = False,
) -> Optional[ActorRole]:
    """Role of ``actor_id`` on a booking, or None for an outsider."""
    if actor_id is not None and actor_id == owner_id:
        return ActorRole.OWNER
    if actor_id is not None and actor_id == renter_id:
        return ActorRole.RENTER
    if is_arbiter:
        return ActorRole.ARBITER
    return None


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return BookingStatus(target) in ALLOWED_TRANSITIONS[BookingStatus(current)]


def ensure_transition(
    current: BookingStatus,
    target: BookingStatus,
    role: Optional[ActorRole],
) -> None:
    """
    Check that ``role`` may move a booking from ``current`` to ``target``.

    Raises:
        NotAuthorizedError: if the actor has no role on the booking, or the
            role is not permitted to trigger this transition.
        InvalidTransitionError: if the transition is not in the graph.
    """
    current = BookingStatus(current)
    target = BookingStatus(target)

    if role is None:
        raise NotAuthorizedError('Actor is not a party of the booking')

    if not can_transition(current, target):
        raise InvalidTransitionError(
            f'Cannot change booking status from {current.value} to {target.value}'
        )

    if role not in TRANSITION_ROLES[(current, target)]:
        raise NotAuthorizedError(
            f'{role.value} may not change booking status from {current.value} to {target.value}'
        )


def append_notes(existing: str, notes: str) -> str:
    """Notes accumulate; each transition adds its own line."""
    notes = (notes or '').strip()
    if not notes:
        return existing or ''
    if not existing:
        return notes
    return f'{existing}\n{notes}'
