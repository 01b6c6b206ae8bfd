"""Item lookup used by the booking engine.

The engine never reads item records directly; it asks for the terms it
needs through ``get_item_terms``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore

from shared.domain.exceptions import NotFoundError

from .models import Item


@dataclass(frozen=True)
class ItemTerms:
    """Ownership and pricing terms of an item at the time of the lookup."""

    item_id: UUID
    owner_id: int
    daily_rate: Decimal
    weekly_rate: Optional[Decimal] = None
    monthly_rate: Optional[Decimal] = None
    security_amount: Decimal = Decimal("0.00")
    min_rental_days: int = 1
    max_rental_days: int = 365


def get_item_terms(item_id, *, lock: bool = False) -> ItemTerms:
    """
    Resolve the terms of an active item.

    With ``lock=True`` the item row is locked with SELECT ... FOR UPDATE; the
    caller must already be inside ``transaction.atomic()``.

    Raises:
        NotFoundError: if the item does not exist or is not active.
    """
    try:
        queryset = Item.objects.filter(pk=item_id, is_active=True)
        if lock:
            queryset = queryset.select_for_update()
        item = queryset.first()
    except DjangoValidationError:
        item = None
    if item is None:
        raise NotFoundError(f"Item {item_id} not found or not active")

    return ItemTerms(
        item_id=item.pk,
        owner_id=item.owner_id,
        daily_rate=item.daily_rate,
        weekly_rate=item.weekly_rate,
        monthly_rate=item.monthly_rate,
        security_amount=item.security_amount,
        min_rental_days=item.min_rental_days,
        max_rental_days=item.max_rental_days,
    )
