"""Item catalog models for RentLoop.

Only the parts of an item the booking engine depends on are modeled here:
the owner, the rate tiers and the rental duration limits. Catalog details
such as categories, images and locations belong to other services.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Item(models.Model):
    """An object listed by its owner for rent by the day."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="items",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    daily_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    weekly_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Price for a full 7-day block. Empty means daily pricing applies."),
    )
    monthly_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Price for a full 30-day block. Empty means weekly/daily pricing applies."),
    )
    security_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    min_rental_days = models.PositiveSmallIntegerField(default=1)
    max_rental_days = models.PositiveSmallIntegerField(default=365)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Item")
        verbose_name_plural = _("Items")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(daily_rate__gt=0),
                name="item_daily_rate_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(max_rental_days__gte=models.F("min_rental_days")),
                name="item_valid_rental_days",
            ),
        ]
        indexes = [
            models.Index(fields=["owner", "is_active"], name="item_owner_active_idx"),
        ]

    def __str__(self) -> str:
        return self.title
