"""
Rental Pricing

Amounts are computed with ``Decimal`` and rounded half-up to cents.

Exactly one discount tier applies to a booking: the monthly rate from 30
days on, otherwise the weekly rate from 7 days on. Days left over after
the full blocks are charged at the daily rate.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from shared.domain.value_objects import DateRange

from .exceptions import BookingValidationError

DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30
CENTS = Decimal('0.01')

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """Coerce a number to a cent-rounded Decimal (floats go through ``str``)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def count_total_days(start_date: date, end_date: date) -> int:
    """Billable days of a booking: the day difference, at least one."""
    return DateRange(start_date, end_date).total_days


def compute_amount(
    daily_rate: Number,
    weekly_rate: Optional[Number],
    monthly_rate: Optional[Number],
    total_days: int,
) -> Decimal:
    """
    Price ``total_days`` of rental.

    >>> compute_amount(25, 150, 500, 10)
    Decimal('225.00')
    >>> compute_amount(25, None, None, 10)
    Decimal('250.00')
    """
    if total_days < 1:
        raise BookingValidationError('Rental must last at least one day')

    daily = to_money(daily_rate)
    if daily <= 0:
        raise BookingValidationError('Daily rate must be positive')

    if monthly_rate is not None and total_days >= DAYS_PER_MONTH:
        months, remainder = divmod(total_days, DAYS_PER_MONTH)
        return to_money(months * to_money(monthly_rate) + remainder * daily)

    if weekly_rate is not None and total_days >= DAYS_PER_WEEK:
        weeks, remainder = divmod(total_days, DAYS_PER_WEEK)
        return to_money(weeks * to_money(weekly_rate) + remainder * daily)

    return to_money(total_days * daily)


def calculate_platform_fee(
    amount: Number,
    rate: Number,
    minimum: Number,
    maximum: Number,
) -> Decimal:
    """
    Platform commission on a booking amount, clamped to ``[minimum, maximum]``.

    A zero amount carries no fee.
    """
    amount = to_money(amount)
    if amount <= 0:
        return to_money(0)
    fee = to_money(amount * Decimal(str(rate)))
    return min(max(fee, to_money(minimum)), to_money(maximum))


@dataclass(frozen=True)
class PriceQuote:
    """Price of a date range under an item's rate tiers."""

    total_days: int
    amount: Decimal


def quote(
    start_date: date,
    end_date: date,
    daily_rate: Number,
    weekly_rate: Optional[Number] = None,
    monthly_rate: Optional[Number] = None,
) -> PriceQuote:
    total_days = count_total_days(start_date, end_date)
    return PriceQuote(
        total_days=total_days,
        amount=compute_amount(daily_rate, weekly_rate, monthly_rate, total_days),
    )
