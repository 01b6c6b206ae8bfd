"""
Common Value Objects

Value objects used across multiple domains:
- DateRange: Represents an inclusive range of calendar dates (rental period)
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DateRange:
    """
    Date range value object

    Represents a range from start_date to end_date, both inclusive.
    A rental that starts and ends on the same day is a valid one-day range.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must not be after end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Both ends are inclusive, so ranges sharing a single day overlap.

        Examples:
            - DateRange(1, 5) overlaps with DateRange(3, 7) -> True
            - DateRange(1, 5) overlaps with DateRange(5, 9) -> True
            - DateRange(1, 5) overlaps with DateRange(6, 10) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return self.start_date <= other.end_date and other.start_date <= self.end_date

    @property
    def total_days(self) -> int:
        """
        Number of billable rental days

        Counted as the difference between the dates, with a same-day
        rental billed as one day.
        """
        return max(1, (self.end_date - self.start_date).days)

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date.isoformat()}, {self.end_date.isoformat()})"
