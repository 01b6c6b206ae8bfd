"""Concurrent writes on one item or one booking from separate connections."""

from __future__ import annotations

import threading
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable

from django.db import connection
from django.test import TransactionTestCase

from apps.bookings.domain.exceptions import (
    ConcurrentUpdateError,
    DateConflictError,
    InvalidTransitionError,
)
from apps.bookings.domain.state_machine import BookingStatus
from apps.bookings.models import Booking
from apps.bookings.services import BookingLifecycleService
from apps.items.models import Item
from apps.users.models import User


class ConcurrentBookingTests(TransactionTestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.renters = [
            User.objects.create_user(email=f"renter{i}@example.com", password="RenterPass123") for i in range(2)
        ]
        self.item = Item.objects.create(owner=self.owner, title="Kayak", daily_rate=Decimal("40.00"))
        self.start = date.today() + timedelta(days=5)

    def run_together(self, calls: list[Callable[[], str]]) -> list[str]:
        """Start ``calls`` at the same moment, each on its own connection."""
        barrier = threading.Barrier(len(calls))
        outcomes: list[str] = []
        lock = threading.Lock()

        def worker(call: Callable[[], str]) -> None:
            try:
                barrier.wait(timeout=5)
                outcome = call()
            except Exception as exc:  # noqa: BLE001
                outcome = type(exc).__name__
            finally:
                connection.close()
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=worker, args=(call,)) for call in calls]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)
        return sorted(outcomes)

    def test_only_one_of_two_identical_requests_wins(self) -> None:
        def create(renter: User) -> Callable[[], str]:
            def call() -> str:
                BookingLifecycleService().create_booking(
                    self.item.pk,
                    renter,
                    self.start,
                    self.start + timedelta(days=3),
                )
                return "created"

            return call

        outcomes = self.run_together([create(renter) for renter in self.renters])

        self.assertEqual(outcomes, [DateConflictError.__name__, "created"])
        self.assertEqual(Booking.objects.filter(item=self.item).count(), 1)

    def test_two_confirms_on_one_booking(self) -> None:
        booking = BookingLifecycleService().create_booking(
            self.item.pk,
            self.renters[0],
            self.start,
            self.start + timedelta(days=3),
        )

        def confirm() -> str:
            BookingLifecycleService().transition(booking.pk, self.owner, BookingStatus.CONFIRMED)
            return "confirmed"

        outcomes = self.run_together([confirm, confirm])

        self.assertIn("confirmed", outcomes)
        outcomes.remove("confirmed")
        self.assertIn(outcomes[0], {ConcurrentUpdateError.__name__, InvalidTransitionError.__name__})

        booking.refresh_from_db()
        self.assertEqual(booking.status, BookingStatus.CONFIRMED.value)
        self.assertEqual(booking.version, 2)
