"""API tests for the item catalog and availability endpoint."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.items.models import Item
from apps.users.models import User


class ItemAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.renter = User.objects.create_user(email="renter@example.com", password="RenterPass123")
        self.item = Item.objects.create(owner=self.owner, title="Drill", daily_rate=Decimal("12.50"))
        self.hidden = Item.objects.create(
            owner=self.owner,
            title="Old ladder",
            daily_rate=Decimal("5.00"),
            is_active=False,
        )
        self.start = date.today() + timedelta(days=7)

    def _book(self, start: date, end: date, status_value: str = "pending") -> Booking:
        return Booking.objects.create(
            item=self.item,
            renter=self.renter,
            owner=self.owner,
            start_date=start,
            end_date=end,
            total_days=max(1, (end - start).days),
            daily_rate=self.item.daily_rate,
            total_amount=Decimal("25.00"),
            status=status_value,
        )

    def _availability(self, start: date, end: date):
        return self.client.get(
            reverse("item-availability", args=[self.item.pk]),
            {"start_date": str(start), "end_date": str(end)},
        )

    def test_list_shows_active_items_only(self) -> None:
        response = self.client.get(reverse("item-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["title"] for row in response.data["data"]], ["Drill"])
        self.assertEqual(response.data["pagination"]["total"], 1)

    def test_retrieve(self) -> None:
        response = self.client.get(reverse("item-detail", args=[self.item.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["daily_rate"], "12.50")
        self.assertEqual(response.data["data"]["owner_id"], self.owner.pk)

        response = self.client.get(reverse("item-detail", args=[self.hidden.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "NOT_FOUND")

    def test_free_range_is_available(self) -> None:
        response = self._availability(self.start, self.start + timedelta(days=2))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["data"]["available"])
        self.assertNotIn("conflicting_start_date", response.data["data"])

    def test_overlapping_range_reports_conflict(self) -> None:
        self._book(self.start, self.start + timedelta(days=4))

        response = self._availability(self.start + timedelta(days=4), self.start + timedelta(days=6))

        data = response.data["data"]
        self.assertFalse(data["available"])
        self.assertEqual(data["conflicting_start_date"], self.start)
        self.assertEqual(data["conflicting_end_date"], self.start + timedelta(days=4))

        response = self._availability(self.start + timedelta(days=5), self.start + timedelta(days=6))
        self.assertTrue(response.data["data"]["available"])

    def test_cancelled_booking_does_not_block(self) -> None:
        self._book(self.start, self.start + timedelta(days=4), status_value="cancelled")

        response = self._availability(self.start, self.start + timedelta(days=1))
        self.assertTrue(response.data["data"]["available"])

    def test_invalid_query(self) -> None:
        response = self._availability(self.start, self.start - timedelta(days=1))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "VALIDATION_ERROR")

        response = self.client.get(reverse("item-availability", args=[self.item.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
