"""Integration tests for booking API endpoints."""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.items.models import Item
from apps.users.models import User


class BookingAPITests(APITestCase):
    """Covers creation, conflicts, transitions, rating and listing."""

    def setUp(self) -> None:
        self.renter = User.objects.create_user(email="renter@example.com", password="RenterPass123")
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.outsider = User.objects.create_user(email="outsider@example.com", password="OutsiderPass123")
        self.item = Item.objects.create(
            owner=self.owner,
            title="Camping tent",
            daily_rate=Decimal("25.00"),
            weekly_rate=Decimal("150.00"),
            monthly_rate=Decimal("500.00"),
        )
        self.start = date.today() + timedelta(days=10)
        self.client.force_authenticate(self.renter)
        self.list_url = reverse("booking-list")

    def _payload(self, start: date, end: date, **extra) -> dict:
        payload = {
            "item_id": str(self.item.id),
            "start_date": str(start),
            "end_date": str(end),
        }
        payload.update(extra)
        return payload

    def _create(self, start: date | None = None, days: int = 10) -> dict:
        start = start or self.start
        response = self.client.post(self.list_url, self._payload(start, start + timedelta(days=days)), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["data"]

    def _put(self, booking_id: str, action: str, user: User, data: dict | None = None):
        self.client.force_authenticate(user)
        return self.client.put(reverse(f"booking-{action}", args=[booking_id]), data or {}, format="json")

    def test_renter_creates_booking(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(self.start, self.start + timedelta(days=10), notes="Two people"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        data = response.data["data"]
        self.assertEqual(data["status"], "pending")
        self.assertEqual(data["total_days"], 10)
        self.assertEqual(data["total_amount"], "225.00")
        self.assertEqual(data["owner_id"], self.owner.id)
        self.assertEqual(data["renter_id"], self.renter.id)
        self.assertEqual(Booking.objects.count(), 1)

    def test_overlapping_booking_returns_conflict(self) -> None:
        self._create(days=4)

        self.client.force_authenticate(self.outsider)
        response = self.client.post(
            self.list_url,
            self._payload(self.start + timedelta(days=4), self.start + timedelta(days=6)),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["error"], "DATE_CONFLICT")

        response = self.client.post(
            self.list_url,
            self._payload(self.start + timedelta(days=5), self.start + timedelta(days=6)),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_invalid_dates_are_rejected(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(self.start, self.start - timedelta(days=1)),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "VALIDATION_ERROR")
        self.assertIn("end_date", response.data["details"])

        past = date.today() - timedelta(days=3)
        response = self.client.post(self.list_url, self._payload(past, past + timedelta(days=1)), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("start_date", response.data["details"])

    def test_owner_cannot_book_own_item(self) -> None:
        self.client.force_authenticate(self.owner)
        response = self.client.post(self.list_url, self._payload(self.start, self.start), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "VALIDATION_ERROR")

    def test_unknown_item_returns_not_found(self) -> None:
        payload = self._payload(self.start, self.start)
        payload["item_id"] = str(uuid.uuid4())
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Not found")

    def test_anonymous_requests_are_rejected(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.post(self.list_url, self._payload(self.start, self.start), format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"], "UNAUTHORIZED")

    def test_full_lifecycle(self) -> None:
        booking_id = self._create()["id"]

        response = self._put(booking_id, "confirm", self.owner, {"notes": "Ready"})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["data"]["status"], "confirmed")

        response = self._put(booking_id, "start", self.owner)
        self.assertEqual(response.data["data"]["status"], "active")

        response = self._put(booking_id, "complete", self.owner)
        self.assertEqual(response.data["data"]["status"], "completed")
        self.assertIsNotNone(response.data["data"]["completed_at"])

        self.client.force_authenticate(self.renter)
        response = self.client.post(
            reverse("booking-rating", args=[booking_id]),
            {"rating": 5, "feedback": "Dry all night"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["data"]["rating"], 5)
        self.assertEqual(response.data["data"]["status"], "completed")

        response = self.client.post(reverse("booking-rating", args=[booking_id]), {"rating": 4}, format="json")
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["error"], "ALREADY_RATED")

    def test_status_endpoint(self) -> None:
        booking_id = self._create()["id"]

        response = self._put(booking_id, "update-status", self.owner, {"status": "confirmed"})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["data"]["status"], "confirmed")

        response = self._put(booking_id, "update-status", self.owner, {"status": "completed"})
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["error"], "INVALID_TRANSITION")

        response = self._put(booking_id, "update-status", self.owner, {"status": "archived"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "VALIDATION_ERROR")

    def test_invalid_action_is_bad_request(self) -> None:
        booking_id = self._create()["id"]
        self._put(booking_id, "cancel", self.renter, {"reason": "Trip cancelled"})

        response = self._put(booking_id, "confirm", self.owner)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "INVALID_TRANSITION")

        booking = Booking.objects.get(pk=booking_id)
        self.assertEqual(booking.status, "cancelled")
        self.assertEqual(booking.cancellation_reason, "Trip cancelled")

    def test_role_guards(self) -> None:
        booking_id = self._create()["id"]

        response = self._put(booking_id, "confirm", self.renter)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "FORBIDDEN")
        self.assertEqual(response.data["message"], "Forbidden")

        response = self._put(booking_id, "cancel", self.outsider)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_retrieve_booking(self) -> None:
        booking_id = self._create()["id"]
        url = reverse("booking-detail", args=[booking_id])

        self.client.force_authenticate(self.owner)
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["id"], booking_id)

        self.client.force_authenticate(self.outsider)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.get(reverse("booking-detail", args=[uuid.uuid4()]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "NOT_FOUND")

    def test_rating_errors(self) -> None:
        booking_id = self._create()["id"]
        url = reverse("booking-rating", args=[booking_id])

        response = self.client.post(url, {"rating": 4.5}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "INVALID_RATING")

        response = self.client.post(url, {"rating": 4}, format="json")
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["error"], "NOT_COMPLETED")

        for action in ("confirm", "start", "complete"):
            self._put(booking_id, action, self.owner)

        self.client.force_authenticate(self.renter)
        response = self.client.post(url, {"rating": 6}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "INVALID_RATING")

    def test_my_bookings_are_paginated_and_filtered(self) -> None:
        first_id = self._create(days=2)["id"]
        self._create(start=self.start + timedelta(days=20), days=2)
        self._put(first_id, "confirm", self.owner)

        self.client.force_authenticate(self.renter)
        url = reverse("booking-my")

        response = self.client.get(url, {"limit": 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["data"]), 1)
        self.assertEqual(
            response.data["pagination"],
            {"page": 1, "limit": 1, "total": 2, "total_pages": 2, "has_next": True, "has_prev": False},
        )

        response = self.client.get(url, {"status": "confirmed,completed"})
        self.assertEqual([row["id"] for row in response.data["data"]], [first_id])

        response = self.client.get(url, {"role": "owner"})
        self.assertEqual(response.data["pagination"]["total"], 0)

        response = self.client.get(url, {"start_date": str(self.start + timedelta(days=15))})
        self.assertEqual(response.data["pagination"]["total"], 1)

        self.client.force_authenticate(self.outsider)
        self.assertEqual(self.client.get(url).data["pagination"]["total"], 0)

    def test_my_stats(self) -> None:
        self._create()

        self.client.force_authenticate(self.owner)
        response = self.client.get(reverse("booking-my-stats"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data["data"]
        self.assertEqual(data["as_owner"]["total"], 1)
        self.assertEqual(data["as_owner"]["by_status"]["pending"], 1)
        self.assertEqual(data["as_owner"]["total_amount"], "225.00")
        self.assertEqual(data["as_renter"]["total"], 0)
        self.assertEqual(len(data["recent"]), 1)

        response = self.client.get(reverse("booking-my-stats"), {"role": "nobody"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_global_list_requires_staff(self) -> None:
        self._create()

        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        staff = User.objects.create_user(email="staff@example.com", password="StaffPass123", is_staff=True)
        self.client.force_authenticate(staff)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["pagination"]["total"], 1)
