"""API tests for authentication endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "email": "renter@example.com",
            "phone": "+77001234567",
            "first_name": "Renter",
            "last_name": "User",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("tokens", response.data["data"])
        self.assertEqual(response.data["data"]["user"]["email"], payload["email"])
        self.assertTrue(User.objects.filter(email=payload["email"]).exists())

    def test_register_rejects_mismatched_passwords_and_duplicates(self) -> None:
        User.objects.create_user(email="taken@example.com", password="StrongPass123")

        response = self.client.post(
            reverse("auth:register"),
            {"email": "new@example.com", "password": "StrongPass123", "password_confirm": "OtherPass123"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", response.data["details"])

        response = self.client.post(
            reverse("auth:register"),
            {"email": "taken@example.com", "password": "StrongPass123", "password_confirm": "StrongPass123"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data["details"])

    def test_login_and_refresh(self) -> None:
        User.objects.create_user(email="login@example.com", password="CorrectPassword1")

        response = self.client.post(
            reverse("auth:login"),
            {"email": "login@example.com", "password": "CorrectPassword1"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        tokens = response.data["data"]["tokens"]

        response = self.client.post(reverse("auth:token_refresh"), {"refresh": tokens["refresh"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)

    def test_login_with_wrong_password(self) -> None:
        User.objects.create_user(email="login@example.com", password="CorrectPassword1")

        response = self.client.post(
            reverse("auth:login"),
            {"email": "login@example.com", "password": "wrong"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "VALIDATION_ERROR")

    def test_access_token_authenticates_booking_endpoints(self) -> None:
        User.objects.create_user(email="jwt@example.com", password="CorrectPassword1")
        login = self.client.post(
            reverse("auth:login"),
            {"email": "jwt@example.com", "password": "CorrectPassword1"},
            format="json",
        )
        access = login.data["data"]["tokens"]["access"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        response = self.client.get(reverse("booking-my"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["pagination"]["total"], 0)
