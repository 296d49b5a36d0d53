"""API tests for authentication endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens_and_borrower_role(self) -> None:
        payload = {
            "email": "peminjam@example.com",
            "phone": "+6281234567890",
            "first_name": "Budi",
            "last_name": "Santoso",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("tokens", response.data)
        self.assertEqual(response.data["user"]["role"], "peminjam")
        self.assertTrue(User.objects.filter(email=payload["email"]).exists())

    def test_register_rejects_duplicate_email(self) -> None:
        User.objects.create_user(email="taken@example.com", password="Password123")
        payload = {
            "email": "taken@example.com",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_with_wrong_password(self) -> None:
        User.objects.create_user(email="login@example.com", password="CorrectPassword1")

        response = self.client.post(
            reverse("auth:login"),
            {"email": "login@example.com", "password": "wrong"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            reverse("auth:login"),
            {"email": "login@example.com", "password": "CorrectPassword1"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data["tokens"])

    def test_me_requires_authentication(self) -> None:
        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        user = User.objects.create_user(email="me@example.com", password="Password123")
        self.client.force_authenticate(user)
        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.data["email"], "me@example.com")


class ProfileAndRoleAPITests(APITestCase):
    def setUp(self) -> None:
        self.borrower = User.objects.create_user(email="budi@example.com", password="Password123")
        self.admin = User.objects.create_user(email="admin@example.com", password="Password123", role="admin")

    def test_profile_update_normalises_phone_and_keeps_role(self) -> None:
        self.client.force_authenticate(self.borrower)
        response = self.client.patch(
            reverse("auth:me"),
            {"first_name": "Budi", "phone": "+62 812-3456-7890", "role": "admin"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.borrower.refresh_from_db()
        self.assertEqual(self.borrower.phone, "+6281234567890")
        self.assertEqual(self.borrower.role, "peminjam")
        self.assertEqual(response.data["display_name"], "Budi")

    def test_admin_assigns_approver_role(self) -> None:
        self.client.force_authenticate(self.admin)
        url = reverse("auth:assign_role", kwargs={"user_id": self.borrower.pk})
        response = self.client.post(url, {"role": "approver"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.borrower.refresh_from_db()
        self.assertEqual(self.borrower.role, "approver")

    def test_borrower_cannot_assign_roles(self) -> None:
        self.client.force_authenticate(self.borrower)
        url = reverse("auth:assign_role", kwargs={"user_id": self.borrower.pk})
        response = self.client.post(url, {"role": "admin"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["code"], "forbidden")
        self.borrower.refresh_from_db()
        self.assertEqual(self.borrower.role, "peminjam")

    def test_unknown_role_is_rejected(self) -> None:
        self.client.force_authenticate(self.admin)
        url = reverse("auth:assign_role", kwargs={"user_id": self.borrower.pk})
        response = self.client.post(url, {"role": "owner"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
