"""API tests for authentication and profile endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "email": "guest@example.com",
            "phone": "+15550001111",
            "first_name": "Guest",
            "last_name": "User",
            "password": "Str0ng!Passw0rd",
            "password_confirm": "Str0ng!Passw0rd",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("tokens", response.data)
        self.assertEqual(response.data["user"]["email"], payload["email"])
        self.assertEqual(response.data["user"]["role"], User.RoleChoices.GUEST)
        self.assertTrue(User.objects.filter(email=payload["email"]).exists())

    def test_register_rejects_mismatched_passwords(self) -> None:
        payload = {
            "email": "guest@example.com",
            "password": "Str0ng!Passw0rd",
            "password_confirm": "Different!Passw0rd",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", response.data)

    def test_register_rejects_duplicate_email(self) -> None:
        User.objects.create_user(email="taken@example.com", password="Str0ng!Passw0rd")
        payload = {
            "email": "TAKEN@example.com",
            "password": "Str0ng!Passw0rd",
            "password_confirm": "Str0ng!Passw0rd",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)

    def test_login_with_valid_and_invalid_credentials(self) -> None:
        User.objects.create_user(email="login@example.com", password="Str0ng!Passw0rd")
        url = reverse("auth:login")

        response = self.client.post(
            url, {"email": "login@example.com", "password": "wrong"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            url, {"email": "login@example.com", "password": "Str0ng!Passw0rd"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data["tokens"])


class ProfileAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="me@example.com", password="Str0ng!Passw0rd", first_name="Old"
        )
        self.client.force_authenticate(self.user)

    def test_me_returns_and_updates_profile(self) -> None:
        url = reverse("user-me")
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "me@example.com")

        response = self.client.patch(url, {"first_name": "New"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, "New")

    def test_change_password_requires_current_password(self) -> None:
        url = reverse("user-change-password")
        response = self.client.post(
            url,
            {
                "current_password": "nope",
                "new_password": "An0ther!Passw0rd",
                "new_password_confirm": "An0ther!Passw0rd",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            url,
            {
                "current_password": "Str0ng!Passw0rd",
                "new_password": "An0ther!Passw0rd",
                "new_password_confirm": "An0ther!Passw0rd",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("An0ther!Passw0rd"))

    def test_me_requires_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("user-me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
