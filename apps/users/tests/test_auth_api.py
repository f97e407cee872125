"""API tests for authentication endpoints."""

from __future__ import annotations

import re
from datetime import timedelta

from django.core import mail
from django.core.cache import cache
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


def _last_code() -> str:
    match = re.search(r"\b(\d{6})\b", mail.outbox[-1].subject)
    assert match is not None
    return match.group(1)


class AuthAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()

    def test_signup_creates_user_and_sends_code(self) -> None:
        payload = {
            "email": "Guest@Example.com",
            "first_name": "Guest",
            "last_name": "User",
            "password": "StrongPass123",
        }

        response = self.client.post(reverse("auth:signup"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["statusCode"], 201)
        self.assertEqual(response.data["data"]["user"]["email"], "guest@example.com")
        self.assertEqual(response.data["data"]["user"]["role"], User.Role.USER)
        self.assertEqual(len(mail.outbox), 1)

        verify = self.client.post(
            reverse("auth:verify-email"),
            {"email": "guest@example.com", "code": _last_code()},
            format="json",
        )
        self.assertEqual(verify.status_code, status.HTTP_200_OK, verify.data)
        self.assertIn("access", verify.data["data"]["tokens"])
        self.assertTrue(User.objects.get(email="guest@example.com").is_email_verified)

    def test_signup_as_owner_is_allowed(self) -> None:
        payload = {"email": "owner@example.com", "password": "StrongPass123", "role": "OWNER"}
        response = self.client.post(reverse("auth:signup"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(User.objects.get(email="owner@example.com").role, User.Role.OWNER)

    def test_admin_signup_is_forbidden(self) -> None:
        payload = {"email": "boss@example.com", "password": "StrongPass123", "role": "ADMIN"}
        response = self.client.post(reverse("auth:signup"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertFalse(response.data["success"])
        self.assertFalse(User.objects.filter(email="boss@example.com").exists())

    def test_duplicate_email_conflicts(self) -> None:
        User.objects.create_user(email="taken@example.com", password="StrongPass123")
        payload = {"email": "TAKEN@example.com", "password": "StrongPass123"}
        response = self.client.post(reverse("auth:signup"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["errors"]["code"], "conflict")

    def test_signup_validation_errors_are_enveloped(self) -> None:
        response = self.client.post(reverse("auth:signup"), {"email": "nope"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Validation failed")
        self.assertIn("email", response.data["errors"])
        self.assertIn("password", response.data["errors"])

    def test_login_returns_tokens(self) -> None:
        User.objects.create_user(email="login@example.com", password="CorrectPassword1")
        response = self.client.post(
            reverse("auth:login"),
            {"email": "login@example.com", "password": "CorrectPassword1"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("refresh", response.data["data"]["tokens"])
        self.assertEqual(response.data["message"], "Login successful")

    def test_login_unknown_email_is_unauthorized(self) -> None:
        response = self.client.post(
            reverse("auth:login"),
            {"email": "ghost@example.com", "password": "whatever1"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_limited_attempts(self) -> None:
        user = User.objects.create_user(email="lock@example.com", password="CorrectPassword1")

        url = reverse("auth:login")
        wrong_payload = {"email": user.email, "password": "wrong"}
        for _ in range(5):
            response = self.client.post(url, wrong_payload, format="json")
            self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        user.refresh_from_db()
        self.assertTrue(user.is_locked)

        response = self.client.post(url, {"email": user.email, "password": "CorrectPassword1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        # After lock expires user can login again
        user.locked_until = timezone.now() - timedelta(minutes=1)
        user.save(update_fields=["locked_until"])
        response = self.client.post(url, {"email": user.email, "password": "CorrectPassword1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_otp_login_flow(self) -> None:
        User.objects.create_user(email="otp@example.com", password="CorrectPassword1")

        request_resp = self.client.post(reverse("auth:otp-request"), {"email": "otp@example.com"}, format="json")
        self.assertEqual(request_resp.status_code, status.HTTP_202_ACCEPTED)

        verify_url = reverse("auth:otp-verify")
        wrong = self.client.post(verify_url, {"email": "otp@example.com", "code": "000000"}, format="json")
        self.assertEqual(wrong.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(wrong.data["errors"]["details"]["reason"], "invalid")

        response = self.client.post(verify_url, {"email": "otp@example.com", "code": _last_code()}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data["data"]["tokens"])

    def test_otp_request_for_unknown_email_does_not_leak(self) -> None:
        response = self.client.post(reverse("auth:otp-request"), {"email": "ghost@example.com"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(len(mail.outbox), 0)

    def test_password_reset_flow(self) -> None:
        user = User.objects.create_user(email="reset@example.com", password="OldPassword1")

        request_resp = self.client.post(
            reverse("auth:password-reset-request"),
            {"email": user.email},
            format="json",
        )
        self.assertEqual(request_resp.status_code, status.HTTP_202_ACCEPTED, request_resp.data)

        confirm_payload = {
            "email": user.email,
            "code": _last_code(),
            "new_password": "NewPassword1",
        }
        confirm_resp = self.client.post(
            reverse("auth:password-reset-confirm"),
            confirm_payload,
            format="json",
        )
        self.assertEqual(confirm_resp.status_code, status.HTTP_200_OK, confirm_resp.data)
        user.refresh_from_db()
        self.assertTrue(user.check_password("NewPassword1"))

        reused = self.client.post(reverse("auth:password-reset-confirm"), confirm_payload, format="json")
        self.assertEqual(reused.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(reused.data["errors"]["details"]["reason"], "expired")


class ProfileAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="me@example.com",
            password="CurrentPass123",
            first_name="Old",
        )

    def test_me_requires_authentication(self) -> None:
        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data["success"])

    def test_me_and_profile_update(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["email"], "me@example.com")

        response = self.client.put(
            reverse("auth:profile"),
            {"first_name": "New", "phone": "+7 700 123-45-67"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, "New")
        self.assertEqual(self.user.phone, "+77001234567")

    def test_change_password_checks_current(self) -> None:
        self.client.force_authenticate(self.user)
        url = reverse("auth:password")
        bad = self.client.put(url, {"current_password": "nope", "new_password": "BrandNewPass1"}, format="json")
        self.assertEqual(bad.status_code, status.HTTP_400_BAD_REQUEST)

        good = self.client.put(
            url,
            {"current_password": "CurrentPass123", "new_password": "BrandNewPass1"},
            format="json",
        )
        self.assertEqual(good.status_code, status.HTTP_200_OK, good.data)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("BrandNewPass1"))

    def test_refresh_rotates_and_logout_blacklists(self) -> None:
        login = self.client.post(
            reverse("auth:login"),
            {"email": "me@example.com", "password": "CurrentPass123"},
            format="json",
        )
        tokens = login.data["data"]["tokens"]

        refreshed = self.client.post(reverse("auth:token-refresh"), {"refresh": tokens["refresh"]}, format="json")
        self.assertEqual(refreshed.status_code, status.HTTP_200_OK, refreshed.data)
        new_refresh = refreshed.data["data"]["refresh"]

        reused = self.client.post(reverse("auth:token-refresh"), {"refresh": tokens["refresh"]}, format="json")
        self.assertEqual(reused.status_code, status.HTTP_401_UNAUTHORIZED)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {refreshed.data['data']['access']}")
        logout = self.client.post(reverse("auth:logout"), {"refresh": new_refresh}, format="json")
        self.assertEqual(logout.status_code, status.HTTP_200_OK, logout.data)

        self.client.credentials()
        after = self.client.post(reverse("auth:token-refresh"), {"refresh": new_refresh}, format="json")
        self.assertEqual(after.status_code, status.HTTP_401_UNAUTHORIZED)
