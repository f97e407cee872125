from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.events.models import Event
from apps.users.models import User


def _dt(day: int, hour: int = 18) -> datetime:
    return datetime(2025, 7, day, hour, tzinfo=dt_timezone.utc)


class EventAPITests(APITestCase):
    def setUp(self) -> None:
        self.super_admin = User.objects.create_user(
            email="root@example.com", password="RootPass123", role=User.Role.SUPER_ADMIN
        )
        self.admin = User.objects.create_user(
            email="admin@example.com", password="AdminPass123", role=User.Role.ADMIN
        )
        self.jazz = Event.objects.create(
            title="Jazz by the sea",
            category="music",
            city="Barcelona",
            country="Spain",
            venue="Port Vell",
            start_datetime=_dt(10),
            end_datetime=_dt(10, 23),
        )
        self.food = Event.objects.create(
            title="Street food fair",
            description="Local tapas and wine",
            category="food",
            city="Valencia",
            country="Spain",
            start_datetime=_dt(20),
            end_datetime=_dt(22),
        )
        self.hidden = Event.objects.create(
            title="Private rehearsal",
            category="music",
            city="Barcelona",
            start_datetime=_dt(5),
            is_active=False,
        )
        self.list_url = reverse("event-list")

    def _titles(self, response) -> list[str]:
        return [item["title"] for item in response.data["data"]["items"]]

    def test_public_list_hides_inactive_events(self) -> None:
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self._titles(response), ["Jazz by the sea", "Street food fair"])
        self.assertEqual(response.data["data"]["pagination"]["totalItems"], 2)

    def test_super_admin_sees_inactive_events(self) -> None:
        self.client.force_authenticate(self.super_admin)
        response = self.client.get(self.list_url)
        self.assertIn("Private rehearsal", self._titles(response))

    def test_filters(self) -> None:
        self.assertEqual(self._titles(self.client.get(self.list_url, {"category": "food"})), ["Street food fair"])
        self.assertEqual(self._titles(self.client.get(self.list_url, {"city": "barce"})), ["Jazz by the sea"])
        self.assertEqual(self._titles(self.client.get(self.list_url, {"search": "tapas"})), ["Street food fair"])
        self.assertEqual(
            self._titles(self.client.get(self.list_url, {"start_from": "2025-07-15T00:00:00Z"})),
            ["Street food fair"],
        )
        self.assertEqual(
            self._titles(self.client.get(self.list_url, {"end_to": "2025-07-15T00:00:00Z"})),
            ["Jazz by the sea"],
        )

    def test_retrieve(self) -> None:
        response = self.client.get(reverse("event-detail", kwargs={"pk": self.jazz.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["venue"], "Port Vell")

    def test_only_super_admin_can_write(self) -> None:
        payload = {"title": "Film night", "start_datetime": "2025-08-01T20:00:00Z"}

        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        self.client.force_authenticate(self.admin)
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.super_admin)
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["data"]["created_by"], self.super_admin.pk)

    def test_end_before_start_is_rejected(self) -> None:
        self.client.force_authenticate(self.super_admin)
        response = self.client.post(
            self.list_url,
            {
                "title": "Backwards",
                "start_datetime": "2025-08-02T20:00:00Z",
                "end_datetime": "2025-08-01T20:00:00Z",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("end_datetime", response.data["errors"])

        detail = reverse("event-detail", kwargs={"pk": self.jazz.pk})
        response = self.client.patch(detail, {"end_datetime": (_dt(10) - timedelta(hours=1)).isoformat()}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete(self) -> None:
        self.client.force_authenticate(self.super_admin)
        response = self.client.delete(reverse("event-detail", kwargs={"pk": self.food.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Event deleted successfully")
        self.assertFalse(Event.objects.filter(pk=self.food.pk).exists())
