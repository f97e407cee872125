"""Admin panel API tests."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.finances.models import Payment
from apps.properties.models import Property
from apps.subscriptions.models import Subscription, SubscriptionPlan
from apps.subscriptions.services import create_subscription
from apps.users.models import User


class AdminPanelAPITests(APITestCase):
    def setUp(self) -> None:
        self.super_admin = User.objects.create_user(
            email="root@example.com", password="RootPass123", role=User.Role.SUPER_ADMIN
        )
        self.admin = User.objects.create_user(
            email="admin@example.com", password="AdminPass123", role=User.Role.ADMIN
        )
        self.owner = User.objects.create_user(
            email="owner@example.com", password="OwnerPass123", role=User.Role.OWNER, first_name="Olga"
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.pending = Property.objects.create(
            owner=self.owner,
            title="Mountain cabin",
            description="Wooden cabin with a fireplace",
            location="Valley",
            city="Chamonix",
            country="France",
            address="Route des Praz 3",
            price=Decimal("80.00"),
            max_guests=4,
        )
        self.plan = SubscriptionPlan.objects.create(
            name="Basic", type="basic", price=Decimal("9.00"), duration_days=30, max_properties=2
        )

    def test_admin_routes_require_admin_role(self) -> None:
        self.client.force_authenticate(self.guest)
        for url in (
            reverse("admin-user-list"),
            reverse("admin-property-queue"),
            reverse("admin-analytics"),
            reverse("admin-subscription-plan-list"),
        ):
            self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN, url)

        self.client.force_authenticate(None)
        self.assertEqual(self.client.get(reverse("admin-user-list")).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_user_list_filters_and_counts(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("admin-user-list"), {"role": "OWNER"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        items = response.data["data"]["items"]
        self.assertEqual([item["email"] for item in items], ["owner@example.com"])
        self.assertEqual(items[0]["property_count"], 1)

        response = self.client.get(reverse("admin-user-list"), {"search": "olga"})
        self.assertEqual(response.data["data"]["pagination"]["totalItems"], 1)

    def test_only_super_admin_grants_admin_roles(self) -> None:
        url = reverse("admin-user-detail", kwargs={"pk": self.guest.pk})

        self.client.force_authenticate(self.admin)
        response = self.client.patch(url, {"role": "ADMIN"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(url, {"is_active": False}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

        self.client.force_authenticate(self.super_admin)
        response = self.client.patch(url, {"role": "ADMIN"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.guest.refresh_from_db()
        self.assertEqual(self.guest.role, User.Role.ADMIN)

    def test_delete_user_rules(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("admin-user-detail", kwargs={"pk": self.admin.pk}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.delete(reverse("admin-user-detail", kwargs={"pk": self.owner.pk}))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        response = self.client.delete(reverse("admin-user-detail", kwargs={"pk": self.guest.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(pk=self.guest.pk).exists())

    def test_moderation_queue_and_approve(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("admin-property-queue"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data["data"]["items"]], [self.pending.pk])

        url = reverse("admin-property-approve", kwargs={"pk": self.pending.pk})
        response = self.client.put(url, {"status": "LIVE", "admin_notes": "Looks good"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["message"], "Property live successfully")
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, Property.Status.LIVE)
        self.assertIsNotNone(self.pending.published_at)
        self.assertEqual(self.pending.reviewed_by, self.admin)

        response = self.client.put(url, {"status": "PENDING"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        missing = reverse("admin-property-approve", kwargs={"pk": 999999})
        self.assertEqual(self.client.put(missing, {"status": "LIVE"}, format="json").status_code, 404)

    def test_plan_writes_are_super_admin_only(self) -> None:
        payload = {"name": "Pro", "type": "pro", "price": "29.00", "duration_days": 30, "max_properties": 10}

        self.client.force_authenticate(self.admin)
        self.assertEqual(
            self.client.get(reverse("admin-subscription-plan-list")).status_code, status.HTTP_200_OK
        )
        response = self.client.post(reverse("admin-subscription-plan-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.super_admin)
        response = self.client.post(reverse("admin-subscription-plan-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_plan_with_active_subscriptions_cannot_be_deleted(self) -> None:
        create_subscription(self.owner, self.plan.pk, paid=True)
        self.client.force_authenticate(self.super_admin)
        url = reverse("admin-subscription-plan-detail", kwargs={"pk": self.plan.pk})

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        Subscription.objects.filter(plan=self.plan).update(is_active=False)
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.plan.refresh_from_db()
        self.assertFalse(self.plan.is_active)

        unused = SubscriptionPlan.objects.create(
            name="Trial", type="trial", price=Decimal("0.00"), duration_days=7, max_properties=1
        )
        self.client.delete(reverse("admin-subscription-plan-detail", kwargs={"pk": unused.pk}))
        self.assertFalse(SubscriptionPlan.objects.filter(pk=unused.pk).exists())

    def test_subscription_flags(self) -> None:
        subscription = create_subscription(self.owner, self.plan.pk)
        url = reverse("admin-subscription-flags", kwargs={"pk": subscription.pk})
        self.client.force_authenticate(self.admin)

        response = self.client.patch(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(url, {"paid": True}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["data"]["paid"])

        missing = reverse("admin-subscription-flags", kwargs={"pk": 999999})
        self.assertEqual(self.client.patch(missing, {"paid": True}, format="json").status_code, 404)

    def test_analytics(self) -> None:
        self.pending.status = Property.Status.LIVE
        self.pending.save()
        now = timezone.now()
        booking = Booking.objects.create(
            property=self.pending,
            user=self.guest,
            start_date=now + timedelta(days=3),
            end_date=now + timedelta(days=5),
            guests=2,
            nights=2,
            amount=Decimal("160.00"),
            status=Booking.Status.CONFIRMED,
        )
        Payment.objects.create(booking=booking, amount=Decimal("160.00"), status=Payment.Status.PAID)

        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("admin-analytics"), {"period": "7d"})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        data = response.data["data"]
        self.assertEqual(data["period"], "7d")
        self.assertEqual(data["users"]["total"], 4)
        self.assertEqual(data["users"]["by_role"]["OWNER"], 1)
        self.assertEqual(data["properties"]["live"], 1)
        self.assertEqual(data["bookings"]["confirmed"], 1)
        self.assertEqual(data["revenue"]["total"], Decimal("160.00"))

        response = self.client.get(reverse("admin-analytics"), {"period": "5y"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class HealthAPITests(APITestCase):
    def test_public_health(self) -> None:
        response = self.client.get(reverse("health"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["status"], "healthy")
        self.assertEqual(response.data["data"]["services"]["database"], "connected")

    @override_settings(S3_ACCESS_KEY="")
    def test_degraded_without_storage_credentials(self) -> None:
        response = self.client.get(reverse("health"))
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["data"]["services"]["object_storage"], "not_configured")

    def test_database_failure_is_reported(self) -> None:
        with mock.patch("apps.adminpanel.services.connection") as connection:
            connection.cursor.side_effect = RuntimeError("db down")
            response = self.client.get(reverse("health"))
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["data"]["services"]["database"], "disconnected")

    def test_admin_health_requires_admin(self) -> None:
        guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.client.force_authenticate(guest)
        self.assertEqual(self.client.get(reverse("admin-health")).status_code, status.HTTP_403_FORBIDDEN)
