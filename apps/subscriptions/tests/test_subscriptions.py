"""Subscription lifecycle and listing entitlement tests."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.properties.models import Property
from apps.subscriptions import services
from apps.subscriptions.models import Subscription, SubscriptionPlan
from apps.users.models import User
from shared.domain.errors import ConflictError, InvalidStateError, NotFoundError


def make_plan(**overrides) -> SubscriptionPlan:
    defaults = {
        "name": "Basic",
        "type": "basic",
        "price": Decimal("19.99"),
        "duration_days": 30,
        "max_properties": 2,
        "features": {"support": "email"},
    }
    defaults.update(overrides)
    return SubscriptionPlan.objects.create(**defaults)


def make_property(owner, status=Property.Status.LIVE, **overrides) -> Property:
    defaults = {
        "owner": owner,
        "title": "Sea view flat",
        "description": "Two rooms near the beach",
        "location": "Old town",
        "city": "Barcelona",
        "country": "Spain",
        "address": "Carrer 1",
        "price": Decimal("50.00"),
        "max_guests": 4,
        "status": status,
    }
    defaults.update(overrides)
    return Property.objects.create(**defaults)


class SubscriptionServiceTests(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="owner@example.com", password="OwnerPass123", role=User.Role.OWNER
        )
        self.plan = make_plan()

    def test_create_snapshots_plan(self) -> None:
        now = timezone.now()
        subscription = services.create_subscription(self.owner, self.plan.pk, paid=True, now=now)
        self.assertEqual(subscription.type, "basic")
        self.assertEqual(subscription.max_properties, 2)
        self.assertEqual(subscription.features, {"support": "email"})
        self.assertEqual(subscription.expires_at, now + timedelta(days=30))

        self.plan.max_properties = 10
        self.plan.save()
        subscription.refresh_from_db()
        self.assertEqual(subscription.max_properties, 2)

    def test_create_rejects_missing_inactive_and_duplicate(self) -> None:
        with self.assertRaises(NotFoundError):
            services.create_subscription(self.owner, 9999)

        inactive = make_plan(type="legacy", is_active=False)
        with self.assertRaises(InvalidStateError):
            services.create_subscription(self.owner, inactive.pk)

        services.create_subscription(self.owner, self.plan.pk)
        with self.assertRaises(ConflictError):
            services.create_subscription(self.owner, self.plan.pk)
        self.assertEqual(Subscription.objects.filter(owner=self.owner, is_active=True).count(), 1)

    def test_entitlement_counts_pending_and_live(self) -> None:
        entitlement = services.can_list_property(self.owner)
        self.assertFalse(entitlement.allowed)
        self.assertEqual(entitlement.reason, "No active subscription")

        services.create_subscription(self.owner, self.plan.pk, paid=True)
        self.assertEqual(services.can_list_property(self.owner).remaining, 2)

        make_property(self.owner, status=Property.Status.PENDING)
        make_property(self.owner, status=Property.Status.REJECTED, title="Rejected")
        entitlement = services.can_list_property(self.owner)
        self.assertTrue(entitlement.allowed)
        self.assertEqual(entitlement.remaining, 1)

        make_property(self.owner, title="Second")
        entitlement = services.can_list_property(self.owner)
        self.assertFalse(entitlement.allowed)
        self.assertEqual(entitlement.reason, "Maximum properties (2) reached")

    def test_unpaid_or_expired_subscription_does_not_entitle(self) -> None:
        subscription = services.create_subscription(self.owner, self.plan.pk, paid=False)
        self.assertFalse(services.can_list_property(self.owner).allowed)

        subscription.paid = True
        subscription.save()
        later = timezone.now() + timedelta(days=31)
        self.assertFalse(services.can_list_property(self.owner, now=later).allowed)

    def test_change_plan_cancels_current(self) -> None:
        current = services.create_subscription(self.owner, self.plan.pk)
        premium = make_plan(name="Premium", type="premium", max_properties=10)

        new = services.change_subscription_plan(self.owner, premium.pk)
        current.refresh_from_db()
        self.assertFalse(current.is_active)
        self.assertIsNotNone(current.cancelled_at)
        self.assertEqual(new.type, "premium")

    def test_change_to_missing_plan_keeps_current(self) -> None:
        current = services.create_subscription(self.owner, self.plan.pk)
        with self.assertRaises(NotFoundError):
            services.change_subscription_plan(self.owner, 9999)
        current.refresh_from_db()
        self.assertTrue(current.is_active)

    def test_cancel_is_repeatable(self) -> None:
        subscription = services.create_subscription(self.owner, self.plan.pk)
        services.cancel_subscription(subscription.pk)
        again = services.cancel_subscription(subscription.pk)
        self.assertFalse(again.is_active)
        with self.assertRaises(NotFoundError):
            services.cancel_subscription(9999)

    def test_check_expired_subscriptions(self) -> None:
        subscription = services.create_subscription(self.owner, self.plan.pk, paid=True)
        self.assertEqual(services.check_expired_subscriptions(), 0)

        count = services.check_expired_subscriptions(now=subscription.expires_at + timedelta(seconds=1))
        self.assertEqual(count, 1)
        subscription.refresh_from_db()
        self.assertFalse(subscription.is_active)


class SubscriptionAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="owner@example.com", password="OwnerPass123", role=User.Role.OWNER
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.plan = make_plan()
        make_plan(name="Hidden", type="hidden", is_active=False)

    def test_plans_are_public(self) -> None:
        response = self.client.get(reverse("subscription-plans"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p["type"] for p in response.data["data"]], ["basic"])

    def test_only_owner_role_subscribes(self) -> None:
        self.client.force_authenticate(self.guest)
        response = self.client.post(reverse("subscription-create"), {"plan_id": self.plan.pk}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.owner)
        response = self.client.post(reverse("subscription-create"), {"plan_id": self.plan.pk}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertFalse(response.data["data"]["paid"])

        duplicate = self.client.post(reverse("subscription-create"), {"plan_id": self.plan.pk}, format="json")
        self.assertEqual(duplicate.status_code, status.HTTP_409_CONFLICT)

    def test_usage_and_cancel(self) -> None:
        self.client.force_authenticate(self.owner)
        missing = self.client.get(reverse("subscription-usage"))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

        subscription = services.create_subscription(self.owner, self.plan.pk, paid=True)
        make_property(self.owner)
        usage = self.client.get(reverse("subscription-usage"))
        self.assertEqual(usage.status_code, status.HTTP_200_OK, usage.data)
        self.assertEqual(usage.data["data"]["property_count"], 1)
        self.assertEqual(usage.data["data"]["usage_percentage"], 50)

        response = self.client.delete(reverse("subscription-detail", args=[subscription.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["data"]["is_active"])

        current = self.client.get(reverse("subscription-user"))
        self.assertEqual(current.status_code, status.HTTP_200_OK)
        self.assertNotIn("data", current.data)

    def test_change_plan_endpoint(self) -> None:
        premium = make_plan(name="Premium", type="premium", max_properties=5)
        subscription = services.create_subscription(self.owner, self.plan.pk)
        self.client.force_authenticate(self.owner)

        response = self.client.put(
            reverse("subscription-detail", args=[subscription.pk]),
            {"plan_id": premium.pk},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["data"]["type"], "premium")
