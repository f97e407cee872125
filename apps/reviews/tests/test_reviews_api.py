"""Review API tests: uniqueness, verification and rating aggregates."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.properties.models import Property
from apps.reviews.models import Review
from apps.users.models import User


class ReviewAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="owner@example.com", password="OwnerPass123", role=User.Role.OWNER
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.other_guest = User.objects.create_user(email="other@example.com", password="OtherPass123")
        self.admin = User.objects.create_user(
            email="admin@example.com", password="AdminPass123", role=User.Role.ADMIN
        )
        self.property = Property.objects.create(
            owner=self.owner,
            title="Sea view flat",
            description="Two rooms near the beach",
            location="Old town",
            city="Barcelona",
            country="Spain",
            address="Carrer de la Mar 1",
            price=Decimal("50.00"),
            max_guests=4,
            status=Property.Status.LIVE,
        )
        self.url = reverse("review-property-reviews", kwargs={"property_id": self.property.pk})

    def _post(self, user, **payload):
        self.client.force_authenticate(user)
        body = {"rating": 5, "comment": "Lovely place, great host!"}
        body.update(payload)
        return self.client.post(self.url, body, format="json")

    def test_create_updates_property_rating(self) -> None:
        response = self._post(self.guest, rating=5)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertFalse(response.data["data"]["is_verified"])

        self._post(self.other_guest, rating=2)
        self.property.refresh_from_db()
        self.assertEqual(self.property.review_count, 2)
        self.assertEqual(self.property.average_rating, Decimal("3.50"))

    def test_one_review_per_user_and_property(self) -> None:
        self._post(self.guest)
        response = self._post(self.guest, rating=1)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["message"], "You have already reviewed this property")

    def test_completed_booking_marks_review_verified(self) -> None:
        start = timezone.now() - timedelta(days=10)
        booking = Booking.objects.create(
            user=self.guest,
            property=self.property,
            start_date=start,
            end_date=start + timedelta(days=3),
            status=Booking.Status.COMPLETED,
        )
        response = self._post(self.guest, booking_id=booking.pk)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["data"]["is_verified"])
        self.assertEqual(response.data["data"]["booking_id"], booking.pk)

    def test_validation_and_state_errors(self) -> None:
        response = self._post(self.guest, rating=6, comment="short")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("rating", response.data["errors"])
        self.assertIn("comment", response.data["errors"])

        self.property.status = Property.Status.SUSPENDED
        self.property.save()
        response = self._post(self.guest)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["errors"]["code"], "invalid_state")

        self.client.force_authenticate(None)
        response = self.client.post(self.url, {"rating": 4, "comment": "Anonymous review"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_for_property_with_summary(self) -> None:
        self._post(self.guest, rating=5)
        self._post(self.other_guest, rating=3)
        self.client.force_authenticate(None)

        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        data = response.data["data"]
        self.assertEqual(len(data["items"]), 2)
        self.assertEqual(data["summary"]["total_reviews"], 2)
        self.assertEqual(data["summary"]["average_rating"], 4.0)
        self.assertEqual(data["summary"]["rating_distribution"]["5"], 1)

        response = self.client.get(self.url, {"rating": 3})
        self.assertEqual(len(response.data["data"]["items"]), 1)

        missing = reverse("review-property-reviews", kwargs={"property_id": 999999})
        self.assertEqual(self.client.get(missing).status_code, status.HTTP_404_NOT_FOUND)

    def test_author_edits_and_deletes(self) -> None:
        review_id = self._post(self.guest, rating=4).data["data"]["id"]
        url = reverse("review-detail", args=[review_id])

        self.client.force_authenticate(self.other_guest)
        self.assertEqual(self.client.patch(url, {"rating": 1}, format="json").status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.guest)
        response = self.client.patch(url, {"rating": 2}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.property.refresh_from_db()
        self.assertEqual(self.property.average_rating, Decimal("2.00"))

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Review.objects.filter(pk=review_id).exists())
        self.property.refresh_from_db()
        self.assertEqual(self.property.review_count, 0)

    def test_user_owner_and_admin_endpoints(self) -> None:
        review_id = self._post(self.guest).data["data"]["id"]

        response = self.client.get(reverse("review-user-list"))
        self.assertEqual(response.data["data"]["pagination"]["totalItems"], 1)

        self.assertEqual(self.client.get(reverse("review-owner-list")).status_code, status.HTTP_403_FORBIDDEN)
        self.client.force_authenticate(self.owner)
        response = self.client.get(reverse("review-owner-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["items"][0]["id"], review_id)

        url = reverse("review-admin-response", args=[review_id])
        self.assertEqual(
            self.client.put(url, {"admin_response": "Thank you!"}, format="json").status_code,
            status.HTTP_403_FORBIDDEN,
        )
        self.client.force_authenticate(self.admin)
        response = self.client.put(url, {"admin_response": "  Thank you!  "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["data"]["admin_response"], "Thank you!")
        self.assertIsNotNone(response.data["data"]["admin_response_at"])
