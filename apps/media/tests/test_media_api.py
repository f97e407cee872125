"""Media API tests; object storage is replaced with a mock or a botocore stub."""

from __future__ import annotations

from datetime import timedelta
from unittest import mock

import boto3
from botocore.stub import Stubber
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.media import services
from apps.media.models import UploadToken
from apps.media.storage import ObjectStorage
from apps.users.models import User
from shared.domain.errors import UpstreamError


class MediaAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="host@example.com", password="HostPass123", role=User.Role.OWNER)
        self.other = User.objects.create_user(email="other@example.com", password="OtherPass123")
        self.admin = User.objects.create_user(
            email="admin@example.com", password="AdminPass123", role=User.Role.ADMIN
        )
        self.storage = mock.Mock()
        self.storage.bucket_name = "test-bucket"
        self.storage.url.side_effect = lambda key: f"http://minio.test:9000/test-bucket/{key}"
        self.storage.presigned_get_url.side_effect = lambda key, expires_in: f"http://signed/{key}?ttl={expires_in}"
        patcher = mock.patch("apps.media.services.get_object_storage", return_value=self.storage)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_presigned_url_issues_token_under_user_prefix(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.post(
            reverse("media-presigned-url"),
            {"file_name": "Living room.JPG", "file_type": "image/jpeg"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        data = response.data["data"]
        self.assertTrue(data["key"].startswith(f"uploads/{self.user.pk}/properties/"))
        self.assertTrue(data["key"].endswith("_Living_room.jpg"))
        self.assertIn(f"/api/media/upload/{data['token']}/", data["upload_url"])

    def test_presigned_url_rejects_unsupported_type(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.post(
            reverse("media-presigned-url"),
            {"file_name": "notes.pdf", "file_type": "application/pdf"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])

    def test_presigned_url_requires_authentication(self) -> None:
        response = self.client.post(
            reverse("media-presigned-url"), {"file_name": "a.jpg", "file_type": "image/jpeg"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_token_upload_is_single_use(self) -> None:
        upload = services.create_upload_token(self.user, file_name="a.png", content_type="image/png")
        url = reverse("media-token-upload", kwargs={"token": upload.token})

        response = self.client.put(url, data=b"\x89PNG-bytes", content_type="image/png")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["data"]["key"], upload.key)
        self.storage.put.assert_called_once_with(upload.key, b"\x89PNG-bytes", "image/png")

        again = self.client.put(url, data=b"\x89PNG-bytes", content_type="image/png")
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(again.data["message"], "Invalid or expired upload URL")

    def test_expired_token_is_rejected(self) -> None:
        upload = services.create_upload_token(self.user, file_name="a.png", content_type="image/png")
        UploadToken.objects.filter(pk=upload.pk).update(expires_at=timezone.now() - timedelta(seconds=1))
        response = self.client.put(
            reverse("media-token-upload", kwargs={"token": upload.token}), data=b"data", content_type="image/png"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.storage.put.assert_not_called()

    def test_direct_upload(self) -> None:
        self.client.force_authenticate(self.user)
        photo = SimpleUploadedFile("room.jpg", b"jpeg-bytes", content_type="image/jpeg")
        response = self.client.post(reverse("media-upload"), {"file": photo}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        data = response.data["data"]
        self.assertEqual(data["original_name"], "room.jpg")
        self.assertEqual(data["size"], len(b"jpeg-bytes"))
        self.assertEqual(data["url"], f"http://minio.test:9000/test-bucket/{data['key']}")

    def test_direct_upload_without_file(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.post(reverse("media-upload"), {}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(MEDIA_MAX_UPLOAD_SIZE=4)
    def test_direct_upload_too_large(self) -> None:
        self.client.force_authenticate(self.user)
        photo = SimpleUploadedFile("room.jpg", b"12345", content_type="image/jpeg")
        response = self.client.post(reverse("media-upload"), {"file": photo}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("File too large", response.data["message"])

    def test_upload_multiple_reports_failures_per_file(self) -> None:
        self.client.force_authenticate(self.user)
        files = [
            SimpleUploadedFile("a.jpg", b"aaa", content_type="image/jpeg"),
            SimpleUploadedFile("b.txt", b"bbb", content_type="text/plain"),
        ]
        response = self.client.post(reverse("media-upload-multiple"), {"files": files}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        results = response.data["data"]
        self.assertEqual(len(results), 2)
        self.assertIn("key", results[0])
        self.assertEqual(results[1]["original_name"], "b.txt")
        self.assertIn("error", results[1])
        self.assertEqual(self.storage.put.call_count, 1)

    @override_settings(MEDIA_MAX_FILES_PER_REQUEST=1)
    def test_upload_multiple_enforces_file_limit(self) -> None:
        self.client.force_authenticate(self.user)
        files = [SimpleUploadedFile(f"{name}.jpg", b"x", content_type="image/jpeg") for name in "ab"]
        response = self.client.post(reverse("media-upload-multiple"), {"files": files}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.storage.put.assert_not_called()

    def test_delete_only_own_keys(self) -> None:
        own_key = f"uploads/{self.user.pk}/properties/abc_room.jpg"
        foreign_key = f"uploads/{self.other.pk}/properties/abc_room.jpg"

        self.client.force_authenticate(self.user)
        response = self.client.delete(reverse("media-delete", kwargs={"key": own_key}))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.storage.delete.assert_called_once_with(own_key)

        response = self.client.delete(reverse("media-delete", kwargs={"key": foreign_key}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.delete(reverse("media-delete", kwargs={"key": foreign_key}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_view_url_uses_requested_ttl(self) -> None:
        key = f"uploads/{self.user.pk}/properties/abc_room.jpg"
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("media-view", kwargs={"key": key}), {"expires_in": 120})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["data"]["view_url"], f"http://signed/{key}?ttl=120")
        self.assertEqual(response.data["data"]["expires_in"], 120)

    def test_file_info_missing_object(self) -> None:
        self.storage.head.return_value = None
        key = f"uploads/{self.user.pk}/properties/missing.jpg"
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("media-info", kwargs={"key": key}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_file_info(self) -> None:
        self.storage.head.return_value = {"size": 10, "content_type": "image/jpeg", "last_modified": None, "etag": "e"}
        key = f"uploads/{self.user.pk}/properties/room.jpg"
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("media-info", kwargs={"key": key}))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["data"]["size"], 10)
        self.assertEqual(response.data["data"]["bucket"], "test-bucket")

    def test_storage_outage_maps_to_bad_gateway(self) -> None:
        self.storage.delete.side_effect = UpstreamError("Object storage is unavailable")
        self.client.force_authenticate(self.user)
        response = self.client.delete(
            reverse("media-delete", kwargs={"key": f"uploads/{self.user.pk}/properties/a.jpg"})
        )
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)


class ObjectStorageTests(SimpleTestCase):
    def setUp(self) -> None:
        client = boto3.client(
            "s3",
            region_name="us-east-1",
            aws_access_key_id="test",
            aws_secret_access_key="test",
            endpoint_url="http://minio.test:9000",
        )
        self.stubber = Stubber(client)
        self.stubber.activate()
        self.addCleanup(self.stubber.deactivate)
        self.storage = ObjectStorage(client, "test-bucket", endpoint_url="http://minio.test:9000")

    def test_put_sends_content_type(self) -> None:
        client = mock.Mock()
        storage = ObjectStorage(client, "test-bucket")
        self.assertEqual(storage.put("uploads/1/a.jpg", b"data", "image/jpeg"), "uploads/1/a.jpg")
        client.put_object.assert_called_once_with(
            Bucket="test-bucket",
            Key="uploads/1/a.jpg",
            Body=b"data",
            ContentType="image/jpeg",
            CacheControl="max-age=31536000",
        )

    def test_head_returns_none_for_missing_object(self) -> None:
        self.stubber.add_client_error("head_object", service_error_code="404", http_status_code=404)
        self.assertIsNone(self.storage.head("uploads/1/missing.jpg"))

    def test_client_error_becomes_upstream_error(self) -> None:
        self.stubber.add_client_error("delete_object", service_error_code="InternalError", http_status_code=500)
        with self.assertRaises(UpstreamError):
            self.storage.delete("uploads/1/a.jpg")

    def test_url_prefers_public_base(self) -> None:
        self.assertEqual(self.storage.url("uploads/1/a.jpg"), "http://minio.test:9000/test-bucket/uploads/1/a.jpg")
        self.storage.public_base = "https://cdn.example.com"
        self.assertEqual(self.storage.url("/uploads/1/a.jpg"), "https://cdn.example.com/uploads/1/a.jpg")
