"""S3/MinIO object storage used for property photos and videos."""

from __future__ import annotations

import logging
from typing import Any

import boto3  # type: ignore
from botocore.client import Config as BotoConfig  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
from django.conf import settings  # type: ignore

from shared.domain.errors import UpstreamError

logger = logging.getLogger(__name__)

MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


class ObjectStorage:
    """Тонкая обёртка над boto3-клиентом S3 (поддерживает MinIO)."""

    def __init__(self, client, bucket_name: str, *, public_base: str = "", endpoint_url: str | None = None):
        self.client = client
        self.bucket_name = bucket_name
        self.public_base = (public_base or "").rstrip("/")
        self.endpoint_url = (endpoint_url or "").rstrip("/")

    @classmethod
    def from_settings(cls) -> "ObjectStorage":
        client = boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,  # напр. http://minio:9000
            aws_access_key_id=settings.S3_ACCESS_KEY or None,
            aws_secret_access_key=settings.S3_SECRET_KEY or None,
            region_name=settings.S3_REGION,
            config=BotoConfig(
                signature_version="s3v4",
                s3={"addressing_style": settings.S3_ADDRESSING_STYLE},  # path-style для MinIO
            ),
            use_ssl=settings.S3_USE_SSL,
        )
        return cls(
            client,
            settings.S3_BUCKET_NAME,
            public_base=settings.S3_PUBLIC_BASE,
            endpoint_url=settings.S3_ENDPOINT_URL,
        )

    def _call(self, operation: str, **params: Any):
        try:
            return getattr(self.client, operation)(Bucket=self.bucket_name, **params)
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 %s failed for %s: %s", operation, params.get("Key"), exc)
            raise UpstreamError("Object storage is unavailable") from exc

    def put(self, key: str, body: bytes, content_type: str) -> str:
        self._call(
            "put_object",
            Key=key,
            Body=body,
            ContentType=content_type,
            CacheControl="max-age=31536000",
        )
        logger.info("Uploaded object %s (%s bytes)", key, len(body))
        return key

    def delete(self, key: str) -> None:
        self._call("delete_object", Key=key)
        logger.info("Deleted object %s", key)

    def head(self, key: str) -> dict[str, Any] | None:
        """Метаданные объекта или None, если его нет."""
        try:
            response = self.client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as exc:
            if str(exc.response.get("Error", {}).get("Code")) in MISSING_OBJECT_CODES:
                return None
            logger.error("S3 head_object failed for %s: %s", key, exc)
            raise UpstreamError("Object storage is unavailable") from exc
        except BotoCoreError as exc:
            logger.error("S3 head_object failed for %s: %s", key, exc)
            raise UpstreamError("Object storage is unavailable") from exc
        return {
            "size": response.get("ContentLength"),
            "content_type": response.get("ContentType"),
            "last_modified": response.get("LastModified"),
            "etag": (response.get("ETag") or "").strip('"'),
        }

    def presigned_get_url(self, key: str, expires_in: int) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Cannot presign %s: %s", key, exc)
            raise UpstreamError("Object storage is unavailable") from exc

    def url(self, key: str) -> str:
        """Публичный URL: S3_PUBLIC_BASE, затем endpoint + path-style, затем подпись."""
        key = key.lstrip("/")
        if self.public_base:
            return f"{self.public_base}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket_name}/{key}"
        return self.presigned_get_url(key, settings.MEDIA_PRESIGNED_TTL_SECONDS)
