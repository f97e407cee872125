"""Upload flows: tokenised upload links, direct uploads, view URLs.

Ключи объектов пользователя лежат под ``uploads/<user_id>/``; удалять и
смотреть чужие ключи может только администратор.
"""

from __future__ import annotations

import logging
import os
import uuid
from datetime import timedelta
from typing import Any, Iterable

from django.conf import settings  # type: ignore
from django.core.exceptions import SuspiciousFileOperation  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.text import get_valid_filename  # type: ignore

from shared.domain.errors import DomainError, DomainValidationError, ForbiddenError, NotFoundError

from .apps import get_object_storage
from .models import UploadToken

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "properties"


def validate_content_type(content_type: str | None) -> str:
    content_type = (content_type or "").split(";")[0].strip().lower()
    if content_type not in settings.MEDIA_ALLOWED_CONTENT_TYPES:
        raise DomainValidationError(
            "Invalid file type. Only images and videos are allowed.",
            errors={"content_type": [f"Unsupported content type: {content_type or 'unknown'}"]},
        )
    return content_type


def validate_size(size: int) -> None:
    if size <= 0:
        raise DomainValidationError("File is empty")
    if size > settings.MEDIA_MAX_UPLOAD_SIZE:
        limit_mb = settings.MEDIA_MAX_UPLOAD_SIZE // (1024 * 1024)
        raise DomainValidationError(f"File too large. Maximum size is {limit_mb}MB")


def user_prefix(user) -> str:
    return f"uploads/{user.pk}/"


def _safe_segment(value: str, fallback: str) -> str:
    try:
        return get_valid_filename(value)[:80]
    except SuspiciousFileOperation:
        return fallback


def build_key(user, file_name: str, folder: str = DEFAULT_FOLDER) -> str:
    """uploads/<user_id>/<folder>/<uuid12>_<имя файла>."""

    folder = _safe_segment(folder or DEFAULT_FOLDER, DEFAULT_FOLDER)
    base, ext = os.path.splitext(os.path.basename(file_name or "file"))
    safe_name = _safe_segment(base, "file")
    ext = _safe_segment(ext, "").lower()
    return f"{user_prefix(user)}{folder}/{uuid.uuid4().hex[:12]}_{safe_name}{ext}"


def ensure_key_access(user, key: str) -> None:
    if not key or ".." in key.split("/"):
        raise DomainValidationError("File key is required")
    if user.is_admin():
        return
    if not key.startswith(user_prefix(user)):
        raise ForbiddenError("You can only access your own files")


def create_upload_token(user, *, file_name: str, content_type: str, folder: str = DEFAULT_FOLDER) -> UploadToken:
    content_type = validate_content_type(content_type)
    return UploadToken.objects.create(
        user=user,
        key=build_key(user, file_name, folder),
        content_type=content_type,
        expires_at=timezone.now() + timedelta(seconds=settings.MEDIA_PRESIGNED_TTL_SECONDS),
    )


def consume_upload_token(token: str, body: bytes, content_type: str | None = None) -> dict[str, Any]:
    """Загрузка по одноразовой ссылке: токен должен быть не использован и не истёк."""

    with transaction.atomic():
        upload = UploadToken.objects.select_for_update().filter(token=token).first()
        if upload is None or not upload.is_usable():
            raise DomainValidationError("Invalid or expired upload URL")
        validate_size(len(body))
        content_type = validate_content_type(content_type or upload.content_type)
        storage = get_object_storage()
        storage.put(upload.key, body, content_type)
        upload.used_at = timezone.now()
        upload.save(update_fields=["used_at"])
    return {"key": upload.key, "url": storage.url(upload.key), "content_type": content_type, "size": len(body)}


def upload_file(user, uploaded_file, folder: str = DEFAULT_FOLDER) -> dict[str, Any]:
    content_type = validate_content_type(getattr(uploaded_file, "content_type", None))
    validate_size(uploaded_file.size)
    key = build_key(user, uploaded_file.name, folder)
    storage = get_object_storage()
    storage.put(key, uploaded_file.read(), content_type)
    return {
        "key": key,
        "url": storage.url(key),
        "original_name": uploaded_file.name,
        "content_type": content_type,
        "size": uploaded_file.size,
    }


def upload_files(user, files: Iterable, folder: str = DEFAULT_FOLDER) -> list[dict[str, Any]]:
    """Каждый файл загружается независимо; ошибка одного не отменяет остальные."""

    files = list(files)
    if not files:
        raise DomainValidationError("No files provided")
    if len(files) > settings.MEDIA_MAX_FILES_PER_REQUEST:
        raise DomainValidationError(
            f"Maximum {settings.MEDIA_MAX_FILES_PER_REQUEST} files allowed per upload"
        )

    results = []
    for uploaded_file in files:
        try:
            results.append(upload_file(user, uploaded_file, folder))
        except DomainError as exc:
            logger.warning("Failed to upload file %s: %s", uploaded_file.name, exc.message)
            results.append({"original_name": uploaded_file.name, "error": exc.message})
    return results


def delete_file(user, key: str) -> None:
    ensure_key_access(user, key)
    get_object_storage().delete(key)


def view_url(user, key: str, expires_in: int | None = None) -> dict[str, Any]:
    ensure_key_access(user, key)
    expires_in = expires_in or settings.MEDIA_PRESIGNED_TTL_SECONDS
    return {"key": key, "view_url": get_object_storage().presigned_get_url(key, expires_in), "expires_in": expires_in}


def file_info(user, key: str) -> dict[str, Any]:
    ensure_key_access(user, key)
    storage = get_object_storage()
    meta = storage.head(key)
    if meta is None:
        raise NotFoundError("File not found")
    return {
        "key": key,
        "url": storage.presigned_get_url(key, settings.MEDIA_PRESIGNED_TTL_SECONDS),
        "bucket": storage.bucket_name,
        "region": settings.S3_REGION,
        **meta,
    }
