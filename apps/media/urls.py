"""URL declarations for the media app."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    FileDeleteView,
    FileInfoView,
    FileViewUrlView,
    PresignedUrlView,
    TokenUploadView,
    UploadMultipleView,
    UploadView,
)

urlpatterns = [
    path("presigned-url/", PresignedUrlView.as_view(), name="media-presigned-url"),
    path("upload/<str:token>/", TokenUploadView.as_view(), name="media-token-upload"),
    path("upload/", UploadView.as_view(), name="media-upload"),
    path("upload-multiple/", UploadMultipleView.as_view(), name="media-upload-multiple"),
    path("view/<path:key>", FileViewUrlView.as_view(), name="media-view"),
    path("info/<path:key>", FileInfoView.as_view(), name="media-info"),
    path("<path:key>", FileDeleteView.as_view(), name="media-delete"),
]
