from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import UploadToken


class PresignedUrlRequestSerializer(serializers.Serializer):
    file_name = serializers.CharField(max_length=255)
    file_type = serializers.CharField(max_length=100)
    folder = serializers.CharField(max_length=50, required=False, default="properties")


class UploadTokenSerializer(serializers.ModelSerializer):
    upload_url = serializers.SerializerMethodField()

    class Meta:
        model = UploadToken
        fields = ["token", "key", "content_type", "expires_at", "upload_url"]
        read_only_fields = fields

    def get_upload_url(self, obj: UploadToken) -> str:
        from django.urls import reverse  # type: ignore

        path = reverse("media-token-upload", kwargs={"token": obj.token})
        request = self.context.get("request")
        return request.build_absolute_uri(path) if request else path


class ViewUrlQuerySerializer(serializers.Serializer):
    expires_in = serializers.IntegerField(min_value=60, max_value=7 * 24 * 3600, required=False)
