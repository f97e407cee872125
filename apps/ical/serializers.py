"""Request/response serializers for calendar sync."""

from __future__ import annotations

from django.core.validators import URLValidator
from rest_framework import serializers  # type: ignore


class IcalSyncSerializer(serializers.Serializer):
    """``url`` или ``urls``; поддерживаются только http(s) ссылки."""

    url = serializers.URLField(required=False, validators=[URLValidator(schemes=["http", "https"])])
    urls = serializers.ListField(
        child=serializers.URLField(validators=[URLValidator(schemes=["http", "https"])]),
        required=False,
        allow_empty=True,
        max_length=20,
    )
    force = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):  # type: ignore
        urls = attrs.get("urls") or ([attrs["url"]] if attrs.get("url") else [])
        if not urls:
            raise serializers.ValidationError({"urls": "Provide url or urls"})
        attrs["urls"] = list(dict.fromkeys(urls))
        return attrs


class IcalEventSerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    summary = serializers.CharField(allow_null=True)
    uid = serializers.CharField(allow_null=True)
