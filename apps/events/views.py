"""Public event listing; writes are reserved for super admins."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters  # type: ignore

from apps.users.permissions import IsSuperAdminOrReadOnly
from shared.api.views import EnvelopeModelViewSet

from .filters import EventFilterSet
from .models import Event
from .serializers import EventSerializer

logger = logging.getLogger(__name__)


class EventViewSet(EnvelopeModelViewSet):
    serializer_class = EventSerializer
    permission_classes = [IsSuperAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = EventFilterSet
    ordering_fields = ["start_datetime", "created_at", "title"]
    ordering = ["start_datetime"]
    envelope_messages = {
        "list": "Events retrieved successfully",
        "retrieve": "Event retrieved successfully",
        "create": "Event created successfully",
        "update": "Event updated successfully",
        "partial_update": "Event updated successfully",
        "destroy": "Event deleted successfully",
    }

    def get_queryset(self):  # type: ignore
        queryset = Event.objects.select_related("created_by")
        user = self.request.user
        # скрытые события видит только супер-админ
        if not (user.is_authenticated and user.is_super_admin()):
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_create(self, serializer):  # type: ignore
        event = serializer.save(created_by=self.request.user)
        logger.info("Event %s created by user %s", event.pk, self.request.user.pk)
