"""Base view helpers shared by all API apps."""

from __future__ import annotations

from rest_framework import status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from .responses import build_envelope, is_envelope


class EnvelopeMixin:
    """Оборачивает успешные ответы DRF в стандартный конверт.

    ``envelope_messages`` позволяет задать сообщение для конкретного action.
    """

    envelope_messages: dict[str, str] = {}

    def finalize_response(self, request, response, *args, **kwargs):  # type: ignore
        if (
            isinstance(response, Response)
            and response.status_code < 400
            and response.status_code != status.HTTP_204_NO_CONTENT
            and not is_envelope(response.data)
        ):
            action = getattr(self, "action", None)
            response.data = build_envelope(
                response.data,
                message=self.envelope_messages.get(action) if action else None,
                status_code=response.status_code,
            )
        return super().finalize_response(request, response, *args, **kwargs)

    def get_paginated_response(self, data):  # type: ignore
        action = getattr(self, "action", None)
        return self.paginator.get_paginated_response(
            data,
            message=self.envelope_messages.get(action) if action else None,
        )


class EnvelopeModelViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    """ModelViewSet whose delete returns an envelope instead of an empty 204."""

    def destroy(self, request, *args, **kwargs):  # type: ignore
        instance = self.get_object()
        self.perform_destroy(instance)
        return Response(
            build_envelope(message=self.envelope_messages.get("destroy", "Deleted successfully")),
            status=status.HTTP_200_OK,
        )
