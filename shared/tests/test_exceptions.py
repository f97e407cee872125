from __future__ import annotations

from django.db import IntegrityError
from django.http import Http404
from django.test import SimpleTestCase
from rest_framework import exceptions

from shared.api.exceptions import envelope_exception_handler
from shared.domain.errors import ConflictError, DomainValidationError, UpstreamError


class EnvelopeExceptionHandlerTests(SimpleTestCase):
    context = {"view": None}

    def test_domain_errors_keep_status_and_code(self) -> None:
        response = envelope_exception_handler(
            DomainValidationError("Bad dates", errors={"end_date": ["Must be after start_date"]}),
            self.context,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "Bad dates")
        self.assertEqual(response.data["errors"]["code"], "validation_error")
        self.assertIn("end_date", response.data["errors"]["details"])

        self.assertEqual(envelope_exception_handler(ConflictError("Taken"), self.context).status_code, 409)
        self.assertEqual(envelope_exception_handler(UpstreamError("Down"), self.context).status_code, 502)

    def test_serializer_errors_are_exposed_per_field(self) -> None:
        response = envelope_exception_handler(exceptions.ValidationError({"email": ["Required"]}), self.context)
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["message"], "Validation failed")
        self.assertEqual(response.data["errors"], {"email": ["Required"]})

    def test_integrity_error_is_conflict(self) -> None:
        response = envelope_exception_handler(IntegrityError("duplicate key"), self.context)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["errors"]["code"], "conflict")

    def test_not_found_and_authentication(self) -> None:
        self.assertEqual(envelope_exception_handler(Http404(), self.context).status_code, 404)
        response = envelope_exception_handler(exceptions.NotAuthenticated(), self.context)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["statusCode"], 401)

    def test_unexpected_error_is_internal(self) -> None:
        with self.assertLogs("shared.api.exceptions", level="ERROR"):
            response = envelope_exception_handler(RuntimeError("boom"), self.context)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["errors"]["code"], "internal_error")
