"""Serializers for authentication flows (signup, login, OTP, password reset)."""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.contrib.auth.password_validation import validate_password  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore
from rest_framework_simplejwt.exceptions import TokenError  # type: ignore
from rest_framework_simplejwt.token_blacklist.models import (  # type: ignore
    BlacklistedToken,
    OutstandingToken,
)
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from shared.domain.errors import (
    ConflictError,
    DomainValidationError,
    ForbiddenError,
    UnauthorizedError,
)

from .models import PHONE_VALIDATOR
from .otp import OtpPurpose, OtpStore

logger = logging.getLogger(__name__)

User = get_user_model()

INVALID_CREDENTIALS = "Invalid email or password"


def tokens_for_user(user) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


def revoke_refresh_tokens(user) -> int:
    """Blacklist every outstanding refresh token of the user."""
    revoked = 0
    for token in OutstandingToken.objects.filter(user=user, expires_at__gt=timezone.now()):
        _, created = BlacklistedToken.objects.get_or_create(token=token)
        revoked += int(created)
    return revoked


def find_user_by_email(email: str):
    return User.objects.filter(email__iexact=email).first()


def _verify_code(store: OtpStore, email: str, purpose: str, code: str) -> None:
    result = store.verify(email, purpose, code)
    if not result.ok:
        raise DomainValidationError(result.message, errors={"reason": result.reason})


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, write_only=True)
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=50)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=50)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[PHONE_VALIDATOR])
    avatar = serializers.URLField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=User.Role.choices, default=User.Role.USER)

    def validate_email(self, value: str) -> str:
        return value.lower()

    def validate_password(self, value: str) -> str:
        validate_password(value)
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs["role"] not in User.SELF_SIGNUP_ROLES:
            raise ForbiddenError("Admin signup is not allowed. Contact super admin.")
        if User.objects.filter(email__iexact=attrs["email"]).exists():
            raise ConflictError("Email already registered")
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        password = validated_data.pop("password")
        if not validated_data.get("phone"):
            validated_data.pop("phone", None)
        return User.objects.create_user(password=password, **validated_data)


class EmailCodeSerializer(serializers.Serializer):
    email = serializers.EmailField()
    code = serializers.RegexField(r"^\d{6}$", error_messages={"invalid": "Code must be 6 digits."})


class VerifyEmailSerializer(EmailCodeSerializer):
    def verify(self, store: OtpStore):
        email = self.validated_data["email"]
        user = find_user_by_email(email)
        if user is None:
            raise DomainValidationError("Invalid code.", errors={"reason": "invalid"})
        _verify_code(store, email, OtpPurpose.SIGNUP, self.validated_data["code"])
        if not user.is_email_verified:
            user.mark_email_verified()
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        user = find_user_by_email(attrs["email"])
        if user is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not user.is_active:
            raise ForbiddenError("Account is deactivated")

        if user.is_locked:
            raise ForbiddenError("Account is temporarily locked. Try again later.")

        if not user.check_password(attrs["password"]):
            user.register_failed_attempt()
            logger.info("Failed login for %s (%s attempts)", user.email, user.failed_login_attempts)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if user.failed_login_attempts or user.locked_until:
            user.unlock()

        attrs["user"] = user
        return attrs


class OtpRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value: str) -> str:
        return value.lower()


class OtpLoginSerializer(EmailCodeSerializer):
    def verify(self, store: OtpStore):
        email = self.validated_data["email"]
        user = find_user_by_email(email)
        if user is None or not user.is_active:
            raise UnauthorizedError("Invalid code")
        if user.is_locked:
            raise ForbiddenError("Account is temporarily locked. Try again later.")
        _verify_code(store, email, OtpPurpose.LOGIN, self.validated_data["code"])
        # владение почтой подтверждено кодом
        if not user.is_email_verified:
            user.mark_email_verified()
        return user


class PasswordResetConfirmSerializer(EmailCodeSerializer):
    new_password = serializers.CharField(min_length=8, write_only=True)

    def validate_new_password(self, value: str) -> str:
        validate_password(value)
        return value

    @transaction.atomic
    def reset(self, store: OtpStore):
        email = self.validated_data["email"]
        user = find_user_by_email(email)
        if user is None:
            raise DomainValidationError("Invalid code.", errors={"reason": "invalid"})
        _verify_code(store, email, OtpPurpose.RESET, self.validated_data["code"])
        user.set_password(self.validated_data["new_password"])
        user.locked_until = None
        user.failed_login_attempts = 0
        user.save(update_fields=["password", "locked_until", "failed_login_attempts", "updated_at"])
        revoke_refresh_tokens(user)
        return user


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(min_length=8, write_only=True)

    def validate_current_password(self, value: str) -> str:
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect")
        return value

    def validate_new_password(self, value: str) -> str:
        validate_password(value, user=self.context["request"].user)
        return value

    def save(self, **kwargs):  # type: ignore
        user = self.context["request"].user
        user.set_password(self.validated_data["new_password"])
        user.save(update_fields=["password", "updated_at"])
        return user


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()

    def save(self, **kwargs):  # type: ignore
        user = self.context["request"].user
        try:
            token = RefreshToken(self.validated_data["refresh"])
        except TokenError as exc:
            raise DomainValidationError("Invalid or expired refresh token") from exc
        if str(token.get("user_id")) != str(user.pk):
            raise ForbiddenError("Refresh token belongs to another user")
        token.blacklist()
