"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import PHONE_VALIDATOR

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Основной сериализатор пользователя."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "phone",
            "avatar",
            "role",
            "is_active",
            "is_email_verified",
            "last_login",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Пользователь может менять только контактные данные."""

    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)

    class Meta:
        model = User
        fields = ["username", "first_name", "last_name", "phone", "avatar"]
        extra_kwargs = {
            "username": {"required": False},
            "first_name": {"required": False, "max_length": 50},
            "last_name": {"required": False, "max_length": 50},
            "avatar": {"required": False},
        }

    def validate_phone(self, value):  # type: ignore
        if not value:
            return None
        value = User.objects.normalize_phone(value)
        PHONE_VALIDATOR(value)
        return value


class AdminUserSerializer(serializers.ModelSerializer):
    """Редактирование пользователя администратором."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "phone",
            "avatar",
            "role",
            "is_active",
            "is_email_verified",
            "failed_login_attempts",
            "locked_until",
            "last_login",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "email", "failed_login_attempts", "last_login", "created_at", "updated_at"]

    def validate_role(self, value: str) -> str:
        request = self.context.get("request")
        actor = getattr(request, "user", None)
        if value in User.ADMIN_ROLES and not (actor and actor.is_super_admin()):
            raise serializers.ValidationError("Only a super admin can grant admin roles.")
        return value
