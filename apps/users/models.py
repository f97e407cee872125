"""User domain models for Holiday Rentals.

Платформа различает пять ролей: гость (USER), владелец (OWNER), агент
(AGENT), администратор (ADMIN) и супер-администратор (SUPER_ADMIN).
Владельцы и агенты считаются хостами и могут публиковать объекты,
администраторы модерируют каталог и управляют тарифами.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Invalid phone format. Use the international format without spaces."),
)

LOGIN_LOCK_THRESHOLD = 5
LOGIN_LOCK_MINUTES = 15


class CustomUserManager(BaseUserManager):
    """Менеджер пользователей, использующий email в качестве логина."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email).lower()

        phone = extra_fields.get("phone")
        if phone:
            extra_fields["phone"] = self.normalize_phone(phone)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.Role.USER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_email_verified", True)
        extra_fields.setdefault("role", CustomUser.Role.SUPER_ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Удаляем пробелы и дефисы для унификации хранения телефона."""
        return phone.replace(" ", "").replace("-", "")


class CustomUser(AbstractUser):
    """Пользователь платформы с ролью и атрибутами безопасности входа."""

    class Role(models.TextChoices):
        SUPER_ADMIN = "SUPER_ADMIN", _("Super admin")
        ADMIN = "ADMIN", _("Admin")
        AGENT = "AGENT", _("Agent")
        OWNER = "OWNER", _("Owner")
        USER = "USER", _("User")

    HOST_ROLES = (Role.OWNER, Role.AGENT)
    ADMIN_ROLES = (Role.ADMIN, Role.SUPER_ADMIN)
    SELF_SIGNUP_ROLES = (Role.USER, Role.OWNER, Role.AGENT)

    username = models.CharField(
        _("Display name"),
        max_length=150,
        blank=True,
        help_text=_("Optional, shown in listings and notifications."),
    )
    email = models.EmailField(_("Email"), unique=True)
    phone = models.CharField(
        _("Phone"),
        max_length=20,
        null=True,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    avatar = models.URLField(_("Avatar URL"), max_length=500, blank=True)
    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
    )
    is_email_verified = models.BooleanField(_("Email verified"), default=False)
    failed_login_attempts = models.PositiveIntegerField(default=0)
    locked_until = models.DateTimeField(_("Locked until"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"

    @property
    def full_name(self) -> str:
        return self.get_full_name() or self.username or self.email

    # --- Доменные помощники -------------------------------------------------
    def is_admin(self) -> bool:
        return self.role in self.ADMIN_ROLES or self.is_superuser

    def is_super_admin(self) -> bool:
        return self.role == self.Role.SUPER_ADMIN or self.is_superuser

    def is_host(self) -> bool:
        return self.role in self.HOST_ROLES

    def is_owner(self) -> bool:
        return self.role == self.Role.OWNER

    def is_agent(self) -> bool:
        return self.role == self.Role.AGENT

    def mark_email_verified(self) -> None:
        self.is_email_verified = True
        self.save(update_fields=["is_email_verified", "updated_at"])

    @property
    def is_locked(self) -> bool:
        return bool(self.locked_until and self.locked_until > timezone.now())

    def lock(self, minutes: int = LOGIN_LOCK_MINUTES) -> None:
        self.locked_until = timezone.now() + timezone.timedelta(minutes=minutes)
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def unlock(self) -> None:
        self.locked_until = None
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def register_failed_attempt(self, threshold: int = LOGIN_LOCK_THRESHOLD) -> None:
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= threshold:
            self.lock()
            return
        self.save(update_fields=["failed_login_attempts"])


User = CustomUser
