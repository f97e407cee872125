"""Role based permission classes shared by all API apps."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def _has_role(user, check: str) -> bool:
    if not user or not user.is_authenticated:
        return False
    return bool(getattr(user, check)())


class IsAdmin(permissions.BasePermission):
    """ADMIN или SUPER_ADMIN."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _has_role(request.user, "is_admin")


class IsSuperAdmin(permissions.BasePermission):
    """Only SUPER_ADMIN (or a Django superuser)."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _has_role(request.user, "is_super_admin")


class IsHost(permissions.BasePermission):
    """Хосты: OWNER и AGENT."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _has_role(request.user, "is_host")


class IsHostOrAdmin(permissions.BasePermission):
    def has_permission(self, request, view) -> bool:  # type: ignore
        return _has_role(request.user, "is_host") or _has_role(request.user, "is_admin")


class IsOwnerRole(permissions.BasePermission):
    """Only property owners manage subscriptions."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _has_role(request.user, "is_owner")


class IsSuperAdminOrReadOnly(permissions.BasePermission):
    """
    Allow Super Admins to write, but anyone can read.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return _has_role(request.user, "is_super_admin")
