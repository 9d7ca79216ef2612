"""Permission classes for the hotel back-office."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_hotel_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return hasattr(user, "is_hotel_admin") and user.is_hotel_admin()


class IsHotelAdmin(permissions.BasePermission):
    """
    Only hotel staff: users with the ``admin`` role, staff or superusers.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_hotel_admin(request.user)


class IsHotelAdminOrReadOnly(permissions.BasePermission):
    """
    Anyone may read, only hotel staff may write.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_hotel_admin(request.user)
