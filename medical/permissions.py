"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission

from .identity import STAFF_ROLES


class IsClinicStaff(BasePermission):
    """Allow access only to clinic staff or administrators."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in STAFF_ROLES)
