"""
Common permissions for Journal Desk.

Roles are a fixed capability tag on the user; every check here is a
membership test against one of the closed role sets defined next to the
submission lifecycle.
"""
from rest_framework import permissions

from apps.submissions.lifecycle import ADMIN_CAPABILITY, EDITOR_CAPABILITY


def has_capability(user, capability):
    """True when ``user`` is an active account whose role is in ``capability``."""
    if not user or not user.is_authenticated:
        return False
    if getattr(user, 'account_status', 'ACTIVE') != 'ACTIVE':
        return False
    return user.role in capability


class IsActiveAccount(permissions.BasePermission):
    """
    Only ACTIVE accounts may act on lifecycle operations.
    """
    message = 'Your account is not active.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.account_status == 'ACTIVE')


class IsEditor(permissions.BasePermission):
    """
    Editors and administrators.
    """
    message = 'Editor or administrator role required.'

    def has_permission(self, request, view):
        return has_capability(request.user, EDITOR_CAPABILITY)


class IsAdmin(permissions.BasePermission):
    """
    Administrators only.
    """
    message = 'Administrator role required.'

    def has_permission(self, request, view):
        return has_capability(request.user, ADMIN_CAPABILITY)
