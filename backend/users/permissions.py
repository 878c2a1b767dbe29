from rest_framework import permissions
from .models import User


def _has_role(user, *roles):
    return bool(user and user.is_authenticated and (user.role in roles or user.is_superuser))


class IsAgent(permissions.BasePermission):
    message = "Only delivery agents can perform this action."

    def has_permission(self, request, view):
        return _has_role(request.user, User.Role.AGENT)


class IsAdminRole(permissions.BasePermission):
    message = "Admin access required."

    def has_permission(self, request, view):
        return _has_role(request.user, User.Role.ADMIN)


class IsOwnerOrAdmin(permissions.BasePermission):
    """Restaurant owners and admins (order board, nearby-agent search)."""

    message = "Restaurant owner or admin access required."

    def has_permission(self, request, view):
        return _has_role(request.user, User.Role.OWNER, User.Role.ADMIN)


class IsCustomerOrAdmin(permissions.BasePermission):
    def has_permission(self, request, view):
        return _has_role(request.user, User.Role.CUSTOMER, User.Role.ADMIN)
