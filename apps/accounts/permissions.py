"""
Role based permission classes.

Roles are a plain field on the user (admin, manager, cashier, staff).
Superusers pass every check.

Usage:
    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsManagerOrAdmin()]
        return [IsAuthenticated(), IsStaffMember()]
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import Role


class RolePermission(BasePermission):
    """Allow access when the authenticated user holds one of ``allowed_roles``."""

    allowed_roles = ()
    message = 'You do not have permission to perform this action.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.has_role(*self.allowed_roles)


class IsAdminRole(RolePermission):
    allowed_roles = (Role.ADMIN,)
    message = 'Admin role required.'


class IsManagerOrAdmin(RolePermission):
    allowed_roles = (Role.ADMIN, Role.MANAGER)
    message = 'Manager or admin role required.'


class IsCashierOrAbove(RolePermission):
    allowed_roles = (Role.ADMIN, Role.MANAGER, Role.CASHIER)
    message = 'Cashier, manager or admin role required.'


class IsStaffMember(RolePermission):
    allowed_roles = (Role.ADMIN, Role.MANAGER, Role.CASHIER, Role.STAFF)
    message = 'Staff account required.'


class StaffReadAdminWrite(BasePermission):
    """Safe methods for any staff role, writes for admins only."""

    message = 'Admin role required to change this resource.'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return IsStaffMember().has_permission(request, view)
        return IsAdminRole().has_permission(request, view)
