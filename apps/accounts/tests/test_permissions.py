import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework.test import APIRequestFactory

from apps.accounts.permissions import (
    IsAdminRole,
    IsManagerOrAdmin,
    IsCashierOrAbove,
    IsStaffMember,
    StaffReadAdminWrite,
)

factory = APIRequestFactory()


def request_as(user, method='get'):
    request = getattr(factory, method)('/')
    request.user = user
    return request


@pytest.mark.django_db
class TestRolePermissions:

    @pytest.mark.parametrize('permission, allowed', [
        (IsAdminRole, {'admin'}),
        (IsManagerOrAdmin, {'admin', 'manager'}),
        (IsCashierOrAbove, {'admin', 'manager', 'cashier'}),
        (IsStaffMember, {'admin', 'manager', 'cashier', 'staff'}),
    ])
    def test_role_matrix(self, permission, allowed, admin_user, manager_user, cashier_user, staff_user):
        for user in (admin_user, manager_user, cashier_user, staff_user):
            granted = permission().has_permission(request_as(user), None)
            assert granted == (user.role in allowed), user.role

    def test_anonymous_denied(self):
        assert not IsStaffMember().has_permission(request_as(AnonymousUser()), None)


@pytest.mark.django_db
class TestStaffReadAdminWrite:

    def test_staff_can_read(self, staff_user):
        assert StaffReadAdminWrite().has_permission(request_as(staff_user), None)

    def test_manager_cannot_write(self, manager_user):
        assert not StaffReadAdminWrite().has_permission(request_as(manager_user, 'put'), None)

    def test_admin_can_write(self, admin_user):
        assert StaffReadAdminWrite().has_permission(request_as(admin_user, 'put'), None)
