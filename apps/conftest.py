"""Fixtures shared by every app's test suite."""
import pytest
from decimal import Decimal

from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Role
from apps.departments.models import Department, DepartmentSection
from apps.inventory.models import InventoryItem, DepartmentInventory


def authenticated_client(user):
    """Return a fresh API client carrying a bearer token for ``user``."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create and return an admin."""
    return User.objects.create_user(
        email='admin@hotel.example',
        password='TestPass123!',
        display_name='Hotel Admin',
        role=Role.ADMIN,
    )


@pytest.fixture
def manager_user(db):
    """Create and return a manager."""
    return User.objects.create_user(
        email='manager@hotel.example',
        password='TestPass123!',
        display_name='Duty Manager',
        role=Role.MANAGER,
    )


@pytest.fixture
def cashier_user(db):
    """Create and return a cashier."""
    return User.objects.create_user(
        email='cashier@hotel.example',
        password='TestPass123!',
        display_name='Front Cashier',
        role=Role.CASHIER,
    )


@pytest.fixture
def staff_user(db):
    """Create and return a regular staff member."""
    return User.objects.create_user(
        email='staff@hotel.example',
        password='TestPass123!',
        display_name='Floor Staff',
        role=Role.STAFF,
    )


@pytest.fixture
def admin_client(admin_user):
    """Return API client authenticated as admin."""
    return authenticated_client(admin_user)


@pytest.fixture
def manager_client(manager_user):
    """Return API client authenticated as manager."""
    return authenticated_client(manager_user)


@pytest.fixture
def cashier_client(cashier_user):
    """Return API client authenticated as cashier."""
    return authenticated_client(cashier_user)


@pytest.fixture
def staff_client(staff_user):
    """Return API client authenticated as staff."""
    return authenticated_client(staff_user)


# -----------------------------------------------------------------------------
# Departments and stock used across the inventory, departments and orders suites
# -----------------------------------------------------------------------------

@pytest.fixture
def restaurant(db):
    """Untracked department with a terrace section."""
    department = Department.objects.create(
        code='RESTAURANT',
        name='Restaurant',
        slug='restaurant',
        type='restaurant',
    )
    DepartmentSection.objects.create(department=department, name='Terrace', slug='terrace')
    return department


@pytest.fixture
def bar_club(db):
    """Inventory-tracked department."""
    return Department.objects.create(
        code='BAR_CLUB',
        name='Bar & Club',
        slug='bar-club',
        type='bar',
        tracks_inventory=True,
    )


@pytest.fixture
def gin(db):
    return InventoryItem.objects.create(
        name='Gin Tonic',
        sku='GIN-001',
        category='drinks',
        quantity=40,
        reorder_level=5,
        unit_price=Decimal('8.50'),
    )


@pytest.fixture
def bar_stock(bar_club, gin):
    """Ten units of gin at department level in the bar."""
    return DepartmentInventory.objects.create(
        department=bar_club,
        inventory_item=gin,
        quantity=10,
        unit_price=gin.unit_price,
    )
