import pytest
from datetime import date
from decimal import Decimal

from apps.employees.models import EmploymentData, EmployeeLeave, EmployeeCharge, LeaveType, ChargeType


@pytest.fixture
def employment(staff_user):
    """Employment record for the staff user."""
    return EmploymentData.objects.create(
        user=staff_user,
        employment_date=date(2023, 3, 1),
        position='Bartender',
        department='BAR_CLUB',
        salary=Decimal('1800.00'),
    )


@pytest.fixture
def pending_leave(employment):
    return EmployeeLeave.objects.create(
        employment=employment,
        leave_type=LeaveType.ANNUAL,
        start_date=date(2024, 7, 1),
        end_date=date(2024, 7, 5),
        number_of_days=5,
    )


@pytest.fixture
def charge(employment):
    """A 50.00 shortage charge, reflected in total_charges."""
    employment.total_charges = Decimal('50.00')
    employment.save()
    return EmployeeCharge.objects.create(
        employment=employment,
        charge_type=ChargeType.SHORTAGE,
        amount=Decimal('50.00'),
        date=date(2024, 5, 10),
    )
