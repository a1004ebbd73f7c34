"""
Service layer tests for employment, leaves, charges and salary payments.
"""

import uuid
import pytest
from datetime import date
from decimal import Decimal

from apps.employees.models import (
    EmploymentData,
    EmploymentStatus,
    EmployeeCharge,
    ChargeStatus,
    LeaveStatus,
    SettlementStatus,
)
from apps.employees.services import (
    get_employment,
    create_employment,
    update_employment,
    request_leave,
    review_leave,
    add_charge,
    update_charge_payment,
    delete_charge,
    terminate_employee,
    get_termination,
    update_termination,
    record_salary_payment,
)
from apps.employees.services.exceptions import (
    UserNotFoundError,
    EmploymentNotFoundError,
    EmploymentExistsError,
    InvalidLeaveError,
    LeaveNotFoundError,
    ChargeNotFoundError,
    InvalidChargePaymentError,
    AlreadyTerminatedError,
    TerminationNotFoundError,
    InvalidSalaryPaymentError,
)


@pytest.mark.django_db
class TestEmployment:

    def test_create(self, cashier_user):
        employment = create_employment(
            user_id=cashier_user.id,
            employment_date=date(2024, 1, 15),
            position='Cashier',
        )

        assert employment.user == cashier_user
        assert employment.employment_status == EmploymentStatus.ACTIVE

    def test_create_twice(self, employment, staff_user):
        with pytest.raises(EmploymentExistsError):
            create_employment(
                user_id=staff_user.id,
                employment_date=date(2024, 1, 1),
                position='Waiter',
            )

    def test_create_unknown_user(self):
        with pytest.raises(UserNotFoundError):
            create_employment(user_id=uuid.uuid4(), employment_date=date(2024, 1, 1), position='X')

    def test_get_missing(self, manager_user):
        with pytest.raises(EmploymentNotFoundError):
            get_employment(user_id=manager_user.id)

    def test_update(self, employment, staff_user):
        updated = update_employment(user_id=staff_user.id, position='Head Bartender')

        assert updated.position == 'Head Bartender'


@pytest.mark.django_db
class TestLeaves:

    def test_days_default_to_inclusive_span(self, employment, staff_user):
        leave = request_leave(
            user_id=staff_user.id,
            leave_type='annual',
            start_date=date(2024, 8, 1),
            end_date=date(2024, 8, 3),
        )

        assert leave.number_of_days == 3
        assert leave.status == LeaveStatus.PENDING

    def test_end_before_start(self, employment, staff_user):
        with pytest.raises(InvalidLeaveError):
            request_leave(
                user_id=staff_user.id,
                leave_type='sick',
                start_date=date(2024, 8, 3),
                end_date=date(2024, 8, 1),
            )

    def test_approve(self, pending_leave, manager_user):
        leave = review_leave(leave_id=pending_leave.id, status='approved', reviewer=manager_user)

        assert leave.status == LeaveStatus.APPROVED
        assert leave.approved_by == manager_user
        assert leave.approval_date is not None

    def test_review_twice(self, pending_leave, manager_user):
        review_leave(leave_id=pending_leave.id, status='rejected', reviewer=manager_user)

        with pytest.raises(InvalidLeaveError):
            review_leave(leave_id=pending_leave.id, status='approved', reviewer=manager_user)

    def test_review_back_to_pending(self, pending_leave, manager_user):
        with pytest.raises(InvalidLeaveError):
            review_leave(leave_id=pending_leave.id, status='pending', reviewer=manager_user)

    def test_review_missing(self, manager_user):
        with pytest.raises(LeaveNotFoundError):
            review_leave(leave_id=uuid.uuid4(), status='approved', reviewer=manager_user)


@pytest.mark.django_db
class TestCharges:

    def test_add_increments_total(self, employment, staff_user):
        add_charge(
            user_id=staff_user.id,
            charge_type='damage',
            amount=Decimal('25.50'),
            date=date(2024, 6, 1),
        )

        employment.refresh_from_db()
        assert employment.total_charges == Decimal('25.50')

    def test_partial_payment(self, charge, staff_user):
        updated = update_charge_payment(
            user_id=staff_user.id,
            charge_id=charge.id,
            paid_amount=Decimal('20.00'),
        )

        assert updated.status == ChargeStatus.PARTIALLY_PAID

    def test_full_payment(self, charge, staff_user):
        updated = update_charge_payment(
            user_id=staff_user.id,
            charge_id=charge.id,
            paid_amount=Decimal('50.00'),
            payment_method='cash',
        )

        assert updated.status == ChargeStatus.PAID
        assert updated.payment_method == 'cash'

    def test_overpayment(self, charge, staff_user):
        with pytest.raises(InvalidChargePaymentError):
            update_charge_payment(user_id=staff_user.id, charge_id=charge.id, paid_amount=Decimal('60'))

    def test_charge_of_other_employee(self, charge, manager_user):
        with pytest.raises(ChargeNotFoundError):
            update_charge_payment(user_id=manager_user.id, charge_id=charge.id, paid_amount=1)

    def test_delete_decrements_total(self, charge, employment, staff_user):
        delete_charge(user_id=staff_user.id, charge_id=charge.id)

        employment.refresh_from_db()
        assert employment.total_charges == Decimal('0.00')
        assert not EmployeeCharge.objects.filter(id=charge.id).exists()


@pytest.mark.django_db
class TestTermination:

    def test_terminate(self, employment, staff_user):
        termination = terminate_employee(
            user_id=staff_user.id,
            termination_date=date(2024, 9, 30),
            reason='Resignation',
            notes='Two weeks notice given',
        )

        employment.refresh_from_db()
        assert termination.settlement_status == SettlementStatus.PENDING
        assert employment.employment_status == EmploymentStatus.TERMINATED
        assert employment.termination_date == date(2024, 9, 30)
        assert employment.termination_reason == 'Resignation'

    def test_terminate_twice(self, employment, staff_user):
        terminate_employee(user_id=staff_user.id, termination_date=date(2024, 9, 30), reason='X')

        with pytest.raises(AlreadyTerminatedError):
            terminate_employee(user_id=staff_user.id, termination_date=date(2024, 10, 1), reason='Y')

    def test_get_while_employed(self, employment, staff_user):
        assert get_termination(user_id=staff_user.id) is None

    def test_update_without_termination(self, employment, staff_user):
        with pytest.raises(TerminationNotFoundError):
            update_termination(user_id=staff_user.id, settlement_status='paid')

    def test_update_settlement(self, employment, staff_user):
        terminate_employee(user_id=staff_user.id, termination_date=date(2024, 9, 30), reason='X')

        termination = update_termination(
            user_id=staff_user.id,
            settlement_status=SettlementStatus.PAID,
            settlement_date=date(2024, 10, 15),
        )

        assert termination.settlement_status == SettlementStatus.PAID
        assert termination.settlement_date == date(2024, 10, 15)


@pytest.mark.django_db
class TestSalaryPayments:

    def test_net_defaults_to_gross_minus_deductions(self, staff_user):
        payment = record_salary_payment(
            user_id=staff_user.id,
            payment_date=date(2024, 6, 30),
            gross_salary=Decimal('1800.00'),
            deductions=Decimal('200.00'),
        )

        assert payment.net_salary == Decimal('1600.00')

    def test_negative_net(self, staff_user):
        with pytest.raises(InvalidSalaryPaymentError):
            record_salary_payment(
                user_id=staff_user.id,
                payment_date=date(2024, 6, 30),
                gross_salary=Decimal('100.00'),
                deductions=Decimal('200.00'),
            )
