"""
Employee charges (shortages, damages, advances).

``EmploymentData.total_charges`` is kept in step with the charges that
exist for the employee.
"""

import logging
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, QuerySet

from apps.employees.models import EmployeeCharge, EmploymentData, ChargeStatus

from .employment_management import get_employment
from .exceptions import ChargeNotFoundError, InvalidChargePaymentError

logger = logging.getLogger(__name__)


def _get_charge(user_id, charge_id) -> EmployeeCharge:
    try:
        return (
            EmployeeCharge.objects
            .select_for_update()
            .get(id=charge_id, employment__user_id=user_id)
        )
    except (EmployeeCharge.DoesNotExist, ValidationError):
        raise ChargeNotFoundError(f"Charge {charge_id} not found")


def list_charges(*, user_id) -> QuerySet:
    employment = get_employment(user_id=user_id)
    return employment.charges.all()


@transaction.atomic
def add_charge(*, user_id, charge_type: str, amount, date, **fields) -> EmployeeCharge:
    """
    Add a charge and increase the employee's total charges.

    Raises:
        EmploymentNotFoundError: If the user has no employment record
    """
    employment = get_employment(user_id=user_id)
    charge = EmployeeCharge.objects.create(
        employment=employment,
        charge_type=charge_type,
        amount=amount,
        date=date,
        **fields
    )
    EmploymentData.objects.filter(id=employment.id).update(
        total_charges=F('total_charges') + amount
    )
    logger.info("Charge of %s added for %s", amount, employment.user.email)
    return charge


def _derive_status(paid_amount: Decimal, amount: Decimal) -> str:
    if paid_amount <= 0:
        return ChargeStatus.PENDING
    if paid_amount < amount:
        return ChargeStatus.PARTIALLY_PAID
    return ChargeStatus.PAID


@transaction.atomic
def update_charge_payment(
    *,
    user_id,
    charge_id,
    paid_amount,
    payment_date=None,
    payment_method: Optional[str] = None,
    notes: Optional[str] = None
) -> EmployeeCharge:
    """
    Record how much of a charge is paid. The status follows the amount.

    Raises:
        ChargeNotFoundError: If charge doesn't exist for the employee
        InvalidChargePaymentError: If paid_amount is outside 0..amount
    """
    charge = _get_charge(user_id, charge_id)
    paid_amount = Decimal(str(paid_amount))
    if paid_amount < 0 or paid_amount > charge.amount:
        raise InvalidChargePaymentError(
            f"Paid amount must be between 0 and {charge.amount}"
        )

    charge.paid_amount = paid_amount
    charge.status = _derive_status(paid_amount, charge.amount)
    if payment_date is not None:
        charge.payment_date = payment_date
    if payment_method is not None:
        charge.payment_method = payment_method
    if notes is not None:
        charge.notes = notes
    charge.save()

    logger.info("Charge %s now %s (%s of %s)", charge.id, charge.status, paid_amount, charge.amount)
    return charge


@transaction.atomic
def delete_charge(*, user_id, charge_id) -> None:
    """Delete a charge and decrease the employee's total charges."""
    charge = _get_charge(user_id, charge_id)
    EmploymentData.objects.filter(id=charge.employment_id).update(
        total_charges=F('total_charges') - charge.amount
    )
    charge.delete()
    logger.info("Charge %s deleted", charge_id)
