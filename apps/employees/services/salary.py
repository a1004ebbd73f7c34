"""
Salary payments.
"""

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.employees.models import SalaryPayment

from .exceptions import UserNotFoundError, InvalidSalaryPaymentError

logger = logging.getLogger(__name__)


@transaction.atomic
def record_salary_payment(
    *,
    user_id,
    payment_date,
    gross_salary,
    deductions=Decimal('0.00'),
    net_salary=None,
    **fields
) -> SalaryPayment:
    """
    Record a salary payment.

    Net salary is gross minus deductions unless given explicitly.

    Raises:
        UserNotFoundError: If user doesn't exist
        InvalidSalaryPaymentError: If the net salary would be negative
    """
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise UserNotFoundError(f"User {user_id} not found")

    gross_salary = Decimal(str(gross_salary))
    deductions = Decimal(str(deductions))
    if net_salary is None:
        net_salary = gross_salary - deductions
    net_salary = Decimal(str(net_salary))
    if net_salary < 0:
        raise InvalidSalaryPaymentError('Net salary cannot be negative')

    payment = SalaryPayment.objects.create(
        user=user,
        payment_date=payment_date,
        gross_salary=gross_salary,
        deductions=deductions,
        net_salary=net_salary,
        **fields
    )
    logger.info("Salary payment of %s recorded for %s", net_salary, user.email)
    return payment


def list_salary_payments(*, user_id: Optional[str] = None) -> QuerySet:
    queryset = SalaryPayment.objects.select_related('user')
    if user_id:
        queryset = queryset.filter(user_id=user_id)
    return queryset
