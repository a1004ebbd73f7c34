"""
Discount rule management and code validation.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, Sum, QuerySet
from django.utils import timezone

from apps.discounts.models import DiscountRule, DiscountRuleType

from .exceptions import (
    DiscountRuleNotFoundError,
    DuplicateDiscountCodeError,
    InvalidDiscountError,
    EmploymentNotFoundError,
)

logger = logging.getLogger(__name__)

EMPLOYEE_DISCOUNT_PERCENTAGE = 15


def get_rule(rule_id) -> DiscountRule:
    try:
        return DiscountRule.objects.get(id=rule_id)
    except (DiscountRule.DoesNotExist, ValidationError):
        raise DiscountRuleNotFoundError(f"Discount rule {rule_id} not found")


def get_rule_by_code(code: str) -> Optional[DiscountRule]:
    return DiscountRule.objects.filter(code=code.strip().upper()).first()


@transaction.atomic
def create_discount_rule(*, code: str, name: str, type: str, value, **extra_fields) -> DiscountRule:
    """
    Create a discount rule. The code is stored upper-case.

    Raises:
        DuplicateDiscountCodeError: If the code already exists
    """
    code = code.strip().upper()
    if DiscountRule.objects.filter(code=code).exists():
        raise DuplicateDiscountCodeError(f"Discount code {code} already exists")

    rule = DiscountRule.objects.create(
        code=code,
        name=name,
        type=type,
        value=value,
        **extra_fields
    )
    logger.info("Created discount rule %s", rule.code)
    return rule


@transaction.atomic
def update_rule(*, rule_id, **fields) -> DiscountRule:
    """
    Update a rule.

    Raises:
        DiscountRuleNotFoundError: If rule doesn't exist
        DuplicateDiscountCodeError: If the new code belongs to another rule
    """
    rule = get_rule(rule_id)
    if 'code' in fields:
        fields['code'] = fields['code'].strip().upper()
        if DiscountRule.objects.filter(code=fields['code']).exclude(id=rule.id).exists():
            raise DuplicateDiscountCodeError(f"Discount code {fields['code']} already exists")

    for name, value in fields.items():
        setattr(rule, name, value)
    rule.save()
    return rule


@transaction.atomic
def deactivate_rule(*, rule_id) -> DiscountRule:
    rule = get_rule(rule_id)
    rule.is_active = False
    rule.save(update_fields=['is_active', 'updated_at'])
    logger.info("Deactivated discount rule %s", rule.code)
    return rule


def list_rules(*, is_active: Optional[bool] = None, type: Optional[str] = None) -> QuerySet:
    queryset = DiscountRule.objects.all()
    if is_active is not None:
        queryset = queryset.filter(is_active=is_active)
    if type:
        queryset = queryset.filter(type=type)
    return queryset


def get_active_rules() -> QuerySet:
    """Active rules whose window contains now. Open ends count as unbounded."""
    now = timezone.now()
    return DiscountRule.objects.filter(
        Q(start_date__isnull=True) | Q(start_date__lte=now),
        Q(end_date__isnull=True) | Q(end_date__gte=now),
        is_active=True,
    )


def get_customer_usage(rule: DiscountRule, customer_id) -> int:
    """Number of orders of ``customer_id`` that used ``rule``."""
    return rule.applications.filter(order__customer_id=customer_id).count()


def validate_discount_code(
    *,
    code: str,
    order_total: int,
    customer_id=None,
    department_code: Optional[str] = None
) -> DiscountRule:
    """
    Check that a discount code can be used on an order.

    Checks run in this order: existence, active flag, start date, end
    date, total usage, per-customer usage, minimum order amount, and
    department applicability.

    Args:
        code: Discount code (case insensitive)
        order_total: Order amount in cents
        customer_id: Customer for the per-customer usage limit
        department_code: Department the order is for, when known

    Returns:
        The usable DiscountRule

    Raises:
        InvalidDiscountError: With the reason the code is unusable
    """
    rule = get_rule_by_code(code)
    if rule is None:
        raise InvalidDiscountError('Discount code not found')
    if not rule.is_active:
        raise InvalidDiscountError('Discount code is inactive')

    now = timezone.now()
    if rule.start_date and now < rule.start_date:
        raise InvalidDiscountError('Discount code not yet active')
    if rule.end_date and now > rule.end_date:
        raise InvalidDiscountError('Discount code has expired')

    if rule.max_total_usage and rule.current_usage >= rule.max_total_usage:
        raise InvalidDiscountError('Discount code usage limit exceeded')

    if rule.max_usage_per_customer and customer_id:
        if get_customer_usage(rule, customer_id) >= rule.max_usage_per_customer:
            raise InvalidDiscountError('You have reached the usage limit for this discount code')

    if rule.min_order_amount and order_total < rule.min_order_amount:
        raise InvalidDiscountError(
            f"Minimum order amount of {rule.min_order_amount / 100:.2f} required"
        )

    if department_code and rule.applicable_departments:
        parent_code = department_code.split(':', 1)[0]
        if parent_code not in rule.applicable_departments:
            raise InvalidDiscountError('Discount code is not applicable to this department')

    return rule


def calculate_discount_amount(rule: DiscountRule, order_total: int) -> int:
    """
    Discount in cents for ``order_total`` cents.

    Percentage and tiered rules take ``value`` percent, rounded half up.
    Fixed rules take ``value`` cents, capped at the order total.
    """
    if rule.type == DiscountRuleType.FIXED:
        return min(int(rule.value), order_total)
    amount = Decimal(order_total) * rule.value / Decimal(100)
    return int(amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def get_discount_stats() -> dict:
    from apps.orders.models import OrderDiscount

    applied = OrderDiscount.objects.all()
    return {
        'total_rules': DiscountRule.objects.count(),
        'active_rules': DiscountRule.objects.filter(is_active=True).count(),
        'total_discounts_applied': applied.count(),
        'total_discount_amount': applied.aggregate(total=Sum('discount_amount'))['total'] or 0,
    }


def get_employee_discount(*, user_id) -> dict:
    """
    Staff discount for a user with employment data.

    Raises:
        EmploymentNotFoundError: If the user has no employment record
    """
    from apps.employees.models import EmploymentData

    employment = (
        EmploymentData.objects
        .select_related('user')
        .filter(user_id=user_id)
        .first()
    )
    if employment is None:
        raise EmploymentNotFoundError(f"No employment record for user {user_id}")

    return {
        'user_id': str(employment.user_id),
        'employee_name': employment.user.get_display_name(),
        'discount_percentage': EMPLOYEE_DISCOUNT_PERCENTAGE,
        'employment_status': employment.employment_status,
    }
