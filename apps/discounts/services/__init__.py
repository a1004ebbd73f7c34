"""
Discounts app services layer.
"""

from .exceptions import (
    DiscountsServiceError,
    DiscountRuleNotFoundError,
    DuplicateDiscountCodeError,
    InvalidDiscountError,
    EmploymentNotFoundError,
)

from .discount_rules import (
    EMPLOYEE_DISCOUNT_PERCENTAGE,
    get_rule,
    get_rule_by_code,
    create_discount_rule,
    update_rule,
    deactivate_rule,
    list_rules,
    get_active_rules,
    get_customer_usage,
    validate_discount_code,
    calculate_discount_amount,
    get_discount_stats,
    get_employee_discount,
)


__all__ = [
    # Exceptions
    'DiscountsServiceError',
    'DiscountRuleNotFoundError',
    'DuplicateDiscountCodeError',
    'InvalidDiscountError',
    'EmploymentNotFoundError',

    # Discount Rules
    'EMPLOYEE_DISCOUNT_PERCENTAGE',
    'get_rule',
    'get_rule_by_code',
    'create_discount_rule',
    'update_rule',
    'deactivate_rule',
    'list_rules',
    'get_active_rules',
    'get_customer_usage',
    'validate_discount_code',
    'calculate_discount_amount',
    'get_discount_stats',
    'get_employee_discount',
]
