import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone

from apps.discounts.models import DiscountRule, DiscountRuleType
from apps.orders.models import Customer


@pytest.fixture
def percent_rule(db):
    """10% off, no limits."""
    return DiscountRule.objects.create(
        code='SUMMER10',
        name='Summer 10%',
        type=DiscountRuleType.PERCENTAGE,
        value=Decimal('10'),
    )


@pytest.fixture
def fixed_rule(db):
    """5.00 off orders of at least 20.00."""
    return DiscountRule.objects.create(
        code='FIVEOFF',
        name='Five off',
        type=DiscountRuleType.FIXED,
        value=Decimal('500'),
        min_order_amount=2000,
    )


@pytest.fixture
def expired_rule(db):
    return DiscountRule.objects.create(
        code='OLDPROMO',
        name='Old promo',
        type=DiscountRuleType.PERCENTAGE,
        value=Decimal('20'),
        end_date=timezone.now() - timedelta(days=1),
    )


@pytest.fixture
def customer(db):
    return Customer.objects.create(first_name='Ana', last_name='Guest', email='ana@guest.example')
