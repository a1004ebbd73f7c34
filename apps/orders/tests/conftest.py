import pytest
from decimal import Decimal

from apps.discounts.models import DiscountRule, DiscountRuleType
from apps.organisation.models import TaxSettings
from apps.orders.models import Customer
from apps.orders.services import create_order


@pytest.fixture
def tax_settings(db):
    """Tax enabled at 10%."""
    return TaxSettings.objects.create(enabled=True, tax_rate=Decimal('10.00'))


@pytest.fixture
def customer(db):
    return Customer.objects.create(first_name='Ana', last_name='Guest', email='ana@guest.example')


@pytest.fixture
def burger_item(restaurant):
    """Two burgers served on the restaurant terrace, 12.50 each."""
    return {
        'product_id': 'burger-classic',
        'product_type': 'food',
        'product_name': 'Classic Burger',
        'department_code': 'RESTAURANT:terrace',
        'quantity': 2,
        'unit_price': 1250,
    }


@pytest.fixture
def gin_item(bar_stock):
    """Two gin tonics from the inventory-tracked bar, 8.50 each."""
    return {
        'product_id': str(bar_stock.inventory_item_id),
        'product_type': 'drink',
        'product_name': 'Gin Tonic',
        'department_code': 'BAR_CLUB',
        'quantity': 2,
        'unit_price': 850,
    }


@pytest.fixture
def order(tax_settings, customer, burger_item, gin_item, staff_user):
    """Subtotal 42.00, tax 4.20, total 46.20."""
    return create_order(
        customer_id=customer.id,
        items=[burger_item, gin_item],
        notes='Table 4',
        user=staff_user
    )


@pytest.fixture
def percent_rule(db):
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
