import pytest
from decimal import Decimal

from apps.inventory.models import InventoryItem
from apps.inventory.services import create_transfer


@pytest.fixture
def low_item(db):
    """Item already under its reorder level."""
    return InventoryItem.objects.create(
        name='Lime',
        sku='LIME-001',
        category='produce',
        quantity=2,
        reorder_level=10,
        unit_price=Decimal('0.30'),
    )


@pytest.fixture
def pending_transfer(bar_stock, restaurant, manager_user):
    """Four units of gin requested from the bar to the restaurant terrace."""
    return create_transfer(
        from_code='BAR_CLUB',
        to_code='RESTAURANT:terrace',
        items=[{'type': 'drink', 'id': str(bar_stock.inventory_item_id), 'quantity': 4}],
        user=manager_user,
        notes='Terrace event'
    )
