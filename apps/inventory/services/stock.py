"""
Stock service.

Global item quantities, per-department stock checks and the movement
audit trail. Department stock used by sales and transfers is always the
department-level row (``section`` is null).
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Sum, DecimalField, ExpressionWrapper, QuerySet

from apps.accounts.models import User
from apps.departments.models import Department, DepartmentSection
from apps.inventory.models import (
    InventoryItem,
    DepartmentInventory,
    InventoryMovement,
    MovementType,
)

from .exceptions import InventoryItemNotFoundError, InsufficientStockError

logger = logging.getLogger(__name__)


def get_inventory_item(item_id) -> InventoryItem:
    try:
        return InventoryItem.objects.get(id=item_id)
    except (InventoryItem.DoesNotExist, ValidationError):
        raise InventoryItemNotFoundError(f"Inventory item {item_id} not found")


def record_movement(
    *,
    item: InventoryItem,
    movement_type: str,
    quantity: int,
    reason: str = '',
    reference: str = '',
    user: Optional[User] = None
) -> InventoryMovement:
    return InventoryMovement.objects.create(
        inventory_item=item,
        movement_type=movement_type,
        quantity=quantity,
        reason=reason,
        reference=str(reference),
        created_by=user
    )


@transaction.atomic
def adjust_quantity(
    *,
    item_id: UUID,
    delta: int,
    reason: str = 'adjustment',
    user: Optional[User] = None
) -> InventoryItem:
    """
    Adjust the global quantity of an item.

    The quantity is clamped at zero. A movement is written with type
    ``in`` for positive deltas, ``out`` for negative ones and
    ``adjustment`` when the delta is zero.

    Args:
        item_id: UUID of the inventory item
        delta: Signed quantity change
        reason: Free text stored on the movement
        user: User performing the adjustment

    Returns:
        Updated InventoryItem

    Raises:
        InventoryItemNotFoundError: If item doesn't exist
    """
    try:
        item = InventoryItem.objects.select_for_update().get(id=item_id)
    except InventoryItem.DoesNotExist:
        raise InventoryItemNotFoundError(f"Inventory item {item_id} not found")

    item.quantity = max(0, item.quantity + delta)
    item.save(update_fields=['quantity', 'updated_at'])

    if delta > 0:
        movement_type = MovementType.IN
    elif delta < 0:
        movement_type = MovementType.OUT
    else:
        movement_type = MovementType.ADJUSTMENT

    record_movement(
        item=item,
        movement_type=movement_type,
        quantity=abs(delta),
        reason=reason,
        user=user
    )
    logger.info("Adjusted %s by %s (now %s)", item.name, delta, item.quantity)
    return item


def get_low_stock_items() -> QuerySet:
    """Active items at or below their reorder level."""
    return InventoryItem.objects.filter(
        is_active=True,
        quantity__lte=F('reorder_level')
    )


def get_inventory_stats() -> dict:
    items = InventoryItem.objects.filter(is_active=True)
    totals = items.aggregate(
        total_quantity=Sum('quantity'),
        total_value=Sum(
            ExpressionWrapper(
                F('quantity') * F('unit_price'),
                output_field=DecimalField(max_digits=14, decimal_places=2)
            )
        ),
    )
    return {
        'total_items': items.count(),
        'total_quantity': totals['total_quantity'] or 0,
        'low_stock_count': get_low_stock_items().count(),
        'total_value': totals['total_value'] or Decimal('0.00'),
    }


def get_department_stock(
    department: Department,
    item_id,
    section: Optional[DepartmentSection] = None
) -> Optional[DepartmentInventory]:
    return DepartmentInventory.objects.filter(
        department=department,
        section=section,
        inventory_item_id=item_id
    ).first()


def check_department_availability(
    *,
    department: Department,
    item_id,
    quantity: int
) -> dict:
    """
    Check department-level stock for ``quantity`` units of an item.

    Returns:
        Dict with has_stock, available and message
    """
    record = get_department_stock(department, item_id)
    available = record.quantity if record else 0
    has_stock = available >= quantity
    message = '' if has_stock else (
        f"Insufficient inventory in {department.code} for item {item_id}: "
        f"have {available}, need {quantity}"
    )
    return {'has_stock': has_stock, 'available': available, 'message': message}


def consume_department_stock(
    *,
    department: Department,
    item_id,
    quantity: int,
    reason: str,
    reference: str = '',
    user: Optional[User] = None
) -> DepartmentInventory:
    """
    Decrement department-level stock and write an ``out`` movement.

    Must run inside a transaction; the stock row is locked.

    Raises:
        InsufficientStockError: If the department holds less than ``quantity``
    """
    record = (
        DepartmentInventory.objects
        .select_for_update()
        .select_related('inventory_item')
        .filter(department=department, section__isnull=True, inventory_item_id=item_id)
        .first()
    )
    if record is None or record.quantity < quantity:
        available = record.quantity if record else 0
        raise InsufficientStockError(
            f"Insufficient inventory for product {item_id} in department "
            f"{department.code}: have {available}, need {quantity}"
        )

    record.quantity = F('quantity') - quantity
    record.save(update_fields=['quantity', 'updated_at'])
    record.refresh_from_db(fields=['quantity'])

    record_movement(
        item=record.inventory_item,
        movement_type=MovementType.OUT,
        quantity=quantity,
        reason=reason,
        reference=reference,
        user=user
    )
    return record


def add_department_stock(
    *,
    department: Department,
    item: InventoryItem,
    quantity: int,
    section: Optional[DepartmentSection] = None,
    reason: str = '',
    reference: str = '',
    user: Optional[User] = None
) -> DepartmentInventory:
    """Create or increment a department (or section) stock row and write an ``in`` movement."""
    record, created = (
        DepartmentInventory.objects
        .select_for_update()
        .get_or_create(
            department=department,
            section=section,
            inventory_item=item,
            defaults={'quantity': quantity, 'unit_price': item.unit_price}
        )
    )
    if not created:
        record.quantity = F('quantity') + quantity
        record.save(update_fields=['quantity', 'updated_at'])
        record.refresh_from_db(fields=['quantity'])

    record_movement(
        item=item,
        movement_type=MovementType.IN,
        quantity=quantity,
        reason=reason,
        reference=reference,
        user=user
    )
    return record
