"""
Department transfer service.

A transfer moves stock from a department's department-level row to
another department, or to a section of it (``DEPT:section``). Requests
are created pending and executed on approval.
"""

import logging
import uuid
from typing import Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.departments.services import resolve_department_code, get_department
from apps.inventory.models import (
    InventoryItem,
    DepartmentTransfer,
    DepartmentTransferItem,
    TransferStatus,
    TransferProductType,
)

from .exceptions import (
    InvalidTransferError,
    MissingTransferInputError,
    TransferNotFoundError,
    InvalidTransferStateError,
    InsufficientStockError,
)
from .stock import (
    check_department_availability,
    consume_department_stock,
    add_department_stock,
)

logger = logging.getLogger(__name__)

MAX_ITEMS = 50
MAX_PRODUCT_ID_LENGTH = 128
MAX_QUANTITY = 100000

OPEN_STATUSES = (TransferStatus.PENDING, TransferStatus.APPROVED)


def get_transfer(transfer_id) -> DepartmentTransfer:
    try:
        return (
            DepartmentTransfer.objects
            .select_related('from_department', 'to_department', 'to_section')
            .prefetch_related('items__inventory_item')
            .get(id=transfer_id)
        )
    except (DepartmentTransfer.DoesNotExist, ValidationError):
        raise TransferNotFoundError(f"Transfer {transfer_id} not found")


def _normalize_items(items: Iterable[dict]) -> List[dict]:
    """Validate raw ``{type, id, quantity}`` items and look up their inventory items."""
    normalized = []
    for raw in items:
        product_type = str(raw.get('type') or '')
        product_id = str(raw.get('id') or '')
        quantity = raw.get('quantity')

        if product_type not in TransferProductType.values:
            raise InvalidTransferError(
                'Only transfers of type "drink" or "inventoryItem" are supported'
            )
        if not product_id or len(product_id) > MAX_PRODUCT_ID_LENGTH:
            raise InvalidTransferError('Invalid product id')
        if (
            isinstance(quantity, bool)
            or not isinstance(quantity, int)
            or quantity <= 0
            or quantity > MAX_QUANTITY
        ):
            raise InvalidTransferError(f"Invalid quantity for product {product_id}")

        item = InventoryItem.objects.filter(id=product_id).first() if _is_uuid(product_id) else None
        if item is None:
            raise InvalidTransferError(f"No inventory record for item {product_id}")

        normalized.append({
            'product_type': product_type,
            'item': item,
            'quantity': quantity,
        })
    return normalized


@transaction.atomic
def create_transfer(
    *,
    from_code: str,
    to_code: str,
    items: list,
    user: Optional[User] = None,
    notes: str = ''
) -> DepartmentTransfer:
    """
    Create a pending transfer request.

    Args:
        from_code: Source department code (department-level stock)
        to_code: Destination department code or ``DEPT:section``
        items: List of ``{type, id, quantity}`` dicts
        user: User creating the request
        notes: Optional free text

    Returns:
        Created DepartmentTransfer with its items

    Raises:
        MissingTransferInputError: If the destination or items are missing
        InvalidTransferError: If an item fails validation
        InsufficientStockError: If the source lacks stock for an item
        DepartmentNotFoundError / SectionNotFoundError: If a code doesn't resolve
    """
    if not to_code or not items:
        raise MissingTransferInputError('to_department_code and items are required')
    if len(items) > MAX_ITEMS:
        raise InvalidTransferError(f"Too many items in transfer (max {MAX_ITEMS})")

    from_department = get_department(from_code)
    to_department, to_section = resolve_department_code(to_code)

    normalized = _normalize_items(items)

    for entry in normalized:
        check = check_department_availability(
            department=from_department,
            item_id=entry['item'].id,
            quantity=entry['quantity']
        )
        if not check['has_stock']:
            logger.warning("Transfer from %s rejected: %s", from_department.code, check['message'])
            raise InsufficientStockError(check['message'])

    transfer = DepartmentTransfer.objects.create(
        from_department=from_department,
        to_department=to_department,
        to_section=to_section,
        destination_code=to_code,
        status=TransferStatus.PENDING,
        notes=notes,
        created_by=user
    )
    DepartmentTransferItem.objects.bulk_create([
        DepartmentTransferItem(
            transfer=transfer,
            product_type=entry['product_type'],
            inventory_item=entry['item'],
            quantity=entry['quantity']
        )
        for entry in normalized
    ])

    logger.info(
        "Transfer %s created: %s -> %s (%s items)",
        transfer.id, from_department.code, to_code, len(normalized)
    )
    return get_transfer(transfer.id)


def approve_transfer(*, transfer_id, user: Optional[User] = None) -> DepartmentTransfer:
    """
    Approve and execute a transfer.

    Availability is checked first. Stock moves in a single transaction with
    the source rows locked; any shortage rolls the whole transfer back.

    Raises:
        TransferNotFoundError: If transfer doesn't exist
        InvalidTransferStateError: If transfer is not pending or approved
        InsufficientStockError: If the source no longer holds enough stock
    """
    transfer = get_transfer(transfer_id)
    if transfer.status not in OPEN_STATUSES:
        raise InvalidTransferStateError(f"Transfer is already {transfer.status}")

    items = list(transfer.items.all())
    for transfer_item in items:
        check = check_department_availability(
            department=transfer.from_department,
            item_id=transfer_item.inventory_item_id,
            quantity=transfer_item.quantity
        )
        if not check['has_stock']:
            logger.warning("Transfer %s not executed: %s", transfer.id, check['message'])
            raise InsufficientStockError(check['message'])

    with transaction.atomic():
        locked = DepartmentTransfer.objects.select_for_update().get(id=transfer.id)
        if locked.status not in OPEN_STATUSES:
            raise InvalidTransferStateError(f"Transfer is already {locked.status}")

        for transfer_item in items:
            consume_department_stock(
                department=transfer.from_department,
                item_id=transfer_item.inventory_item_id,
                quantity=transfer_item.quantity,
                reason='transfer-out',
                reference=str(transfer.id),
                user=user
            )
            add_department_stock(
                department=transfer.to_department,
                section=transfer.to_section,
                item=transfer_item.inventory_item,
                quantity=transfer_item.quantity,
                reason='transfer-in',
                reference=str(transfer.id),
                user=user
            )

        locked.status = TransferStatus.COMPLETED
        locked.approved_by = user
        locked.completed_at = timezone.now()
        locked.save(update_fields=['status', 'approved_by', 'completed_at', 'updated_at'])

    logger.info("Transfer %s approved and executed", transfer.id)
    return get_transfer(transfer.id)


@transaction.atomic
def reject_transfer(*, transfer_id, user: Optional[User] = None, reason: str = '') -> DepartmentTransfer:
    """
    Reject a pending transfer.

    Raises:
        TransferNotFoundError: If transfer doesn't exist
        InvalidTransferStateError: If transfer is not pending
    """
    transfer = get_transfer(transfer_id)
    if transfer.status != TransferStatus.PENDING:
        raise InvalidTransferStateError(f"Transfer is already {transfer.status}")

    transfer.status = TransferStatus.REJECTED
    transfer.approved_by = user
    if reason:
        transfer.notes = f"{transfer.notes}\nRejected: {reason}".strip()
    transfer.save(update_fields=['status', 'approved_by', 'notes', 'updated_at'])

    logger.info("Transfer %s rejected", transfer.id)
    return transfer


def list_transfers(*, status: Optional[str] = None, department_code: Optional[str] = None) -> QuerySet:
    """List transfers, optionally by status or by a department on either side."""
    queryset = (
        DepartmentTransfer.objects
        .select_related('from_department', 'to_department', 'to_section', 'created_by', 'approved_by')
        .prefetch_related('items__inventory_item')
    )
    if status:
        queryset = queryset.filter(status=status)
    if department_code:
        code = department_code.strip().upper()
        queryset = queryset.filter(Q(from_department__code=code) | Q(to_department__code=code))
    return queryset


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True
