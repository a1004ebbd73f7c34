"""
Reservation lifecycle.

Stock is reserved when an order is created against an inventory-tracked
department, consumed once the order is paid, and released when the order
is cancelled or a line is removed.
"""

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.inventory.models import InventoryReservation, ReservationStatus

logger = logging.getLogger(__name__)


def reserve_for_order(*, order, item_id, quantity: int) -> InventoryReservation:
    return InventoryReservation.objects.create(
        order=order,
        inventory_item_id=item_id,
        quantity=quantity,
        status=ReservationStatus.RESERVED
    )


@transaction.atomic
def consume_reservations(order) -> int:
    """Mark every open reservation of ``order`` consumed. Returns the count."""
    count = order.reservations.filter(
        status=ReservationStatus.RESERVED
    ).update(
        status=ReservationStatus.CONSUMED,
        consumed_at=timezone.now()
    )
    logger.info("Consumed %s reservations for order %s", count, order.order_number)
    return count


@transaction.atomic
def release_reservations(order, *, item_id: Optional[str] = None) -> int:
    """
    Release open reservations of ``order``.

    Args:
        order: OrderHeader whose reservations are released
        item_id: Restrict the release to one inventory item

    Returns:
        Number of reservations released
    """
    reservations = order.reservations.filter(status=ReservationStatus.RESERVED)
    if item_id is not None:
        reservations = reservations.filter(inventory_item_id=item_id)
    count = reservations.update(
        status=ReservationStatus.RELEASED,
        released_at=timezone.now()
    )
    if count:
        logger.info("Released %s reservations for order %s", count, order.order_number)
    return count
