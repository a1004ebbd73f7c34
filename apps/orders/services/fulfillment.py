"""
Department fulfillment.

Departments work through the lines routed to them. Lines move from
pending to processing to fulfilled, and an order is fulfilled once
nothing on it is left to serve.
"""

import logging
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, QuerySet
from django.utils import timezone

from apps.departments.services import get_department
from apps.orders.models import (
    OrderHeader,
    OrderLine,
    OrderDepartment,
    OrderFulfillment,
    OrderStatus,
    LineStatus,
    FulfillmentStatus,
)

from .exceptions import (
    OrderNotFoundError,
    OrderLineNotFoundError,
    InvalidOrderError,
    InvalidOrderStateError,
)

logger = logging.getLogger(__name__)

STAT_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.FULFILLED,
    OrderStatus.COMPLETED,
)
DONE_STATUSES = (OrderStatus.FULFILLED, OrderStatus.COMPLETED)
CLOSED_LINE_STATUSES = (LineStatus.FULFILLED, LineStatus.CANCELLED)


def get_department_stats(code: str) -> dict:
    """Order-department rows of a department counted by status."""
    department = get_department(code)
    counts = dict(
        OrderDepartment.objects
        .filter(department=department)
        .values_list('status')
        .annotate(count=Count('id'))
    )
    stats = {status: counts.get(status, 0) for status in STAT_STATUSES}
    stats['total'] = sum(counts.values())
    return stats


def get_department_orders(code: str, *, status: Optional[str] = None) -> QuerySet:
    department = get_department(code)
    queryset = (
        OrderHeader.objects
        .filter(departments__department=department)
        .select_related('customer')
        .prefetch_related('lines')
        .distinct()
    )
    if status:
        queryset = queryset.filter(departments__department=department, departments__status=status)
    return queryset


def get_department_pending_items(code: str) -> QuerySet:
    """Lines still to serve in a department, oldest first."""
    department = get_department(code)
    return (
        OrderLine.objects
        .filter(
            department=department,
            status__in=[LineStatus.PENDING, LineStatus.PROCESSING]
        )
        .exclude(order__status=OrderStatus.CANCELLED)
        .select_related('order', 'section')
        .order_by('created_at')
    )


@transaction.atomic
def update_department_fulfillment(*, order_id, code: str, status: str) -> OrderDepartment:
    """
    Set a department's status on an order.

    When the new status is fulfilled and every department of the order is
    fulfilled or completed, the order becomes fulfilled.

    Raises:
        DepartmentNotFoundError: If department doesn't exist
        OrderNotFoundError: If the order has no row for this department
        InvalidOrderError: If ``status`` is not an order status
    """
    if status not in OrderStatus.values:
        raise InvalidOrderError(f"Invalid status: {status}")

    department = get_department(code)
    try:
        row = (
            OrderDepartment.objects
            .select_for_update()
            .select_related('order')
            .get(order_id=order_id, department=department)
        )
    except (OrderDepartment.DoesNotExist, ValidationError):
        raise OrderNotFoundError(f"Order {order_id} has no lines for department {department.code}")

    row.status = status
    row.save(update_fields=['status', 'updated_at'])

    order = row.order
    if status == OrderStatus.FULFILLED:
        open_rows = order.departments.exclude(status__in=DONE_STATUSES)
        if not open_rows.exists():
            order.status = OrderStatus.FULFILLED
            order.save(update_fields=['status', 'updated_at'])
            logger.info("Order %s fulfilled by all departments", order.order_number)

    logger.info("Department %s set order %s to %s", department.code, order.order_number, status)
    return row


def _get_line(line_id, code: str) -> OrderLine:
    """Lock a line routed to the department ``code``."""
    department = get_department(code)
    try:
        return (
            OrderLine.objects
            .select_for_update()
            .select_related('order', 'department')
            .get(id=line_id, department=department)
        )
    except (OrderLine.DoesNotExist, ValidationError):
        raise OrderLineNotFoundError(f"Line {line_id} not found in department {department.code}")


@transaction.atomic
def mark_line_in_progress(*, line_id, code: str) -> OrderFulfillment:
    """
    Start work on a line.

    Raises:
        DepartmentNotFoundError: If department doesn't exist
        OrderLineNotFoundError: If the line doesn't exist or belongs to
            another department
        InvalidOrderStateError: If the line is closed or its order cancelled
    """
    line = _get_line(line_id, code)
    if line.status in CLOSED_LINE_STATUSES or line.status == LineStatus.REFUNDED:
        raise InvalidOrderStateError(f"Line is already {line.status}")
    if line.order.status in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
        raise InvalidOrderStateError(f"Order is {line.order.status}")

    line.status = LineStatus.PROCESSING
    line.save(update_fields=['status', 'updated_at'])

    fulfillment = line.fulfillments.filter(status=FulfillmentStatus.IN_PROGRESS).first()
    if fulfillment is None:
        fulfillment = OrderFulfillment.objects.create(
            order=line.order,
            line=line,
            status=FulfillmentStatus.IN_PROGRESS
        )
    logger.info("Line %s of %s in progress", line.line_number, line.order.order_number)
    return fulfillment


@transaction.atomic
def complete_line_fulfillment(
    *,
    line_id,
    code: str,
    quantity: Optional[int] = None
) -> OrderFulfillment:
    """
    Finish a line.

    The in-progress fulfillment (created when missing) records the served
    quantity. Once every line is fulfilled or cancelled the order is
    fulfilled.

    Args:
        line_id: Line being served
        code: Department serving the line
        quantity: Units served, defaults to the line quantity

    Raises:
        DepartmentNotFoundError: If department doesn't exist
        OrderLineNotFoundError: If the line doesn't exist or belongs to
            another department
        InvalidOrderError: If quantity is outside 1..line quantity
        InvalidOrderStateError: If the line is closed or its order cancelled
    """
    line = _get_line(line_id, code)
    quantity = line.quantity if quantity is None else quantity
    if quantity < 1 or quantity > line.quantity:
        raise InvalidOrderError(f"Quantity must be between 1 and {line.quantity}")
    if line.status in CLOSED_LINE_STATUSES or line.status == LineStatus.REFUNDED:
        raise InvalidOrderStateError(f"Line is already {line.status}")
    if line.order.status in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
        raise InvalidOrderStateError(f"Order is {line.order.status}")

    now = timezone.now()
    line.status = LineStatus.FULFILLED
    line.save(update_fields=['status', 'updated_at'])

    fulfillment = line.fulfillments.filter(status=FulfillmentStatus.IN_PROGRESS).first()
    if fulfillment is None:
        fulfillment = OrderFulfillment(order=line.order, line=line)
    fulfillment.status = FulfillmentStatus.FULFILLED
    fulfillment.fulfilled_quantity = quantity
    fulfillment.fulfilled_at = now
    fulfillment.save()

    order = line.order
    if not order.lines.exclude(status__in=CLOSED_LINE_STATUSES).exists():
        order.status = OrderStatus.FULFILLED
        order.save(update_fields=['status', 'updated_at'])
        logger.info("Order %s fulfilled", order.order_number)

    logger.info("Line %s of %s fulfilled (%s units)", line.line_number, order.order_number, quantity)
    return fulfillment
