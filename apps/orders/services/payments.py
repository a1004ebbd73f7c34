"""
Order payments.

A payment that completes the order moves it to processing and turns the
stock reserved for it into a sale.
"""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.accounts.models import User
from apps.departments.models import Department
from apps.inventory.services import consume_department_stock, consume_reservations
from apps.orders.models import (
    OrderHeader,
    OrderPayment,
    OrderStatus,
    PaymentStatus,
    PaymentRecordStatus,
    LineStatus,
)

from .exceptions import InvalidOrderStateError, PaymentError
from .order_management import get_order

logger = logging.getLogger(__name__)

# Served tabs stay payable until settled
PAYABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.FULFILLED)


def get_total_paid(order: OrderHeader) -> int:
    """Sum of completed payments in cents."""
    return order.payments.filter(
        status=PaymentRecordStatus.COMPLETED
    ).aggregate(total=Sum('amount'))['total'] or 0


def _consume_stock_for_sale(order: OrderHeader, user: Optional[User]) -> None:
    lines = (
        order.lines
        .select_related('department')
        .filter(department__tracks_inventory=True)
        .exclude(status__in=[LineStatus.CANCELLED, LineStatus.REFUNDED])
    )
    for line in lines:
        consume_department_stock(
            department=line.department,
            item_id=line.product_id,
            quantity=line.quantity,
            reason='sale',
            reference=str(order.id),
            user=user
        )
    consume_reservations(order)


def _stamp_last_transaction(order: OrderHeader, payment: OrderPayment, user: Optional[User]) -> None:
    department_ids = order.lines.values_list('department_id', flat=True).distinct()
    departments = Department.objects.select_for_update().filter(id__in=list(department_ids))
    for department in departments:
        department.metadata = {
            **(department.metadata or {}),
            'lastTransaction': {
                'orderId': str(order.id),
                'paymentId': str(payment.id),
                'amount': payment.amount,
                'initiatedBy': str(user.id) if user else None,
                'at': timezone.now().isoformat(),
            },
        }
        department.save(update_fields=['metadata', 'updated_at'])


@transaction.atomic
def record_payment(
    *,
    order_id,
    amount: int,
    payment_method: str,
    transaction_reference: str = '',
    user: Optional[User] = None
) -> OrderPayment:
    """
    Record a completed payment against a pending or served (fulfilled)
    order.

    When the payment completes the order, in the same transaction:
    the order and its department rows move to processing, department
    stock of inventory-tracked lines is consumed as a sale, reservations
    are consumed, and every involved department records the payment as
    its ``lastTransaction``.

    Args:
        order_id: Order being paid
        amount: Amount in cents, > 0
        payment_method: One of PaymentMethod
        transaction_reference: External reference (card slip, transfer id)
        user: Cashier recording the payment

    Returns:
        The created OrderPayment

    Raises:
        OrderNotFoundError: If order doesn't exist
        PaymentError: If amount is not positive or exceeds what is due
        InvalidOrderStateError: If the order is not pending or fulfilled, or
            is already paid
        InsufficientStockError: If a department can't cover a sold line;
            nothing is recorded
    """
    if amount is None or amount <= 0:
        raise PaymentError('Payment amount must be greater than zero')

    order = get_order(order_id, for_update=True)
    if order.status not in PAYABLE_STATUSES:
        raise InvalidOrderStateError(f"Cannot record payment on {order.status} order")
    if order.payment_status == PaymentStatus.PAID:
        raise InvalidOrderStateError('Order is already paid')

    total_paid = get_total_paid(order)
    if total_paid + amount > order.total:
        logger.warning(
            "Payment of %s rejected for %s: paid %s of %s",
            amount, order.order_number, total_paid, order.total
        )
        raise PaymentError('Payment amount exceeds order total')

    payment = OrderPayment.objects.create(
        order=order,
        amount=amount,
        payment_method=payment_method,
        status=PaymentRecordStatus.COMPLETED,
        transaction_reference=transaction_reference,
        processed_at=timezone.now(),
        created_by=user
    )

    if total_paid + amount >= order.total:
        # A tab that was already served is closed by its payment
        if order.status == OrderStatus.FULFILLED:
            order.status = OrderStatus.COMPLETED
        else:
            order.status = OrderStatus.PROCESSING
        order.payment_status = PaymentStatus.PAID
        order.save(update_fields=['status', 'payment_status', 'updated_at'])
        order.departments.update(status=order.status)

        _consume_stock_for_sale(order, user)
        _stamp_last_transaction(order, payment, user)
        logger.info("Order %s fully paid, moved to %s", order.order_number, order.status)
    else:
        order.payment_status = PaymentStatus.PARTIAL
        order.save(update_fields=['payment_status', 'updated_at'])
        logger.info(
            "Partial payment of %s on %s (%s of %s)",
            amount, order.order_number, total_paid + amount, order.total
        )

    return payment


def get_payment_summary(order_id) -> dict:
    """Totals and payments of an order."""
    order = get_order(order_id)
    total_paid = get_total_paid(order)
    return {
        'order_id': str(order.id),
        'order_number': order.order_number,
        'order_total': order.total,
        'total_paid': total_paid,
        'remaining': max(0, order.total - total_paid),
        'payment_status': order.payment_status,
        'payments': list(order.payments.all()),
    }
