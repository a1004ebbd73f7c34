"""
Settlement of open orders: pending ones and served (fulfilled) tabs that
are not yet paid.

Open orders are settled by payments recorded at the terminal, one at a
time or in an end-of-day batch. The reports here read completed
payments only.
"""

import logging
from datetime import timedelta
from typing import List, Optional

from django.db.models import Sum, Count, Prefetch, Q
from django.utils import timezone

from apps.departments.services import split_department_code
from apps.inventory.services import InventoryServiceError
from apps.orders.models import (
    OrderHeader,
    OrderPayment,
    OrderStatus,
    PaymentRecordStatus,
    PaymentStatus,
)

from .exceptions import OrdersServiceError, InvalidOrderStateError
from .order_management import get_order, get_customer
from .payments import record_payment, PAYABLE_STATUSES

logger = logging.getLogger(__name__)

DEFAULT_OPEN_ORDERS_LIMIT = 50


def _with_completed_payments(queryset):
    return queryset.prefetch_related(
        Prefetch(
            'payments',
            queryset=OrderPayment.objects.filter(status=PaymentRecordStatus.COMPLETED),
            to_attr='completed_payments'
        )
    )


def _paid(order: OrderHeader) -> int:
    return sum(payment.amount for payment in order.completed_payments)


def _open_orders(*, department_code: Optional[str] = None, customer_id=None):
    queryset = OrderHeader.objects.filter(
        Q(status=OrderStatus.PENDING)
        | Q(
            status=OrderStatus.FULFILLED,
            payment_status__in=[PaymentStatus.UNPAID, PaymentStatus.PARTIAL]
        )
    )
    if department_code:
        parent_code = split_department_code(department_code)[0]
        queryset = queryset.filter(departments__department__code=parent_code).distinct()
    if customer_id:
        queryset = queryset.filter(customer_id=customer_id)
    return queryset


def get_open_orders(
    *,
    department_code: Optional[str] = None,
    customer_id=None,
    limit: int = DEFAULT_OPEN_ORDERS_LIMIT,
    offset: int = 0
) -> List[dict]:
    """Pending orders, newest first, with what is still due on each."""
    queryset = (
        _open_orders(department_code=department_code, customer_id=customer_id)
        .select_related('customer')
        .annotate(item_count=Count('lines', distinct=True))
        .order_by('-created_at')
    )
    orders = _with_completed_payments(queryset)[offset:offset + limit]

    results = []
    for order in orders:
        paid = _paid(order)
        results.append({
            'id': str(order.id),
            'order_number': order.order_number,
            'customer_id': str(order.customer_id),
            'customer_name': order.customer.full_name,
            'total': order.total,
            'total_paid': paid,
            'amount_due': max(0, order.total - paid),
            'created_at': order.created_at,
            'item_count': order.item_count,
            'status': order.status,
        })
    return results


def settle_order(
    *,
    order_id,
    amount: int,
    payment_method: str,
    transaction_reference: str = '',
    user=None
) -> dict:
    """
    Record a payment on an open order.

    Returns:
        Dict with order_id, order_number, payment_id, payment_amount,
        total_paid, amount_due, is_fully_paid and message

    Raises:
        OrderNotFoundError: If order doesn't exist
        InvalidOrderStateError: If the order is not pending or fulfilled
        PaymentError: If the amount is rejected
    """
    order = get_order(order_id)
    if order.status not in PAYABLE_STATUSES:
        raise InvalidOrderStateError(
            f"Order is {order.status}; only pending or served orders can be settled"
        )

    payment = record_payment(
        order_id=order.id,
        amount=amount,
        payment_method=payment_method,
        transaction_reference=transaction_reference,
        user=user
    )

    order.refresh_from_db()
    total_paid = (
        order.payments
        .filter(status=PaymentRecordStatus.COMPLETED)
        .aggregate(total=Sum('amount'))['total'] or 0
    )
    is_fully_paid = total_paid >= order.total
    return {
        'order_id': str(order.id),
        'order_number': order.order_number,
        'payment_id': str(payment.id),
        'payment_amount': payment.amount,
        'total_paid': total_paid,
        'amount_due': max(0, order.total - total_paid),
        'is_fully_paid': is_fully_paid,
        'message': (
            f'Order fully paid - moving to {order.status}'
            if is_fully_paid else 'Partial payment recorded'
        ),
    }


def get_settlement_summary(*, department_code: Optional[str] = None) -> dict:
    orders = list(_with_completed_payments(_open_orders(department_code=department_code)))

    total_orders = len(orders)
    total_amount = sum(order.total for order in orders)
    total_paid = sum(_paid(order) for order in orders)

    now = timezone.now()
    return {
        'total_orders': total_orders,
        'total_amount': total_amount,
        'total_paid': total_paid,
        'total_due': total_amount - total_paid,
        'average_order_value': round(total_amount / total_orders) if total_orders else 0,
        'overdue_24h': sum(1 for order in orders if order.created_at < now - timedelta(hours=24)),
        'overdue_7d': sum(1 for order in orders if order.created_at < now - timedelta(days=7)),
    }


def batch_settle(payments: List[dict], *, user=None) -> dict:
    """
    Settle several orders, each independently.

    A failing payment is reported in ``errors`` and does not affect the
    others.

    Args:
        payments: Dicts with order_id, amount, payment_method and
            optional transaction_reference
    """
    results = []
    errors = []
    for entry in payments:
        try:
            results.append(settle_order(
                order_id=entry['order_id'],
                amount=entry['amount'],
                payment_method=entry['payment_method'],
                transaction_reference=entry.get('transaction_reference', ''),
                user=user
            ))
        except (OrdersServiceError, InventoryServiceError) as e:
            logger.warning("Batch settlement failed for order %s: %s", entry['order_id'], e)
            errors.append({'order_id': str(entry['order_id']), 'error': str(e)})

    logger.info("Batch settlement: %s settled, %s failed", len(results), len(errors))
    return {
        'successful': len(results),
        'failed': len(errors),
        'results': results,
        'errors': errors,
        'summary': {
            'total_processed': len(payments),
            'total_amount_settled': sum(result['payment_amount'] for result in results),
        },
    }


def get_customer_balance(customer_id) -> dict:
    """Outstanding amount over the customer's pending orders."""
    customer = get_customer(customer_id)
    orders = list(_with_completed_payments(
        _open_orders(customer_id=customer.id).order_by('created_at')
    ))
    return {
        'customer_id': str(customer.id),
        'total_outstanding': sum(order.total - _paid(order) for order in orders),
        'order_count': len(orders),
        'orders': [
            {
                'order_id': str(order.id),
                'order_number': order.order_number,
                'total': order.total,
                'paid': _paid(order),
            }
            for order in orders
        ],
    }


def get_daily_settlement_report(report_date=None) -> dict:
    """Activity of the orders created on ``report_date`` (default today)."""
    report_date = report_date or timezone.localdate()
    orders = list(_with_completed_payments(
        OrderHeader.objects
        .filter(created_at__date=report_date)
        .annotate(line_count=Count('lines', distinct=True))
    ))

    pending = [order for order in orders if order.status == OrderStatus.PENDING]
    completed = [
        order for order in orders
        if order.status in (OrderStatus.COMPLETED, OrderStatus.PROCESSING)
    ]
    return {
        'report_date': report_date.isoformat(),
        'total_orders': len(orders),
        'pending_orders': len(pending),
        'completed_orders': len(completed),
        'total_revenue': sum(order.total for order in orders),
        'pending_settlement': sum(order.total - _paid(order) for order in pending),
        'settled_amount': sum(order.total for order in completed),
        'items_served': sum(order.line_count for order in orders),
    }
