"""
Order management service.

Creates POS orders and keeps their lines, department rows, reservations,
discounts and totals consistent. All money is integer cents.
"""

import logging
import string
import time
import uuid
from collections import defaultdict
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Sum, QuerySet
from django.utils.crypto import get_random_string

from apps.accounts.models import User
from apps.departments.services import resolve_department_code, split_department_code
from apps.discounts.models import DiscountRule, DiscountRuleType
from apps.discounts.services import calculate_discount_amount, get_customer_usage
from apps.inventory.services import (
    check_department_availability,
    reserve_for_order,
    release_reservations,
)
from apps.organisation.services import calculate_tax
from apps.orders.models import (
    Customer,
    OrderHeader,
    OrderLine,
    OrderDepartment,
    OrderDiscount,
    OrderStatus,
    PaymentStatus,
    LineStatus,
    DiscountType,
    FulfillmentStatus,
    PaymentRecordStatus,
)

from .exceptions import (
    OrderNotFoundError,
    CustomerNotFoundError,
    OrderLineNotFoundError,
    InvalidOrderError,
    InvalidOrderStateError,
    DiscountNotFoundError,
)

logger = logging.getLogger(__name__)

ORDER_NUMBER_CHARS = string.ascii_uppercase + string.digits
RULE_BASED_DISCOUNTS = (DiscountType.PERCENTAGE, DiscountType.BULK)


def generate_order_number() -> str:
    """``ORD-<epoch ms>-<9 upper-case alphanumerics>``"""
    millis = int(time.time() * 1000)
    return f"ORD-{millis}-{get_random_string(9, allowed_chars=ORDER_NUMBER_CHARS)}"


def get_customer(customer_id) -> Customer:
    try:
        return Customer.objects.get(id=customer_id)
    except (Customer.DoesNotExist, ValidationError):
        raise CustomerNotFoundError('Customer not found')


def get_order(order_id, *, for_update: bool = False) -> OrderHeader:
    """
    Get an order by id.

    Raises:
        OrderNotFoundError: If order doesn't exist
    """
    queryset = OrderHeader.objects.select_related('customer')
    if for_update:
        queryset = queryset.select_for_update(of=('self',))
    try:
        return queryset.get(id=order_id)
    except (OrderHeader.DoesNotExist, ValidationError):
        raise OrderNotFoundError('Order not found')


def get_order_detail(order_id) -> OrderHeader:
    """Order with every relation a receipt needs."""
    get_order(order_id)
    return (
        OrderHeader.objects
        .select_related('customer', 'created_by')
        .prefetch_related(
            'lines__department',
            'lines__section',
            'departments__department',
            'discounts',
            'payments',
            'fulfillments',
            'reservations',
        )
        .get(id=order_id)
    )


def list_orders(
    *,
    customer_id=None,
    status: Optional[str] = None,
    department_code: Optional[str] = None
) -> QuerySet:
    queryset = OrderHeader.objects.select_related('customer').prefetch_related('lines', 'payments')
    if customer_id:
        queryset = queryset.filter(customer_id=customer_id)
    if status:
        queryset = queryset.filter(status=status)
    if department_code:
        parent_code = split_department_code(department_code)[0]
        queryset = queryset.filter(departments__department__code=parent_code).distinct()
    return queryset


def _require_pending(order: OrderHeader, action: str) -> None:
    if order.status != OrderStatus.PENDING:
        raise InvalidOrderStateError(f"Cannot {action} {order.status} order")


def _require_unpaid(order: OrderHeader, action: str) -> None:
    # Completed payments must never exceed the total
    if order.payment_status != PaymentStatus.UNPAID:
        raise InvalidOrderStateError(f"Cannot {action} {order.payment_status} order")


def _is_uuid(value) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _resolve_items(items: List[dict]) -> List[dict]:
    """
    Resolve department codes and check stock of inventory-tracked departments.

    Quantities of the same product in the same department are summed
    before the check.

    Raises:
        DepartmentNotFoundError / SectionNotFoundError: For unknown codes
        InvalidOrderError: If items are empty or stock is short
    """
    if not items:
        raise InvalidOrderError('Order must contain at least one item')

    resolved = []
    demand = defaultdict(int)
    names = {}
    for item in items:
        department, section = resolve_department_code(item['department_code'])
        if department.tracks_inventory:
            if not _is_uuid(item['product_id']):
                raise InvalidOrderError(f"Invalid product id for {item['product_name']}")
            key = (department, str(item['product_id']))
            demand[key] += item['quantity']
            names[key] = item['product_name']
        resolved.append({**item, 'department': department, 'section': section})

    for key, quantity in demand.items():
        department, product_id = key
        availability = check_department_availability(
            department=department,
            item_id=product_id,
            quantity=quantity
        )
        if not availability['has_stock']:
            logger.warning(
                "Order rejected: %s short in %s (have %s, need %s)",
                product_id, department.code, availability['available'], quantity
            )
            raise InvalidOrderError(
                f"Insufficient stock for {names[key]}: "
                f"have {availability['available']}, need {quantity}"
            )
    return resolved


def _create_line(order: OrderHeader, item: dict, line_number: int) -> OrderLine:
    department = item['department']
    line = OrderLine.objects.create(
        order=order,
        line_number=line_number,
        department=department,
        section=item['section'],
        department_code=item['department_code'],
        product_id=str(item['product_id']),
        product_type=item.get('product_type', ''),
        product_name=item['product_name'],
        quantity=item['quantity'],
        unit_price=item['unit_price'],
        line_total=item['quantity'] * item['unit_price'],
        status=LineStatus.PENDING
    )
    OrderDepartment.objects.get_or_create(order=order, department=department)
    if department.tracks_inventory:
        reserve_for_order(order=order, item_id=line.product_id, quantity=line.quantity)
    return line


def _find_rule(reference: str) -> Optional[DiscountRule]:
    """A discount rule by id, falling back to its code."""
    if _is_uuid(reference):
        rule = DiscountRule.objects.filter(id=reference).first()
        if rule is not None:
            return rule
    return DiscountRule.objects.filter(code=str(reference).strip().upper()).first()


def _recalculate_totals(order: OrderHeader) -> OrderHeader:
    """
    Recompute subtotal, discount total, tax and total from the order rows.

    Cancelled and refunded lines do not count toward the subtotal.
    """
    subtotal = (
        order.lines
        .exclude(status__in=[LineStatus.CANCELLED, LineStatus.REFUNDED])
        .aggregate(total=Sum('line_total'))['total'] or 0
    )
    discount_total = order.discounts.aggregate(total=Sum('discount_amount'))['total'] or 0
    discount_total = min(discount_total, subtotal)
    tax = calculate_tax(subtotal - discount_total)

    order.subtotal = subtotal
    order.discount_total = discount_total
    order.tax = tax
    order.total = max(0, subtotal - discount_total + tax)
    order.save(update_fields=['subtotal', 'discount_total', 'tax', 'total', 'updated_at'])
    return order


@transaction.atomic
def create_order(
    *,
    customer_id,
    items: List[dict],
    discounts: Optional[List[str]] = None,
    notes: str = '',
    user: Optional[User] = None
) -> OrderHeader:
    """
    Create an order with its lines, department rows, reservations and discounts.

    Args:
        customer_id: Customer the order is billed to
        items: Dicts with product_id, product_type, product_name,
            department_code, quantity and unit_price (cents)
        discounts: Discount rule ids or codes to apply
        notes: Free text
        user: Staff member creating the order

    Returns:
        The created OrderHeader

    Raises:
        CustomerNotFoundError: If customer doesn't exist
        DepartmentNotFoundError: If a department code doesn't resolve
        SectionNotFoundError: If a section code doesn't resolve
        InvalidOrderError: On stock shortage or a rejected discount
    """
    customer = get_customer(customer_id)
    resolved = _resolve_items(items)

    order = OrderHeader.objects.create(
        order_number=generate_order_number(),
        customer=customer,
        notes=notes,
        created_by=user
    )
    for line_number, item in enumerate(resolved, start=1):
        _create_line(order, item, line_number)

    subtotal = sum(item['quantity'] * item['unit_price'] for item in resolved)
    accumulated = 0
    for reference in discounts or []:
        if not reference:
            continue
        rule = _find_rule(reference)
        if rule is None:
            raise InvalidOrderError(f"Discount not found: {reference}")
        if not rule.is_active:
            raise InvalidOrderError(f"Discount inactive: {rule.code}")
        if rule.min_order_amount and subtotal < rule.min_order_amount:
            raise InvalidOrderError(
                f"Minimum order amount of {rule.min_order_amount / 100:.2f} "
                f"required for discount {rule.code}"
            )

        amount = calculate_discount_amount(rule, subtotal)
        if accumulated + amount > subtotal:
            raise InvalidOrderError(f"Discounts exceed subtotal for code: {rule.code}")

        OrderDiscount.objects.create(
            order=order,
            discount_rule=rule,
            discount_type=_discount_type_for(rule),
            discount_code=rule.code,
            discount_amount=amount
        )
        rule.current_usage += 1
        rule.save(update_fields=['current_usage', 'updated_at'])
        accumulated += amount

    _recalculate_totals(order)
    logger.info(
        "Order %s created for %s: %s lines, total %s",
        order.order_number, customer.full_name, len(resolved), order.total
    )
    return order


def _discount_type_for(rule: DiscountRule) -> str:
    if rule.type == DiscountRuleType.FIXED:
        return DiscountType.FIXED
    return DiscountType.PERCENTAGE


@transaction.atomic
def apply_discount(
    *,
    order_id,
    discount_type: str,
    discount_code: str = '',
    discount_amount: Optional[int] = None
) -> OrderDiscount:
    """
    Apply a discount to an existing order.

    Percentage and bulk discounts come from the rule named by
    ``discount_code``. Fixed and employee discounts use
    ``discount_amount`` as given, in cents.

    Raises:
        OrderNotFoundError: If order doesn't exist
        DiscountNotFoundError: If the code doesn't match a rule
        InvalidOrderError: If the rule is unusable or the cumulative
            discount would exceed the subtotal
        InvalidOrderStateError: If payments were already recorded
    """
    order = get_order(order_id, for_update=True)
    _require_unpaid(order, 'discount a')
    rule = None

    if discount_type in RULE_BASED_DISCOUNTS:
        rule = DiscountRule.objects.select_for_update().filter(
            code=discount_code.strip().upper()
        ).first()
        if rule is None:
            raise DiscountNotFoundError('Discount code not found')
        if not rule.is_active:
            raise InvalidOrderError('Discount code is inactive')
        if rule.max_usage_per_customer:
            if get_customer_usage(rule, order.customer_id) >= rule.max_usage_per_customer:
                raise InvalidOrderError('Discount code usage limit exceeded')
        if rule.min_order_amount and order.subtotal < rule.min_order_amount:
            raise InvalidOrderError(
                f"Minimum order amount of {rule.min_order_amount / 100:.2f} required"
            )
        if rule.type == DiscountRuleType.FIXED:
            amount = int(rule.value)
        else:
            amount = calculate_discount_amount(rule, order.subtotal)
    else:
        if discount_amount is None or discount_amount < 0:
            raise InvalidOrderError('A non-negative discount amount is required')
        amount = discount_amount

    current = order.discounts.aggregate(total=Sum('discount_amount'))['total'] or 0
    if current + amount > order.subtotal:
        raise InvalidOrderError(
            f"Total discount ({current + amount}) cannot exceed subtotal ({order.subtotal})"
        )

    discount = OrderDiscount.objects.create(
        order=order,
        discount_rule=rule,
        discount_type=discount_type,
        discount_code=rule.code if rule else discount_code,
        discount_amount=amount
    )
    if rule is not None:
        rule.current_usage += 1
        rule.save(update_fields=['current_usage', 'updated_at'])

    _recalculate_totals(order)
    logger.info(
        "Discount %s of %s applied to %s",
        discount.discount_code or discount.discount_type, amount, order.order_number
    )
    return discount


@transaction.atomic
def add_line_item(*, order_id, item: dict) -> OrderLine:
    """
    Add a line to a pending order.

    Raises:
        OrderNotFoundError: If order doesn't exist
        InvalidOrderStateError: If the order is not pending
        InvalidOrderError: On stock shortage
    """
    order = get_order(order_id, for_update=True)
    _require_pending(order, 'add items to')

    resolved = _resolve_items([item])[0]
    last = order.lines.order_by('-line_number').values_list('line_number', flat=True).first()
    line = _create_line(order, resolved, (last or 0) + 1)

    _recalculate_totals(order)
    logger.info("Line %s added to %s", line.line_number, order.order_number)
    return line


@transaction.atomic
def remove_line_item(*, order_id, line_id) -> OrderHeader:
    """
    Remove a line from a pending order.

    Its reservation is released and the department row is dropped when no
    other line of that department remains.

    Raises:
        OrderNotFoundError: If order doesn't exist
        OrderLineNotFoundError: If the line isn't on this order
        InvalidOrderStateError: If the order is not pending or has payments
    """
    order = get_order(order_id, for_update=True)
    _require_pending(order, 'remove items from')
    _require_unpaid(order, 'remove items from')

    try:
        line = order.lines.select_related('department').get(id=line_id)
    except (OrderLine.DoesNotExist, ValidationError):
        raise OrderLineNotFoundError(f"Line {line_id} not found on order {order.order_number}")

    department = line.department
    if department.tracks_inventory:
        release_reservations(order, item_id=line.product_id)
        # Other lines of the same product keep their stock reserved
        for other in order.lines.filter(department=department, product_id=line.product_id).exclude(id=line.id):
            reserve_for_order(order=order, item_id=other.product_id, quantity=other.quantity)
    line.delete()

    if not order.lines.filter(department=department).exists():
        order.departments.filter(department=department).delete()

    _recalculate_totals(order)
    logger.info("Line %s removed from %s", line_id, order.order_number)
    return order


@transaction.atomic
def update_order_status(*, order_id, status: str) -> OrderHeader:
    """
    Set the order status; department rows follow.

    Raises:
        OrderNotFoundError: If order doesn't exist
        InvalidOrderError: If ``status`` is not an order status
    """
    if status not in OrderStatus.values:
        raise InvalidOrderError(f"Invalid order status: {status}")

    order = get_order(order_id, for_update=True)
    order.status = status
    order.save(update_fields=['status', 'updated_at'])
    order.departments.update(status=status)

    logger.info("Order %s status set to %s", order.order_number, status)
    return order


@transaction.atomic
def cancel_order(*, order_id, reason: str = '') -> OrderHeader:
    """
    Cancel a pending order.

    Reservations are released. Payments already taken are marked refunded.

    Raises:
        OrderNotFoundError: If order doesn't exist
        InvalidOrderStateError: If the order is not pending
    """
    order = get_order(order_id, for_update=True)
    if order.status != OrderStatus.PENDING:
        logger.warning("Refused to cancel %s order %s", order.status, order.order_number)
        raise InvalidOrderStateError(
            f"Cannot cancel {order.status} orders. Use refund for orders with payment."
        )

    has_payments = order.payments.exists()
    order.status = OrderStatus.CANCELLED
    if has_payments:
        order.payment_status = PaymentStatus.REFUNDED
    if reason:
        order.notes = f"{order.notes}\nCancelled: {reason}".strip()
    order.save(update_fields=['status', 'payment_status', 'notes', 'updated_at'])

    order.departments.update(status=OrderStatus.CANCELLED)
    release_reservations(order)
    order.fulfillments.exclude(status=FulfillmentStatus.FULFILLED).update(
        status=FulfillmentStatus.CANCELLED
    )
    order.lines.exclude(status=LineStatus.FULFILLED).update(status=LineStatus.CANCELLED)
    if has_payments:
        order.payments.update(status=PaymentRecordStatus.REFUNDED)

    logger.info("Order %s cancelled", order.order_number)
    return order


@transaction.atomic
def refund_order(*, order_id, reason: str = '') -> OrderHeader:
    """
    Refund a pending order that has taken payment.

    Raises:
        OrderNotFoundError: If order doesn't exist
        InvalidOrderStateError: If the order is not pending or has no payment
    """
    order = get_order(order_id, for_update=True)
    if order.status != OrderStatus.PENDING:
        raise InvalidOrderStateError(
            f"Cannot refund {order.status} orders. Only pending orders can be refunded."
        )
    if order.payment_status not in (PaymentStatus.PAID, PaymentStatus.PARTIAL):
        raise InvalidOrderStateError(
            f"Order payment status is {order.payment_status}. "
            f"Only paid/partial orders can be refunded."
        )

    order.status = OrderStatus.REFUNDED
    order.payment_status = PaymentStatus.REFUNDED
    if reason:
        order.notes = f"{order.notes}\nRefunded: {reason}".strip()
    order.save(update_fields=['status', 'payment_status', 'notes', 'updated_at'])

    order.lines.update(status=LineStatus.REFUNDED)
    order.departments.update(status=OrderStatus.REFUNDED)
    order.fulfillments.update(status=FulfillmentStatus.REFUNDED)
    order.payments.update(status=PaymentRecordStatus.REFUNDED)
    release_reservations(order)

    logger.info("Order %s refunded", order.order_number)
    return order


def get_order_stats() -> dict:
    orders = OrderHeader.objects.all()
    return {
        'total_orders': orders.count(),
        'active_orders': orders.filter(
            status__in=[OrderStatus.PENDING, OrderStatus.PROCESSING]
        ).count(),
        'completed_orders': orders.filter(status=OrderStatus.COMPLETED).count(),
        'cancelled_orders': orders.filter(status=OrderStatus.CANCELLED).count(),
        'total_revenue': orders.filter(
            status=OrderStatus.COMPLETED
        ).aggregate(total=Sum('total'))['total'] or 0,
    }
