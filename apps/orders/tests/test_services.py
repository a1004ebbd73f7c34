"""
Order management service tests: creation, discounts, lines and status changes.
"""

import logging
import re
import uuid
import pytest
from decimal import Decimal

from apps.discounts.models import DiscountRule, DiscountRuleType
from apps.departments.services.exceptions import DepartmentNotFoundError, SectionNotFoundError
from apps.inventory.models import InventoryReservation, ReservationStatus
from apps.orders.models import (
    OrderHeader,
    OrderDepartment,
    OrderStatus,
    PaymentStatus,
    LineStatus,
    PaymentRecordStatus,
    DiscountType,
)
from apps.orders.services import (
    create_order,
    apply_discount,
    add_line_item,
    remove_line_item,
    update_order_status,
    cancel_order,
    refund_order,
    record_payment,
    list_orders,
    get_order_stats,
)
from apps.orders.services.exceptions import (
    CustomerNotFoundError,
    InvalidOrderError,
    InvalidOrderStateError,
    DiscountNotFoundError,
    OrderLineNotFoundError,
)


@pytest.mark.django_db
class TestCreateOrder:

    def test_totals_in_cents(self, order):
        assert order.subtotal == 4200
        assert order.discount_total == 0
        assert order.tax == 420
        assert order.total == 4620
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.UNPAID

    def test_order_number_format(self, order):
        assert re.fullmatch(r'ORD-\d+-[A-Z0-9]{9}', order.order_number)

    def test_lines_and_departments(self, order, restaurant, bar_club):
        lines = list(order.lines.order_by('line_number'))

        assert [line.line_number for line in lines] == [1, 2]
        assert lines[0].section.slug == 'terrace'
        assert lines[0].department == restaurant
        assert lines[0].line_total == 2500
        assert set(order.departments.values_list('department__code', flat=True)) == {'RESTAURANT', 'BAR_CLUB'}

    def test_tracked_department_reserves_stock(self, order, gin):
        reservation = InventoryReservation.objects.get(order=order)

        assert reservation.inventory_item == gin
        assert reservation.quantity == 2
        assert reservation.status == ReservationStatus.RESERVED

    def test_tax_disabled(self, tax_settings, customer, burger_item):
        tax_settings.enabled = False
        tax_settings.save()

        order = create_order(customer_id=customer.id, items=[burger_item])
        assert order.tax == 0
        assert order.total == 2500

    def test_empty_items(self, customer):
        with pytest.raises(InvalidOrderError, match='at least one item'):
            create_order(customer_id=customer.id, items=[])

    def test_unknown_customer(self, restaurant, burger_item):
        with pytest.raises(CustomerNotFoundError):
            create_order(customer_id=uuid.uuid4(), items=[burger_item])

    def test_unknown_department(self, customer, burger_item):
        burger_item['department_code'] = 'SPA'
        with pytest.raises(DepartmentNotFoundError):
            create_order(customer_id=customer.id, items=[burger_item])

    def test_unknown_section(self, customer, burger_item):
        burger_item['department_code'] = 'RESTAURANT:rooftop'
        with pytest.raises(SectionNotFoundError):
            create_order(customer_id=customer.id, items=[burger_item])

    def test_demand_is_summed_per_product(self, tax_settings, customer, gin_item):
        """6 + 5 units exceed the 10 held even though each line fits."""
        second = {**gin_item, 'quantity': 5}
        gin_item['quantity'] = 6

        with pytest.raises(InvalidOrderError, match='Insufficient stock for Gin Tonic: have 10, need 11'):
            create_order(customer_id=customer.id, items=[gin_item, second])
        assert not OrderHeader.objects.exists()

    def test_tracked_department_needs_inventory_id(self, customer, gin_item):
        gin_item['product_id'] = 'gin-tonic'
        with pytest.raises(InvalidOrderError):
            create_order(customer_id=customer.id, items=[gin_item])


@pytest.mark.django_db
class TestCreateOrderDiscounts:

    def test_percentage_discount_by_code(self, tax_settings, customer, burger_item, gin_item, percent_rule):
        order = create_order(customer_id=customer.id, items=[burger_item, gin_item], discounts=['SUMMER10'])

        assert order.discount_total == 420
        # Tax applies to the discounted amount
        assert order.tax == 378
        assert order.total == 4158

        percent_rule.refresh_from_db()
        assert percent_rule.current_usage == 1

    def test_discount_by_id(self, tax_settings, customer, burger_item, percent_rule):
        order = create_order(customer_id=customer.id, items=[burger_item], discounts=[str(percent_rule.id)])

        discount = order.discounts.get()
        assert discount.discount_code == 'SUMMER10'
        assert discount.discount_type == DiscountType.PERCENTAGE
        assert discount.discount_amount == 250

    def test_fixed_rule(self, tax_settings, customer, burger_item, fixed_rule):
        order = create_order(customer_id=customer.id, items=[burger_item], discounts=['FIVEOFF'])

        assert order.discount_total == 500
        assert order.discounts.get().discount_type == DiscountType.FIXED

    def test_unknown_discount(self, customer, burger_item):
        with pytest.raises(InvalidOrderError, match='Discount not found: NOPE'):
            create_order(customer_id=customer.id, items=[burger_item], discounts=['NOPE'])

    def test_inactive_discount(self, customer, burger_item, percent_rule):
        percent_rule.is_active = False
        percent_rule.save()

        with pytest.raises(InvalidOrderError, match='Discount inactive: SUMMER10'):
            create_order(customer_id=customer.id, items=[burger_item], discounts=['SUMMER10'])

    def test_minimum_order_amount(self, customer, gin_item, fixed_rule):
        gin_item['quantity'] = 1
        with pytest.raises(InvalidOrderError, match='Minimum order amount of 20.00 required for discount FIVEOFF'):
            create_order(customer_id=customer.id, items=[gin_item], discounts=['FIVEOFF'])

    def test_cumulative_discounts_cannot_exceed_subtotal(self, customer, burger_item, percent_rule):
        DiscountRule.objects.create(
            code='ALLFREE',
            name='Everything free',
            type=DiscountRuleType.PERCENTAGE,
            value=Decimal('100'),
        )
        with pytest.raises(InvalidOrderError, match='Discounts exceed subtotal for code: SUMMER10'):
            create_order(customer_id=customer.id, items=[burger_item], discounts=['ALLFREE', 'SUMMER10'])
        assert not OrderHeader.objects.exists()


@pytest.mark.django_db
class TestApplyDiscount:

    def test_rule_based(self, order, percent_rule):
        discount = apply_discount(order_id=order.id, discount_type='percentage', discount_code='summer10')

        assert discount.discount_amount == 420
        order.refresh_from_db()
        assert order.discount_total == 420
        assert order.total == 4158

    def test_fixed_rule_amount_is_its_value(self, order, fixed_rule):
        discount = apply_discount(order_id=order.id, discount_type='percentage', discount_code='FIVEOFF')
        assert discount.discount_amount == 500

    def test_manual_employee_discount(self, order):
        discount = apply_discount(order_id=order.id, discount_type='employee', discount_amount=600)

        assert discount.discount_rule is None
        order.refresh_from_db()
        assert order.discount_total == 600

    def test_unknown_code(self, order):
        with pytest.raises(DiscountNotFoundError):
            apply_discount(order_id=order.id, discount_type='percentage', discount_code='NOPE')

    def test_per_customer_limit(self, order, percent_rule):
        percent_rule.max_usage_per_customer = 1
        percent_rule.save()

        apply_discount(order_id=order.id, discount_type='percentage', discount_code='SUMMER10')
        with pytest.raises(InvalidOrderError, match='usage limit exceeded'):
            apply_discount(order_id=order.id, discount_type='percentage', discount_code='SUMMER10')

    def test_cannot_exceed_subtotal(self, order):
        apply_discount(order_id=order.id, discount_type='fixed', discount_amount=4000)
        with pytest.raises(InvalidOrderError, match=r'Total discount \(4300\) cannot exceed subtotal \(4200\)'):
            apply_discount(order_id=order.id, discount_type='fixed', discount_amount=300)

    def test_manual_discount_needs_amount(self, order):
        with pytest.raises(InvalidOrderError):
            apply_discount(order_id=order.id, discount_type='fixed')

    def test_manual_discount_logged_by_type(self, order, caplog, monkeypatch):
        monkeypatch.setattr(logging.getLogger('apps'), 'propagate', True)
        with caplog.at_level('INFO', logger='apps.orders.services.order_management'):
            apply_discount(order_id=order.id, discount_type='employee', discount_amount=600)

        assert f'Discount employee of 600 applied to {order.order_number}' in caplog.text

    def test_rejected_after_partial_payment(self, order):
        record_payment(order_id=order.id, amount=4000, payment_method='cash')

        with pytest.raises(InvalidOrderStateError, match='Cannot discount a partial order'):
            apply_discount(order_id=order.id, discount_type='fixed', discount_amount=2000)
        order.refresh_from_db()
        assert order.total == 4620
        assert not order.discounts.exists()

        record_payment(order_id=order.id, amount=620, payment_method='cash')
        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.PAID


@pytest.mark.django_db
class TestLineItems:

    def test_add_line(self, order, burger_item):
        burger_item['quantity'] = 1
        line = add_line_item(order_id=order.id, item=burger_item)

        assert line.line_number == 3
        order.refresh_from_db()
        assert order.subtotal == 5450
        assert order.total == 5995

    def test_add_line_checks_stock(self, order, gin_item):
        gin_item['quantity'] = 11
        with pytest.raises(InvalidOrderError, match='Insufficient stock'):
            add_line_item(order_id=order.id, item=gin_item)

    def test_add_to_cancelled_order(self, order, burger_item):
        cancel_order(order_id=order.id)
        with pytest.raises(InvalidOrderStateError, match='Cannot add items to cancelled order'):
            add_line_item(order_id=order.id, item=burger_item)

    def test_remove_line_releases_reservation(self, order, bar_club):
        gin_line = order.lines.get(department=bar_club)

        order = remove_line_item(order_id=order.id, line_id=gin_line.id)

        assert order.subtotal == 2500
        assert order.tax == 250
        assert order.total == 2750
        assert InventoryReservation.objects.get(order=order).status == ReservationStatus.RELEASED
        assert not OrderDepartment.objects.filter(order=order, department=bar_club).exists()

    def test_remove_keeps_other_lines_of_same_product_reserved(self, order, gin_item, bar_club):
        add_line_item(order_id=order.id, item={**gin_item, 'quantity': 3})
        first = order.lines.get(department=bar_club, line_number=2)

        remove_line_item(order_id=order.id, line_id=first.id)

        reserved = InventoryReservation.objects.filter(order=order, status=ReservationStatus.RESERVED)
        assert list(reserved.values_list('quantity', flat=True)) == [3]
        assert OrderDepartment.objects.filter(order=order, department=bar_club).exists()

    def test_remove_unknown_line(self, order):
        with pytest.raises(OrderLineNotFoundError):
            remove_line_item(order_id=order.id, line_id=uuid.uuid4())

    def test_remove_rejected_after_partial_payment(self, order, restaurant):
        burger_line = order.lines.get(department=restaurant)
        record_payment(order_id=order.id, amount=4000, payment_method='cash')

        with pytest.raises(InvalidOrderStateError, match='Cannot remove items from partial order'):
            remove_line_item(order_id=order.id, line_id=burger_line.id)
        order.refresh_from_db()
        assert order.total == 4620
        assert order.lines.filter(id=burger_line.id).exists()


@pytest.mark.django_db
class TestStatusChanges:

    def test_update_status_moves_departments(self, order):
        update_order_status(order_id=order.id, status='completed')

        order.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED
        assert set(order.departments.values_list('status', flat=True)) == {OrderStatus.COMPLETED}

    def test_update_to_unknown_status(self, order):
        with pytest.raises(InvalidOrderError):
            update_order_status(order_id=order.id, status='lost')

    def test_cancel_releases_everything(self, order):
        cancel_order(order_id=order.id, reason='Guest left')

        order.refresh_from_db()
        assert order.status == OrderStatus.CANCELLED
        assert order.payment_status == PaymentStatus.UNPAID
        assert order.notes == 'Table 4\nCancelled: Guest left'
        assert set(order.lines.values_list('status', flat=True)) == {LineStatus.CANCELLED}
        assert InventoryReservation.objects.get(order=order).status == ReservationStatus.RELEASED

    def test_cancel_with_partial_payment_refunds_it(self, order):
        record_payment(order_id=order.id, amount=1000, payment_method='cash')

        cancel_order(order_id=order.id)

        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.REFUNDED
        assert order.payments.get().status == PaymentRecordStatus.REFUNDED

    def test_cannot_cancel_paid_order(self, order):
        record_payment(order_id=order.id, amount=order.total, payment_method='card')

        with pytest.raises(InvalidOrderStateError, match='Use refund'):
            cancel_order(order_id=order.id)

    def test_refund_partially_paid(self, order):
        record_payment(order_id=order.id, amount=2000, payment_method='cash')

        refund_order(order_id=order.id, reason='Complaint')

        order.refresh_from_db()
        assert order.status == OrderStatus.REFUNDED
        assert order.payment_status == PaymentStatus.REFUNDED
        assert set(order.lines.values_list('status', flat=True)) == {LineStatus.REFUNDED}
        assert InventoryReservation.objects.get(order=order).status == ReservationStatus.RELEASED

    def test_refund_needs_payment(self, order):
        with pytest.raises(InvalidOrderStateError, match='Only paid/partial orders'):
            refund_order(order_id=order.id)

    def test_refund_only_pending(self, order):
        record_payment(order_id=order.id, amount=order.total, payment_method='card')

        with pytest.raises(InvalidOrderStateError, match='Only pending orders'):
            refund_order(order_id=order.id)


@pytest.mark.django_db
class TestQueries:

    def test_list_by_department_accepts_section_code(self, order):
        assert list(list_orders(department_code='RESTAURANT:terrace')) == [order]
        assert list(list_orders(department_code='BAR_CLUB')) == [order]

    def test_list_by_status(self, order):
        assert not list_orders(status='completed').exists()

    def test_stats(self, order):
        update_order_status(order_id=order.id, status='completed')

        stats = get_order_stats()
        assert stats['total_orders'] == 1
        assert stats['completed_orders'] == 1
        assert stats['total_revenue'] == 4620
