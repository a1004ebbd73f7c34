"""
Department fulfillment of order lines.
"""

import pytest

from apps.departments.models import Department
from apps.inventory.models import InventoryReservation, ReservationStatus
from apps.orders.models import OrderStatus, LineStatus, FulfillmentStatus, PaymentStatus
from apps.orders.services import (
    get_department_stats,
    get_department_orders,
    get_department_pending_items,
    update_department_fulfillment,
    mark_line_in_progress,
    complete_line_fulfillment,
    cancel_order,
    record_payment,
    settle_order,
    get_open_orders,
)
from apps.orders.services.exceptions import (
    InvalidOrderError,
    InvalidOrderStateError,
    OrderNotFoundError,
    OrderLineNotFoundError,
)


@pytest.mark.django_db
class TestDepartmentQueries:

    def test_stats(self, order):
        stats = get_department_stats('BAR_CLUB')

        assert stats == {
            'pending': 1,
            'processing': 0,
            'fulfilled': 0,
            'completed': 0,
            'total': 1,
        }

    def test_orders_by_status(self, order):
        assert list(get_department_orders('RESTAURANT')) == [order]
        assert not get_department_orders('RESTAURANT', status='fulfilled').exists()

    def test_pending_items_skip_cancelled_orders(self, order):
        assert get_department_pending_items('RESTAURANT').count() == 1

        cancel_order(order_id=order.id)
        assert get_department_pending_items('RESTAURANT').count() == 0


@pytest.mark.django_db
class TestDepartmentFulfillment:

    def test_order_fulfilled_when_every_department_is(self, order):
        update_department_fulfillment(order_id=order.id, code='RESTAURANT', status='fulfilled')
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

        update_department_fulfillment(order_id=order.id, code='BAR_CLUB', status='fulfilled')
        order.refresh_from_db()
        assert order.status == OrderStatus.FULFILLED

    def test_department_not_on_order(self, order):
        Department.objects.create(code='SPA', name='Spa')

        with pytest.raises(OrderNotFoundError):
            update_department_fulfillment(order_id=order.id, code='SPA', status='fulfilled')

    def test_invalid_status(self, order):
        with pytest.raises(InvalidOrderError):
            update_department_fulfillment(order_id=order.id, code='BAR_CLUB', status='served')


@pytest.mark.django_db
class TestLineFulfillment:

    def test_start_then_complete(self, order, restaurant):
        line = order.lines.get(department=restaurant)

        started = mark_line_in_progress(line_id=line.id, code='RESTAURANT')
        assert started.status == FulfillmentStatus.IN_PROGRESS
        line.refresh_from_db()
        assert line.status == LineStatus.PROCESSING

        finished = complete_line_fulfillment(line_id=line.id, code='RESTAURANT', quantity=1)
        assert finished.id == started.id
        assert finished.status == FulfillmentStatus.FULFILLED
        assert finished.fulfilled_quantity == 1
        assert finished.fulfilled_at is not None

    def test_order_fulfilled_after_last_line(self, order):
        lines = list(order.lines.all())

        complete_line_fulfillment(line_id=lines[0].id, code=lines[0].department.code)
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

        complete_line_fulfillment(line_id=lines[1].id, code=lines[1].department.code)
        order.refresh_from_db()
        assert order.status == OrderStatus.FULFILLED

    @pytest.mark.parametrize('quantity', [0, 3])
    def test_quantity_bounds(self, order, restaurant, quantity):
        line = order.lines.get(department=restaurant)
        with pytest.raises(InvalidOrderError, match='between 1 and 2'):
            complete_line_fulfillment(line_id=line.id, code='RESTAURANT', quantity=quantity)

    def test_closed_line(self, order, restaurant):
        line = order.lines.get(department=restaurant)
        complete_line_fulfillment(line_id=line.id, code='RESTAURANT')

        with pytest.raises(InvalidOrderStateError):
            mark_line_in_progress(line_id=line.id, code='RESTAURANT')

    def test_cancelled_order(self, order, restaurant):
        line = order.lines.get(department=restaurant)
        cancel_order(order_id=order.id)

        with pytest.raises(InvalidOrderStateError):
            mark_line_in_progress(line_id=line.id, code='RESTAURANT')

    def test_line_of_another_department(self, order, restaurant):
        line = order.lines.get(department=restaurant)

        with pytest.raises(OrderLineNotFoundError, match='not found in department BAR_CLUB'):
            complete_line_fulfillment(line_id=line.id, code='BAR_CLUB')
        line.refresh_from_db()
        assert line.status == LineStatus.PENDING


def _serve_everything(order):
    for line in order.lines.select_related('department'):
        complete_line_fulfillment(line_id=line.id, code=line.department.code)
    order.refresh_from_db()


@pytest.mark.django_db
class TestServedTabSettlement:

    def test_served_unpaid_order_stays_open(self, order):
        _serve_everything(order)

        assert order.status == OrderStatus.FULFILLED
        [row] = get_open_orders()
        assert row['amount_due'] == 4620

    def test_payment_completes_served_order(self, order, staff_user):
        _serve_everything(order)

        record_payment(order_id=order.id, amount=1000, payment_method='cash', user=staff_user)
        result = settle_order(order_id=order.id, amount=3620, payment_method='card', user=staff_user)

        assert result['is_fully_paid'] is True
        assert result['message'] == 'Order fully paid - moving to completed'
        order.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED
        assert order.payment_status == PaymentStatus.PAID
        assert set(order.departments.values_list('status', flat=True)) == {OrderStatus.COMPLETED}
        assert InventoryReservation.objects.get(order=order).status == ReservationStatus.CONSUMED
        assert get_open_orders() == []
