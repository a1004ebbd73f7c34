"""
Payment recording and the stock it consumes.
"""

import pytest

from apps.inventory.models import InventoryMovement, InventoryReservation, ReservationStatus
from apps.inventory.services.exceptions import InsufficientStockError
from apps.orders.models import OrderPayment, OrderStatus, PaymentStatus
from apps.orders.services import record_payment, get_payment_summary
from apps.orders.services.exceptions import PaymentError, InvalidOrderStateError, OrderNotFoundError


@pytest.mark.django_db
class TestRecordPayment:

    def test_partial_payment(self, order):
        record_payment(order_id=order.id, amount=1000, payment_method='cash')

        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PARTIAL

    def test_full_payment_moves_order_to_processing(self, order):
        record_payment(order_id=order.id, amount=1000, payment_method='cash')
        record_payment(order_id=order.id, amount=3620, payment_method='card')

        order.refresh_from_db()
        assert order.status == OrderStatus.PROCESSING
        assert order.payment_status == PaymentStatus.PAID
        assert set(order.departments.values_list('status', flat=True)) == {OrderStatus.PROCESSING}

    def test_full_payment_consumes_stock(self, order, bar_stock):
        record_payment(order_id=order.id, amount=order.total, payment_method='card')

        bar_stock.refresh_from_db()
        assert bar_stock.quantity == 8
        movement = InventoryMovement.objects.get(reference=str(order.id))
        assert movement.reason == 'sale'
        assert movement.quantity == 2
        assert InventoryReservation.objects.get(order=order).status == ReservationStatus.CONSUMED

    def test_full_payment_stamps_departments(self, order, cashier_user, bar_club, restaurant):
        payment = record_payment(
            order_id=order.id,
            amount=order.total,
            payment_method='room_charge',
            user=cashier_user
        )

        for department in (bar_club, restaurant):
            department.refresh_from_db()
            last = department.metadata['lastTransaction']
            assert last['orderId'] == str(order.id)
            assert last['paymentId'] == str(payment.id)
            assert last['amount'] == order.total
            assert last['initiatedBy'] == str(cashier_user.id)

    def test_stock_gone_at_payment_rolls_back(self, order, bar_stock):
        bar_stock.quantity = 1
        bar_stock.save()

        with pytest.raises(InsufficientStockError):
            record_payment(order_id=order.id, amount=order.total, payment_method='card')

        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.UNPAID
        assert not OrderPayment.objects.exists()

    @pytest.mark.parametrize('amount', [0, -100])
    def test_non_positive_amount(self, order, amount):
        with pytest.raises(PaymentError, match='greater than zero'):
            record_payment(order_id=order.id, amount=amount, payment_method='cash')

    def test_overpayment(self, order):
        with pytest.raises(PaymentError, match='exceeds order total'):
            record_payment(order_id=order.id, amount=order.total + 1, payment_method='cash')

    def test_paid_order_rejects_more(self, order):
        record_payment(order_id=order.id, amount=order.total, payment_method='cash')
        with pytest.raises(InvalidOrderStateError):
            record_payment(order_id=order.id, amount=1, payment_method='cash')

    def test_unknown_order(self, db):
        with pytest.raises(OrderNotFoundError):
            record_payment(order_id='not-a-uuid', amount=100, payment_method='cash')


@pytest.mark.django_db
class TestPaymentSummary:

    def test_summary(self, order):
        record_payment(order_id=order.id, amount=1000, payment_method='cash')

        summary = get_payment_summary(order.id)

        assert summary['order_total'] == 4620
        assert summary['total_paid'] == 1000
        assert summary['remaining'] == 3620
        assert summary['payment_status'] == PaymentStatus.PARTIAL
        assert len(summary['payments']) == 1
