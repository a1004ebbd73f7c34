from django.db.models import ProtectedError, Q
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from config.api import EnvelopeMixin, success_response, error_response, service_error_response, ErrorCode
from apps.accounts.permissions import IsStaffMember, IsCashierOrAbove, IsManagerOrAdmin
from apps.departments.services import DepartmentsServiceError
from apps.inventory.services import InventoryServiceError
from .models import Customer
from .serializers import (
    CustomerSerializer,
    OrderSerializer,
    OrderDetailSerializer,
    OrderLineSerializer,
    OrderDiscountSerializer,
    OrderPaymentSerializer,
    OrderCreateSerializer,
    OrderItemInputSerializer,
    OrderFilterSerializer,
    OrderStatusSerializer,
    ReasonSerializer,
    ApplyDiscountSerializer,
    PaymentCreateSerializer,
    SettleSerializer,
    BatchSettleSerializer,
    OpenOrdersFilterSerializer,
    SettlementReportFilterSerializer,
)
from .services import (
    get_order_detail,
    list_orders,
    create_order,
    apply_discount,
    add_line_item,
    remove_line_item,
    update_order_status,
    cancel_order,
    refund_order,
    get_order_stats,
    record_payment,
    get_payment_summary,
    get_open_orders,
    settle_order,
    get_settlement_summary,
    batch_settle,
    get_customer_balance,
    get_daily_settlement_report,
    OrdersServiceError,
)

# Order operations touch departments and stock as well
ORDER_ERRORS = (OrdersServiceError, InventoryServiceError, DepartmentsServiceError)

UUID_PATTERN = r'[0-9a-fA-F-]{36}'


class OrderViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet
):
    """
    POS orders.

    Reads, creation, discounts and line changes: any staff
    Payments: cashier or above
    Status changes, cancel and refund: manager or admin
    """

    serializer_class = OrderSerializer
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        filters = OrderFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_orders(
            customer_id=filters.validated_data.get('customer'),
            status=filters.validated_data.get('status'),
            department_code=filters.validated_data.get('department')
        )

    def get_permissions(self):
        if self.action in ['set_status', 'cancel', 'refund']:
            return [IsAuthenticated(), IsManagerOrAdmin()]
        if self.action == 'payments' and self.request.method == 'POST':
            return [IsAuthenticated(), IsCashierOrAbove()]
        return [IsAuthenticated(), IsStaffMember()]

    @extend_schema(request=OrderCreateSerializer, responses=OrderDetailSerializer)
    def create(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = create_order(user=request.user, **serializer.validated_data)
        except ORDER_ERRORS as e:
            return service_error_response(e)

        return success_response(
            OrderDetailSerializer(get_order_detail(order.id)).data,
            message='Order created',
            status_code=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        try:
            order = get_order_detail(pk)
        except OrdersServiceError as e:
            return service_error_response(e)
        return success_response(OrderDetailSerializer(order).data)

    @extend_schema(request=OrderStatusSerializer, responses=OrderDetailSerializer)
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_order_status(order_id=pk, status=serializer.validated_data['status'])
        except OrdersServiceError as e:
            return service_error_response(e)

        return success_response(
            OrderDetailSerializer(get_order_detail(order.id)).data,
            message=f"Order status set to {order.status}"
        )

    @extend_schema(request=ReasonSerializer, responses=OrderDetailSerializer)
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = cancel_order(order_id=pk, reason=serializer.validated_data['reason'])
        except OrdersServiceError as e:
            return service_error_response(e)

        return success_response(
            OrderDetailSerializer(get_order_detail(order.id)).data,
            message='Order cancelled and any payments refunded'
        )

    @extend_schema(request=ReasonSerializer, responses=OrderDetailSerializer)
    @action(detail=True, methods=['post'])
    def refund(self, request, pk=None):
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = refund_order(order_id=pk, reason=serializer.validated_data['reason'])
        except OrdersServiceError as e:
            return service_error_response(e)

        return success_response(
            OrderDetailSerializer(get_order_detail(order.id)).data,
            message='Order refunded successfully'
        )

    @extend_schema(request=ApplyDiscountSerializer, responses=OrderDiscountSerializer)
    @action(detail=True, methods=['post'])
    def discounts(self, request, pk=None):
        serializer = ApplyDiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            discount = apply_discount(order_id=pk, **serializer.validated_data)
        except OrdersServiceError as e:
            return service_error_response(e)

        return success_response(
            {
                'discount': OrderDiscountSerializer(discount).data,
                'order': OrderDetailSerializer(get_order_detail(pk)).data,
            },
            message='Discount applied',
            status_code=status.HTTP_201_CREATED
        )

    @extend_schema(request=OrderItemInputSerializer, responses=OrderLineSerializer)
    @action(detail=True, methods=['post'])
    def lines(self, request, pk=None):
        serializer = OrderItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            line = add_line_item(order_id=pk, item=serializer.validated_data)
        except ORDER_ERRORS as e:
            return service_error_response(e)

        return success_response(
            OrderLineSerializer(line).data,
            message='Line item added',
            status_code=status.HTTP_201_CREATED
        )

    @action(
        detail=True,
        methods=['delete'],
        url_path=rf'lines/(?P<line_id>{UUID_PATTERN})',
        url_name='line-detail'
    )
    def remove_line(self, request, pk=None, line_id=None):
        try:
            order = remove_line_item(order_id=pk, line_id=line_id)
        except ORDER_ERRORS as e:
            return service_error_response(e)

        return success_response(
            OrderDetailSerializer(get_order_detail(order.id)).data,
            message='Line item removed'
        )

    @extend_schema(request=PaymentCreateSerializer, responses=OrderPaymentSerializer)
    @action(detail=True, methods=['get', 'post'])
    def payments(self, request, pk=None):
        """
        GET: payment summary of the order.
        POST: record a payment (cashier or above).
        """
        if request.method == 'GET':
            try:
                summary = get_payment_summary(pk)
            except OrdersServiceError as e:
                return service_error_response(e)
            summary['payments'] = OrderPaymentSerializer(summary['payments'], many=True).data
            return success_response(summary)

        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = record_payment(order_id=pk, user=request.user, **serializer.validated_data)
        except ORDER_ERRORS as e:
            return service_error_response(e)

        return success_response(
            OrderPaymentSerializer(payment).data,
            message='Payment recorded',
            status_code=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return success_response(get_order_stats())


class SettlementViewSet(viewsets.ViewSet):
    """
    Settlement of open orders. Cashier or above.

    GET  /           open orders
    POST /           settle one order
    GET  summary/    totals over open orders
    POST batch/      settle several orders
    GET  report/     daily settlement report
    """

    permission_classes = [IsAuthenticated, IsCashierOrAbove]

    def list(self, request):
        filters = OpenOrdersFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        data = filters.validated_data

        orders = get_open_orders(
            department_code=data.get('department'),
            customer_id=data.get('customer'),
            limit=data['limit'],
            offset=data['offset']
        )
        return success_response(orders)

    @extend_schema(request=SettleSerializer)
    def create(self, request):
        serializer = SettleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = settle_order(user=request.user, **serializer.validated_data)
        except ORDER_ERRORS as e:
            return service_error_response(e)

        return success_response(result, message=result['message'])

    @action(detail=False, methods=['get'])
    def summary(self, request):
        return success_response(
            get_settlement_summary(department_code=request.query_params.get('department'))
        )

    @extend_schema(request=BatchSettleSerializer)
    @action(detail=False, methods=['post'])
    def batch(self, request):
        serializer = BatchSettleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = batch_settle(serializer.validated_data['payments'], user=request.user)
        return success_response(
            result,
            message=f"{result['successful']} settled, {result['failed']} failed"
        )

    @action(detail=False, methods=['get'])
    def report(self, request):
        filters = SettlementReportFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        return success_response(get_daily_settlement_report(filters.validated_data.get('date')))


class CustomerViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    """
    Customers. Any staff may read and write; deleting needs a manager.

    ``?search=`` matches name, email or phone.
    """

    serializer_class = CustomerSerializer
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        queryset = Customer.objects.all()
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
                | Q(phone__icontains=search)
            )
        return queryset

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsAuthenticated(), IsManagerOrAdmin()]
        return [IsAuthenticated(), IsStaffMember()]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return success_response(
            serializer.data,
            message='Customer created',
            status_code=status.HTTP_201_CREATED
        )

    def destroy(self, request, *args, **kwargs):
        customer = self.get_object()
        try:
            customer.delete()
        except ProtectedError:
            return error_response(ErrorCode.CONFLICT, 'Customer has orders and cannot be deleted')
        return success_response(message='Customer deleted')

    @action(detail=True, methods=['get'])
    def balance(self, request, pk=None):
        try:
            balance = get_customer_balance(pk)
        except OrdersServiceError as e:
            return service_error_response(e)
        return success_response(balance)
