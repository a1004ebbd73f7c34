from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from config.api import EnvelopeMixin, success_response, service_error_response
from apps.accounts.permissions import IsStaffMember, IsManagerOrAdmin
from apps.inventory.models import DepartmentInventory
from apps.inventory.serializers import (
    DepartmentInventorySerializer,
    DepartmentTransferSerializer,
    TransferCreateSerializer,
)
from apps.inventory.services import create_transfer, InventoryServiceError
from apps.orders.serializers import OrderSerializer, OrderFulfillmentSerializer
from apps.orders.services import (
    get_department_stats,
    get_department_orders,
    get_department_pending_items,
    update_department_fulfillment,
    mark_line_in_progress,
    complete_line_fulfillment,
    OrdersServiceError,
)
from .serializers import (
    DepartmentSerializer,
    DepartmentUpdateSerializer,
    DepartmentSectionSerializer,
    DepartmentFulfillmentSerializer,
    CompleteLineSerializer,
    PendingItemSerializer,
)
from .services import (
    get_department,
    list_departments,
    create_department,
    update_department,
    deactivate_department,
    list_sections,
    create_section,
    DepartmentsServiceError,
)

DEPARTMENT_ERRORS = (DepartmentsServiceError, InventoryServiceError, OrdersServiceError)

UUID_PATTERN = r'[0-9a-fA-F-]{36}'


class DepartmentViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    """
    Departments, addressed by code.

    Reads and fulfillment: any staff
    create / update / destroy / stats / transfer: manager or admin
    """

    serializer_class = DepartmentSerializer
    lookup_field = 'code'
    lookup_value_regex = r'[A-Za-z0-9_\-]+'

    def get_queryset(self):
        include_inactive = self.request.query_params.get('include_inactive') == 'true'
        return list_departments(include_inactive=include_inactive)

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy', 'stats', 'transfer']:
            return [IsAuthenticated(), IsManagerOrAdmin()]
        if self.action == 'sections' and self.request.method == 'POST':
            return [IsAuthenticated(), IsManagerOrAdmin()]
        return [IsAuthenticated(), IsStaffMember()]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        try:
            department = create_department(
                code=data.pop('code'),
                name=data.pop('name'),
                **data
            )
        except DepartmentsServiceError as e:
            return service_error_response(e)

        return success_response(
            DepartmentSerializer(department).data,
            message='Department created',
            status_code=status.HTTP_201_CREATED
        )

    def retrieve(self, request, code=None):
        try:
            department = get_department(code)
        except DepartmentsServiceError as e:
            return service_error_response(e)
        return success_response(DepartmentSerializer(department).data)

    @extend_schema(request=DepartmentUpdateSerializer, responses=DepartmentSerializer)
    def update(self, request, code=None, partial=False):
        serializer = DepartmentUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            department = update_department(code=code, **serializer.validated_data)
        except DepartmentsServiceError as e:
            return service_error_response(e)

        return success_response(DepartmentSerializer(department).data, message='Department updated')

    def partial_update(self, request, code=None):
        return self.update(request, code=code, partial=True)

    def destroy(self, request, code=None):
        """Soft delete: the department and its sections are deactivated."""
        try:
            deactivate_department(code=code)
        except DepartmentsServiceError as e:
            return service_error_response(e)
        return success_response(message='Department deactivated')

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    @extend_schema(request=DepartmentSectionSerializer, responses=DepartmentSectionSerializer)
    @action(detail=True, methods=['get', 'post'])
    def sections(self, request, code=None):
        try:
            if request.method == 'GET':
                return success_response(
                    DepartmentSectionSerializer(list_sections(code=code), many=True).data
                )

            serializer = DepartmentSectionSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            section = create_section(
                code=code,
                name=serializer.validated_data['name'],
                slug=serializer.validated_data.get('slug', '')
            )
        except DepartmentsServiceError as e:
            return service_error_response(e)

        return success_response(
            DepartmentSectionSerializer(section).data,
            message='Section created',
            status_code=status.HTTP_201_CREATED
        )

    # -------------------------------------------------------------------------
    # Orders and fulfillment
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['get'])
    def stats(self, request, code=None):
        try:
            stats = get_department_stats(code)
        except DEPARTMENT_ERRORS as e:
            return service_error_response(e)
        return success_response(stats)

    @action(detail=True, methods=['get'])
    def orders(self, request, code=None):
        try:
            orders = get_department_orders(code, status=request.query_params.get('status'))
        except DEPARTMENT_ERRORS as e:
            return service_error_response(e)

        page = self.paginate_queryset(orders)
        if page is not None:
            return self.get_paginated_response(OrderSerializer(page, many=True).data)
        return success_response(OrderSerializer(orders, many=True).data)

    @action(detail=True, methods=['get'], url_path='pending-items')
    def pending_items(self, request, code=None):
        try:
            lines = get_department_pending_items(code)
        except DEPARTMENT_ERRORS as e:
            return service_error_response(e)
        return success_response(PendingItemSerializer(lines, many=True).data)

    @extend_schema(request=DepartmentFulfillmentSerializer)
    @action(detail=True, methods=['post'])
    def fulfillment(self, request, code=None):
        serializer = DepartmentFulfillmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            row = update_department_fulfillment(
                order_id=serializer.validated_data['order_id'],
                code=code,
                status=serializer.validated_data['status']
            )
        except DEPARTMENT_ERRORS as e:
            return service_error_response(e)

        return success_response(
            {
                'order_id': str(row.order_id),
                'department_code': code,
                'status': row.status,
                'order_status': row.order.status,
            },
            message='Fulfillment updated'
        )

    @action(
        detail=True,
        methods=['post'],
        url_path=rf'lines/(?P<line_id>{UUID_PATTERN})/start',
        url_name='line-start'
    )
    def start_line(self, request, code=None, line_id=None):
        try:
            fulfillment = mark_line_in_progress(line_id=line_id, code=code)
        except DEPARTMENT_ERRORS as e:
            return service_error_response(e)
        return success_response(OrderFulfillmentSerializer(fulfillment).data, message='Line in progress')

    @extend_schema(request=CompleteLineSerializer)
    @action(
        detail=True,
        methods=['post'],
        url_path=rf'lines/(?P<line_id>{UUID_PATTERN})/complete',
        url_name='line-complete'
    )
    def complete_line(self, request, code=None, line_id=None):
        serializer = CompleteLineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            fulfillment = complete_line_fulfillment(
                line_id=line_id,
                code=code,
                quantity=serializer.validated_data.get('quantity')
            )
        except DEPARTMENT_ERRORS as e:
            return service_error_response(e)
        return success_response(OrderFulfillmentSerializer(fulfillment).data, message='Line fulfilled')

    # -------------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['get'])
    def inventory(self, request, code=None):
        try:
            department = get_department(code)
        except DepartmentsServiceError as e:
            return service_error_response(e)

        rows = (
            DepartmentInventory.objects
            .filter(department=department)
            .select_related('inventory_item', 'section')
        )
        return success_response(DepartmentInventorySerializer(rows, many=True).data)

    @extend_schema(request=TransferCreateSerializer, responses=DepartmentTransferSerializer)
    @action(detail=True, methods=['post'])
    def transfer(self, request, code=None):
        """Request a stock transfer out of this department."""
        serializer = TransferCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            transfer = create_transfer(
                from_code=code,
                to_code=data['to_department_code'],
                items=[dict(item) for item in data['items']],
                user=request.user,
                notes=data['notes']
            )
        except DEPARTMENT_ERRORS as e:
            return service_error_response(e)

        return success_response(
            DepartmentTransferSerializer(transfer).data,
            message='Transfer requested',
            status_code=status.HTTP_201_CREATED
        )
