from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from config.api import EnvelopeMixin, success_response, service_error_response
from apps.accounts.permissions import IsStaffMember, IsManagerOrAdmin
from .models import InventoryItem, InventoryMovement
from .serializers import (
    InventoryItemSerializer,
    AdjustQuantitySerializer,
    InventoryMovementSerializer,
    DepartmentTransferSerializer,
    TransferRejectSerializer,
    TransferFilterSerializer,
)
from .services import (
    adjust_quantity,
    get_low_stock_items,
    get_inventory_stats,
    list_transfers,
    get_transfer,
    approve_transfer,
    reject_transfer,
    InventoryServiceError,
)


class InventoryItemViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    """
    Inventory items.

    list / retrieve: staff
    create / update / destroy / adjust: manager or admin
    """

    queryset = InventoryItem.objects.all()
    serializer_class = InventoryItemSerializer

    def get_queryset(self):
        queryset = InventoryItem.objects.all()
        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.filter(category=category)
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(name__icontains=search)
        return queryset

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy', 'adjust']:
            return [IsAuthenticated(), IsManagerOrAdmin()]
        return [IsAuthenticated(), IsStaffMember()]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = serializer.save()
        return success_response(
            InventoryItemSerializer(item).data,
            message='Inventory item created',
            status_code=status.HTTP_201_CREATED
        )

    def destroy(self, request, *args, **kwargs):
        """Soft delete."""
        item = self.get_object()
        item.is_active = False
        item.save(update_fields=['is_active', 'updated_at'])
        return success_response(message='Inventory item deactivated')

    @extend_schema(request=AdjustQuantitySerializer, responses=InventoryItemSerializer)
    @action(detail=True, methods=['post'])
    def adjust(self, request, pk=None):
        """Adjust the global quantity by a signed delta."""
        serializer = AdjustQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item = adjust_quantity(
                item_id=pk,
                delta=serializer.validated_data['delta'],
                reason=serializer.validated_data['reason'],
                user=request.user
            )
        except InventoryServiceError as e:
            return service_error_response(e)

        return success_response(InventoryItemSerializer(item).data, message='Quantity adjusted')

    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        items = get_low_stock_items()
        return success_response(InventoryItemSerializer(items, many=True).data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return success_response(get_inventory_stats())


class InventoryMovementViewSet(EnvelopeMixin, viewsets.ReadOnlyModelViewSet):
    """Movement audit trail. Filters: ``item``, ``movement_type``."""

    serializer_class = InventoryMovementSerializer
    permission_classes = [IsAuthenticated, IsStaffMember]

    def get_queryset(self):
        queryset = InventoryMovement.objects.select_related('inventory_item', 'created_by')
        item = self.request.query_params.get('item')
        if item:
            queryset = queryset.filter(inventory_item_id=item)
        movement_type = self.request.query_params.get('movement_type')
        if movement_type:
            queryset = queryset.filter(movement_type=movement_type)
        return queryset


class DepartmentTransferViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """
    Transfer requests.

    Transfers are created from ``POST /api/departments/{code}/transfer/``.
    Approving or rejecting needs manager or admin.
    """

    serializer_class = DepartmentTransferSerializer

    def get_permissions(self):
        if self.action in ['approve', 'reject']:
            return [IsAuthenticated(), IsManagerOrAdmin()]
        return [IsAuthenticated(), IsStaffMember()]

    def get_queryset(self):
        filters = TransferFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_transfers(
            status=filters.validated_data.get('status'),
            department_code=filters.validated_data.get('department')
        )

    def retrieve(self, request, *args, **kwargs):
        try:
            transfer = get_transfer(kwargs['pk'])
        except InventoryServiceError as e:
            return service_error_response(e)
        return success_response(DepartmentTransferSerializer(transfer).data)

    @extend_schema(request=None, responses=DepartmentTransferSerializer)
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        """Approve and execute the transfer."""
        try:
            transfer = approve_transfer(transfer_id=pk, user=request.user)
        except InventoryServiceError as e:
            return service_error_response(e)

        return success_response(
            DepartmentTransferSerializer(transfer).data,
            message='Transfer executed'
        )

    @extend_schema(request=TransferRejectSerializer, responses=DepartmentTransferSerializer)
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        serializer = TransferRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            transfer = reject_transfer(
                transfer_id=pk,
                user=request.user,
                reason=serializer.validated_data['reason']
            )
        except InventoryServiceError as e:
            return service_error_response(e)

        return success_response(
            DepartmentTransferSerializer(transfer).data,
            message='Transfer rejected'
        )
