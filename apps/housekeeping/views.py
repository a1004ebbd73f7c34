from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from config.api import EnvelopeMixin, success_response, service_error_response
from apps.accounts.permissions import IsStaffMember, IsManagerOrAdmin
from apps.departments.services import DepartmentsServiceError
from .exceptions import HousekeepingError
from .models import CleaningTask, CleaningTaskStatus
from .serializers import (
    CleaningTaskSerializer,
    CleaningTaskDetailSerializer,
    CleaningTaskCreateSerializer,
    CleaningLogSerializer,
    AssignTaskSerializer,
    NotesSerializer,
    InspectTaskSerializer,
    TaskFilterSerializer,
    TurnaroundFilterSerializer,
)
from .services import CleaningService

UUID_PATTERN = r'[0-9a-fA-F-]{36}'


class CleaningTaskViewSet(EnvelopeMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Cleaning tasks.

    Board, work log, start and complete: any staff
    create / assign / inspect: manager or admin
    """

    serializer_class = CleaningTaskSerializer
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        filters = TaskFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        data = filters.validated_data

        queryset = CleaningTask.objects.select_related('department', 'assigned_to', 'inspected_by')
        if data.get('status'):
            queryset = queryset.filter(status=data['status'])
        if data.get('unit'):
            queryset = queryset.filter(unit_number=data['unit'])
        if data.get('assigned_to'):
            queryset = queryset.filter(assigned_to_id=data['assigned_to'])
        return queryset

    def get_permissions(self):
        if self.action in ['create', 'assign', 'inspect']:
            return [IsAuthenticated(), IsManagerOrAdmin()]
        return [IsAuthenticated(), IsStaffMember()]

    @extend_schema(request=CleaningTaskCreateSerializer, responses=CleaningTaskSerializer)
    def create(self, request):
        serializer = CleaningTaskCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            task = CleaningService.create_task(user=request.user, **serializer.validated_data)
        except DepartmentsServiceError as e:
            return service_error_response(e)

        return success_response(
            CleaningTaskSerializer(task).data,
            message='Cleaning task created',
            status_code=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        try:
            task = CleaningService.get_task(pk)
        except HousekeepingError as e:
            return service_error_response(e)
        return success_response(CleaningTaskDetailSerializer(task).data)

    @extend_schema(request=AssignTaskSerializer, responses=CleaningTaskSerializer)
    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        serializer = AssignTaskSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            task = CleaningService.assign_task(
                task_id=pk,
                assigned_to_id=serializer.validated_data['assigned_to_id']
            )
        except HousekeepingError as e:
            return service_error_response(e)

        return success_response(CleaningTaskSerializer(task).data, message='Cleaning task assigned')

    @extend_schema(request=None, responses=CleaningTaskSerializer)
    @action(detail=True, methods=['post'])
    def start(self, request, pk=None):
        try:
            task = CleaningService.start_task(task_id=pk, user=request.user)
        except HousekeepingError as e:
            return service_error_response(e)

        return success_response(CleaningTaskSerializer(task).data, message='Cleaning task started')

    @extend_schema(request=CleaningLogSerializer, responses=CleaningLogSerializer)
    @action(detail=True, methods=['get', 'post'])
    def logs(self, request, pk=None):
        if request.method == 'GET':
            try:
                task = CleaningService.get_task(pk)
            except HousekeepingError as e:
                return service_error_response(e)
            return success_response(CleaningLogSerializer(task.logs.all(), many=True).data)

        serializer = CleaningLogSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            log = CleaningService.log_item(task_id=pk, user=request.user, **serializer.validated_data)
        except HousekeepingError as e:
            return service_error_response(e)

        return success_response(
            CleaningLogSerializer(log).data,
            message='Cleaning item logged',
            status_code=status.HTTP_201_CREATED
        )

    @extend_schema(request=NotesSerializer, responses=CleaningTaskSerializer)
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        serializer = NotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            task = CleaningService.complete_task(task_id=pk, notes=serializer.validated_data['notes'])
        except HousekeepingError as e:
            return service_error_response(e)

        return success_response(CleaningTaskSerializer(task).data, message='Cleaning task completed')

    @extend_schema(request=InspectTaskSerializer, responses=CleaningTaskSerializer)
    @action(detail=True, methods=['post'])
    def inspect(self, request, pk=None):
        serializer = InspectTaskSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            task = CleaningService.inspect_task(task_id=pk, user=request.user, **serializer.validated_data)
        except HousekeepingError as e:
            return service_error_response(e)

        if task.status == CleaningTaskStatus.INSPECTED:
            message = 'Cleaning task approved'
        else:
            message = 'Cleaning task rejected'
        return success_response(CleaningTaskSerializer(task).data, message=message)

    @action(detail=False, methods=['get'])
    def pending(self, request):
        """Open tasks, urgent first. Filter with ``?department=CODE``."""
        tasks = CleaningService.get_pending_tasks(request.query_params.get('department'))
        return success_response(CleaningTaskSerializer(tasks, many=True).data)

    @action(detail=False, methods=['get'])
    def turnaround(self, request):
        filters = TurnaroundFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        days = filters.validated_data['days']

        return success_response({
            'days_back': days,
            'average_hours': CleaningService.get_average_turnaround_hours(days_back=days),
        })

    @action(detail=False, methods=['get'], url_path=r'unit/(?P<unit_number>[^/.]+)', url_name='unit')
    def unit(self, request, unit_number=None):
        tasks = CleaningService.get_tasks_by_unit(unit_number)
        return success_response(CleaningTaskDetailSerializer(tasks, many=True).data)
