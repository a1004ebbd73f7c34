from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from config.api import EnvelopeMixin, success_response, service_error_response
from apps.accounts.permissions import IsManagerOrAdmin
from .serializers import (
    EmploymentDataSerializer,
    EmploymentWriteSerializer,
    EmploymentFilterSerializer,
    EmployeeLeaveSerializer,
    LeaveReviewSerializer,
    EmployeeChargeSerializer,
    ChargePaymentSerializer,
    EmployeeTerminationSerializer,
    TerminationUpdateSerializer,
    SalaryPaymentSerializer,
)
from .services import (
    get_employment,
    list_employment,
    create_employment,
    update_employment,
    request_leave,
    list_leaves,
    review_leave,
    list_charges,
    add_charge,
    update_charge_payment,
    delete_charge,
    terminate_employee,
    get_termination,
    update_termination,
    record_salary_payment,
    list_salary_payments,
    EmployeesServiceError,
)

UUID_PATTERN = r'[0-9a-fA-F-]{36}'


class EmployeeViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet
):
    """
    Employment records, addressed by user id.

    All endpoints need manager or admin.
    """

    serializer_class = EmploymentDataSerializer
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]
    lookup_field = 'user_id'
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        filters = EmploymentFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_employment(
            status=filters.validated_data.get('status'),
            department=filters.validated_data.get('department')
        )

    @extend_schema(request=EmploymentWriteSerializer, responses=EmploymentDataSerializer)
    def create(self, request):
        serializer = EmploymentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            employment = create_employment(**serializer.validated_data)
        except EmployeesServiceError as e:
            return service_error_response(e)

        return success_response(
            EmploymentDataSerializer(employment).data,
            message='Employment record created',
            status_code=status.HTTP_201_CREATED
        )

    def retrieve(self, request, user_id=None):
        try:
            employment = get_employment(user_id=user_id)
        except EmployeesServiceError as e:
            return service_error_response(e)
        return success_response(EmploymentDataSerializer(employment).data)

    @extend_schema(request=EmploymentWriteSerializer, responses=EmploymentDataSerializer)
    def partial_update(self, request, user_id=None):
        serializer = EmploymentWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        fields.pop('user_id', None)

        try:
            employment = update_employment(user_id=user_id, **fields)
        except EmployeesServiceError as e:
            return service_error_response(e)

        return success_response(EmploymentDataSerializer(employment).data, message='Employment record updated')

    def update(self, request, user_id=None):
        return self.partial_update(request, user_id=user_id)

    # -------------------------------------------------------------------------
    # Leaves
    # -------------------------------------------------------------------------

    @extend_schema(request=EmployeeLeaveSerializer, responses=EmployeeLeaveSerializer)
    @action(detail=True, methods=['get', 'post'])
    def leaves(self, request, user_id=None):
        if request.method == 'GET':
            try:
                get_employment(user_id=user_id)
            except EmployeesServiceError as e:
                return service_error_response(e)
            leaves = list_leaves(user_id=user_id, status=request.query_params.get('status'))
            return success_response(EmployeeLeaveSerializer(leaves, many=True).data)

        serializer = EmployeeLeaveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            leave = request_leave(user_id=user_id, **serializer.validated_data)
        except EmployeesServiceError as e:
            return service_error_response(e)

        return success_response(
            EmployeeLeaveSerializer(leave).data,
            message='Leave requested',
            status_code=status.HTTP_201_CREATED
        )

    # -------------------------------------------------------------------------
    # Charges
    # -------------------------------------------------------------------------

    @extend_schema(request=EmployeeChargeSerializer, responses=EmployeeChargeSerializer)
    @action(detail=True, methods=['get', 'post'])
    def charges(self, request, user_id=None):
        if request.method == 'GET':
            try:
                charges = list_charges(user_id=user_id)
            except EmployeesServiceError as e:
                return service_error_response(e)
            return success_response(EmployeeChargeSerializer(charges, many=True).data)

        serializer = EmployeeChargeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            charge = add_charge(user_id=user_id, **serializer.validated_data)
        except EmployeesServiceError as e:
            return service_error_response(e)

        return success_response(
            EmployeeChargeSerializer(charge).data,
            message='Charge added',
            status_code=status.HTTP_201_CREATED
        )

    @extend_schema(request=ChargePaymentSerializer, responses=EmployeeChargeSerializer)
    @action(
        detail=True,
        methods=['patch', 'delete'],
        url_path=rf'charges/(?P<charge_id>{UUID_PATTERN})',
        url_name='charge-detail'
    )
    def charge_detail(self, request, user_id=None, charge_id=None):
        """PATCH records a payment against the charge; DELETE removes it."""
        if request.method == 'DELETE':
            try:
                delete_charge(user_id=user_id, charge_id=charge_id)
            except EmployeesServiceError as e:
                return service_error_response(e)
            return success_response(message='Charge deleted')

        serializer = ChargePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            charge = update_charge_payment(
                user_id=user_id,
                charge_id=charge_id,
                **serializer.validated_data
            )
        except EmployeesServiceError as e:
            return service_error_response(e)

        return success_response(EmployeeChargeSerializer(charge).data, message='Charge updated')

    # -------------------------------------------------------------------------
    # Termination
    # -------------------------------------------------------------------------

    @extend_schema(request=EmployeeTerminationSerializer, responses=EmployeeTerminationSerializer)
    @action(detail=True, methods=['get', 'post', 'put'])
    def termination(self, request, user_id=None):
        """
        GET: termination record, null while employed.
        POST: terminate the employee.
        PUT: update settlement status, date or notes.
        """
        try:
            if request.method == 'GET':
                termination = get_termination(user_id=user_id)
                data = EmployeeTerminationSerializer(termination).data if termination else None
                return success_response(data)

            if request.method == 'POST':
                serializer = EmployeeTerminationSerializer(data=request.data)
                serializer.is_valid(raise_exception=True)
                termination = terminate_employee(user_id=user_id, **serializer.validated_data)
                return success_response(
                    EmployeeTerminationSerializer(termination).data,
                    message='Employee terminated',
                    status_code=status.HTTP_201_CREATED
                )

            serializer = TerminationUpdateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            termination = update_termination(user_id=user_id, **serializer.validated_data)
            return success_response(
                EmployeeTerminationSerializer(termination).data,
                message='Termination updated'
            )
        except EmployeesServiceError as e:
            return service_error_response(e)


@extend_schema(request=LeaveReviewSerializer, responses=EmployeeLeaveSerializer)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def review_leave_view(request, leave_id):
    """Approve, reject or cancel a leave request."""
    serializer = LeaveReviewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        leave = review_leave(
            leave_id=leave_id,
            status=serializer.validated_data['status'],
            reviewer=request.user,
            notes=serializer.validated_data.get('notes')
        )
    except EmployeesServiceError as e:
        return service_error_response(e)

    return success_response(EmployeeLeaveSerializer(leave).data, message=f"Leave {leave.status}")


@extend_schema(methods=['POST'], request=SalaryPaymentSerializer, responses=SalaryPaymentSerializer)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def salary_payments(request):
    """
    GET: salary payments, optionally ``?user=<id>``.
    POST: record a salary payment.
    """
    if request.method == 'GET':
        user_id = request.query_params.get('user')
        payments = list_salary_payments(user_id=user_id)
        return success_response(SalaryPaymentSerializer(payments, many=True).data)

    serializer = SalaryPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        payment = record_salary_payment(**serializer.validated_data)
    except EmployeesServiceError as e:
        return service_error_response(e)

    return success_response(
        SalaryPaymentSerializer(payment).data,
        message='Salary payment recorded',
        status_code=status.HTTP_201_CREATED
    )
