from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from config.api import EnvelopeMixin, success_response, service_error_response
from apps.accounts.permissions import IsAdminRole, IsManagerOrAdmin, IsStaffMember
from .serializers import (
    DiscountRuleSerializer,
    DiscountFilterSerializer,
    ValidateDiscountSerializer,
)
from .services import (
    create_discount_rule,
    update_rule,
    deactivate_rule,
    list_rules,
    get_active_rules,
    validate_discount_code,
    calculate_discount_amount,
    get_discount_stats,
    get_employee_discount,
    DiscountsServiceError,
    InvalidDiscountError,
)


class DiscountRuleViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    """
    Discount rules.

    list / retrieve / active / stats / employee: manager or admin
    create / update / destroy: admin
    validate: any staff
    """

    serializer_class = DiscountRuleSerializer

    def get_queryset(self):
        filters = DiscountFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_rules(
            is_active=filters.validated_data.get('is_active'),
            type=filters.validated_data.get('type')
        )

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsAdminRole()]
        if self.action == 'validate':
            return [IsAuthenticated(), IsStaffMember()]
        return [IsAuthenticated(), IsManagerOrAdmin()]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            rule = create_discount_rule(**serializer.validated_data)
        except DiscountsServiceError as e:
            return service_error_response(e)

        return success_response(
            DiscountRuleSerializer(rule).data,
            message='Discount rule created',
            status_code=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            rule = update_rule(rule_id=instance.id, **serializer.validated_data)
        except DiscountsServiceError as e:
            return service_error_response(e)

        return success_response(DiscountRuleSerializer(rule).data, message='Discount rule updated')

    def destroy(self, request, *args, **kwargs):
        """Deactivate instead of deleting; applied discounts keep their rule."""
        instance = self.get_object()
        rule = deactivate_rule(rule_id=instance.id)
        return success_response(DiscountRuleSerializer(rule).data, message='Discount rule deactivated')

    @extend_schema(request=ValidateDiscountSerializer)
    @action(detail=False, methods=['post'])
    def validate(self, request):
        """
        Check a code against an order total.

        An unusable code is still a successful request: ``valid`` is false
        and ``error`` carries the reason.
        """
        serializer = ValidateDiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            rule = validate_discount_code(
                code=data['code'],
                order_total=data['order_total'],
                customer_id=data['customer_id'],
                department_code=data.get('department_code') or None
            )
        except InvalidDiscountError as e:
            return success_response({'valid': False, 'error': str(e)})

        discount_amount = calculate_discount_amount(rule, data['order_total'])
        return success_response({
            'valid': True,
            'rule': DiscountRuleSerializer(rule).data,
            'discount_amount': discount_amount,
        })

    @action(detail=False, methods=['get'])
    def active(self, request):
        rules = get_active_rules()
        return success_response(DiscountRuleSerializer(rules, many=True).data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return success_response(get_discount_stats())

    @action(detail=False, methods=['get'], url_path=r'employee/(?P<user_id>[^/.]+)')
    def employee(self, request, user_id=None):
        try:
            discount = get_employee_discount(user_id=user_id)
        except DiscountsServiceError as e:
            return service_error_response(e)
        return success_response(discount)
