from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from config.api import success_response, service_error_response
from apps.accounts.permissions import StaffReadAdminWrite
from .serializers import (
    TaxSettingsSerializer,
    TaxSettingsUpdateSerializer,
    ExchangeRateSerializer,
    ExchangeRateUpsertSerializer,
)
from .services import (
    get_tax_settings,
    update_tax_settings,
    list_exchange_rates,
    upsert_exchange_rate,
    OrganisationServiceError,
)


@extend_schema(methods=['GET'], responses=TaxSettingsSerializer)
@extend_schema(methods=['PUT'], request=TaxSettingsUpdateSerializer, responses=TaxSettingsSerializer)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, StaffReadAdminWrite])
def tax_settings(request):
    """
    GET: current tax settings (staff).
    PUT: update tax settings (admin).
    """
    if request.method == 'GET':
        return success_response(TaxSettingsSerializer(get_tax_settings()).data)

    serializer = TaxSettingsUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        updated = update_tax_settings(user=request.user, **serializer.validated_data)
    except OrganisationServiceError as e:
        return service_error_response(e)

    return success_response(TaxSettingsSerializer(updated).data, message='Tax settings updated')


@extend_schema(methods=['POST'], request=ExchangeRateUpsertSerializer, responses=ExchangeRateSerializer)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, StaffReadAdminWrite])
def exchange_rates(request):
    """
    GET: rates from ``?base=`` (default currency when omitted) (staff).
    POST: create or update a rate (admin).
    """
    if request.method == 'GET':
        return success_response(list_exchange_rates(base_currency=request.query_params.get('base')))

    serializer = ExchangeRateUpsertSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        rate = upsert_exchange_rate(**serializer.validated_data)
    except OrganisationServiceError as e:
        return service_error_response(e)

    return success_response(
        ExchangeRateSerializer(rate).data,
        message='Exchange rate saved',
        status_code=status.HTTP_201_CREATED
    )
