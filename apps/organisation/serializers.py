from decimal import Decimal

from rest_framework import serializers

from .models import TaxSettings, ExchangeRate


class TaxSettingsSerializer(serializers.ModelSerializer):

    class Meta:
        model = TaxSettings
        fields = ['enabled', 'tax_rate', 'applied_to_subtotal', 'updated_at']
        read_only_fields = fields


class TaxSettingsUpdateSerializer(serializers.Serializer):
    """All fields optional; omitted fields keep their value."""

    enabled = serializers.BooleanField(required=False)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False)
    applied_to_subtotal = serializers.BooleanField(required=False)


class ExchangeRateSerializer(serializers.ModelSerializer):

    class Meta:
        model = ExchangeRate
        fields = ['id', 'from_currency', 'to_currency', 'rate', 'updated_at']
        read_only_fields = fields


class ExchangeRateUpsertSerializer(serializers.Serializer):
    from_currency = serializers.CharField(max_length=3)
    to_currency = serializers.CharField(max_length=3)
    rate = serializers.DecimalField(max_digits=18, decimal_places=8, min_value=Decimal('0'))
