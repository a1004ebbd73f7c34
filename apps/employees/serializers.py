from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import (
    EmploymentData,
    EmploymentStatus,
    EmployeeLeave,
    LeaveStatus,
    EmployeeCharge,
    EmployeeTermination,
    SettlementStatus,
    SalaryPayment,
)


# =============================================================================
# Employment
# =============================================================================

class EmploymentDataSerializer(serializers.ModelSerializer):
    """Employment record with its user."""

    user = UserMinimalSerializer(read_only=True)
    reports_to = UserMinimalSerializer(read_only=True)

    class Meta:
        model = EmploymentData
        fields = [
            'id',
            'user',
            'employment_date',
            'position',
            'department',
            'salary',
            'salary_type',
            'salary_frequency',
            'employment_status',
            'contract_type',
            'reports_to',
            'termination_date',
            'termination_reason',
            'termination_notes',
            'total_debts',
            'total_charges',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class EmploymentWriteSerializer(serializers.ModelSerializer):
    """Input for creating or updating employment data."""

    user_id = serializers.UUIDField(write_only=True)
    reports_to_id = serializers.UUIDField(required=False, allow_null=True)

    class Meta:
        model = EmploymentData
        fields = [
            'user_id',
            'employment_date',
            'position',
            'department',
            'salary',
            'salary_type',
            'salary_frequency',
            'employment_status',
            'contract_type',
            'reports_to_id',
            'total_debts',
        ]


class EmploymentFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=EmploymentStatus.choices, required=False)
    department = serializers.CharField(required=False)


# =============================================================================
# Leaves
# =============================================================================

class EmployeeLeaveSerializer(serializers.ModelSerializer):

    approved_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = EmployeeLeave
        fields = [
            'id',
            'leave_type',
            'start_date',
            'end_date',
            'number_of_days',
            'reason',
            'status',
            'approved_by',
            'approval_date',
            'notes',
            'created_at',
        ]
        read_only_fields = ['id', 'status', 'approved_by', 'approval_date', 'created_at']
        extra_kwargs = {'number_of_days': {'required': False}}


class LeaveReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        LeaveStatus.APPROVED,
        LeaveStatus.REJECTED,
        LeaveStatus.CANCELLED,
    ])
    notes = serializers.CharField(required=False, allow_blank=True)


# =============================================================================
# Charges
# =============================================================================

class EmployeeChargeSerializer(serializers.ModelSerializer):

    class Meta:
        model = EmployeeCharge
        fields = [
            'id',
            'charge_type',
            'amount',
            'description',
            'reason',
            'date',
            'due_date',
            'status',
            'paid_amount',
            'payment_date',
            'payment_method',
            'notes',
            'created_at',
        ]
        read_only_fields = ['id', 'status', 'paid_amount', 'payment_date', 'created_at']


class ChargePaymentSerializer(serializers.Serializer):
    paid_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_date = serializers.DateField(required=False)
    payment_method = serializers.CharField(max_length=50, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


# =============================================================================
# Termination
# =============================================================================

class EmployeeTerminationSerializer(serializers.ModelSerializer):

    class Meta:
        model = EmployeeTermination
        fields = [
            'id',
            'termination_date',
            'reason',
            'details',
            'final_settlement',
            'settlement_status',
            'settlement_date',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'settlement_status', 'settlement_date', 'created_at', 'updated_at']


class TerminationUpdateSerializer(serializers.Serializer):
    settlement_status = serializers.ChoiceField(choices=SettlementStatus.choices, required=False)
    settlement_date = serializers.DateField(required=False)
    final_settlement = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


# =============================================================================
# Salary payments
# =============================================================================

class SalaryPaymentSerializer(serializers.ModelSerializer):

    user = UserMinimalSerializer(read_only=True)
    user_id = serializers.UUIDField(write_only=True)

    class Meta:
        model = SalaryPayment
        fields = [
            'id',
            'user',
            'user_id',
            'payment_date',
            'salary_due_date',
            'gross_salary',
            'deductions',
            'net_salary',
            'payment_method',
            'status',
            'notes',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {'net_salary': {'required': False}}
