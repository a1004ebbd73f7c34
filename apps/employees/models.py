from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class EmploymentStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    ON_LEAVE = 'on_leave', 'On leave'
    SUSPENDED = 'suspended', 'Suspended'
    TERMINATED = 'terminated', 'Terminated'


class SalaryType(models.TextChoices):
    MONTHLY = 'monthly', 'Monthly'
    HOURLY = 'hourly', 'Hourly'
    DAILY = 'daily', 'Daily'


class SalaryFrequency(models.TextChoices):
    WEEKLY = 'weekly', 'Weekly'
    BIWEEKLY = 'biweekly', 'Bi-weekly'
    MONTHLY = 'monthly', 'Monthly'


class ContractType(models.TextChoices):
    PERMANENT = 'permanent', 'Permanent'
    FIXED_TERM = 'fixed_term', 'Fixed term'
    PART_TIME = 'part_time', 'Part time'
    SEASONAL = 'seasonal', 'Seasonal'


class EmploymentData(models.Model):
    """Employment record of a staff account."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='employment'
    )
    employment_date = models.DateField()
    position = models.CharField(max_length=100)
    department = models.CharField(max_length=100, blank=True)

    salary = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    salary_type = models.CharField(
        max_length=20,
        choices=SalaryType.choices,
        default=SalaryType.MONTHLY
    )
    salary_frequency = models.CharField(
        max_length=20,
        choices=SalaryFrequency.choices,
        default=SalaryFrequency.MONTHLY
    )
    employment_status = models.CharField(
        max_length=20,
        choices=EmploymentStatus.choices,
        default=EmploymentStatus.ACTIVE
    )
    contract_type = models.CharField(
        max_length=20,
        choices=ContractType.choices,
        default=ContractType.PERMANENT
    )
    reports_to = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='direct_reports'
    )

    # Copied from EmployeeTermination when the employee is terminated
    termination_date = models.DateField(null=True, blank=True)
    termination_reason = models.CharField(max_length=200, blank=True)
    termination_notes = models.TextField(blank=True)

    total_debts = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_charges = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employment_data'
        verbose_name_plural = 'employment data'
        indexes = [
            models.Index(fields=['employment_status']),
            models.Index(fields=['department']),
        ]
        ordering = ['user__email']

    def __str__(self):
        return f"{self.user.get_display_name()} - {self.position}"


class LeaveType(models.TextChoices):
    ANNUAL = 'annual', 'Annual'
    SICK = 'sick', 'Sick'
    UNPAID = 'unpaid', 'Unpaid'
    MATERNITY = 'maternity', 'Maternity'
    PATERNITY = 'paternity', 'Paternity'
    OTHER = 'other', 'Other'


class LeaveStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'
    CANCELLED = 'cancelled', 'Cancelled'


class EmployeeLeave(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employment = models.ForeignKey(
        EmploymentData,
        on_delete=models.CASCADE,
        related_name='leaves'
    )
    leave_type = models.CharField(max_length=20, choices=LeaveType.choices)
    start_date = models.DateField()
    end_date = models.DateField()
    number_of_days = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    reason = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=LeaveStatus.choices,
        default=LeaveStatus.PENDING
    )
    approved_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='leaves_reviewed'
    )
    approval_date = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employee_leaves'
        ordering = ['-start_date']

    def __str__(self):
        return f"{self.leave_type} {self.start_date} - {self.end_date} ({self.status})"


class ChargeType(models.TextChoices):
    SHORTAGE = 'shortage', 'Cash shortage'
    DAMAGE = 'damage', 'Damage'
    FINE = 'fine', 'Fine'
    ADVANCE = 'advance', 'Salary advance'
    LOAN = 'loan', 'Loan'
    OTHER = 'other', 'Other'


class ChargeStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PARTIALLY_PAID = 'partially_paid', 'Partially paid'
    PAID = 'paid', 'Paid'
    WAIVED = 'waived', 'Waived'


class EmployeeCharge(models.Model):
    """Amount an employee owes the hotel."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employment = models.ForeignKey(
        EmploymentData,
        on_delete=models.CASCADE,
        related_name='charges'
    )
    charge_type = models.CharField(max_length=20, choices=ChargeType.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.CharField(max_length=200, blank=True)
    reason = models.TextField(blank=True)
    date = models.DateField()
    due_date = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=20,
        choices=ChargeStatus.choices,
        default=ChargeStatus.PENDING
    )
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    payment_date = models.DateField(null=True, blank=True)
    payment_method = models.CharField(max_length=50, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employee_charges'
        ordering = ['-date']

    def __str__(self):
        return f"{self.charge_type} {self.amount} ({self.status})"


class SettlementStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'


class EmployeeTermination(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employment = models.OneToOneField(
        EmploymentData,
        on_delete=models.CASCADE,
        related_name='termination'
    )
    termination_date = models.DateField()
    reason = models.CharField(max_length=200)
    details = models.TextField(blank=True)
    final_settlement = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    settlement_status = models.CharField(
        max_length=20,
        choices=SettlementStatus.choices,
        default=SettlementStatus.PENDING
    )
    settlement_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employee_terminations'

    def __str__(self):
        return f"Termination of {self.employment.user.email} on {self.termination_date}"


class SalaryPaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    FAILED = 'failed', 'Failed'


class SalaryPayment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='salary_payments'
    )
    payment_date = models.DateField()
    salary_due_date = models.DateField(null=True, blank=True)
    gross_salary = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    deductions = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    net_salary = models.DecimalField(max_digits=12, decimal_places=2)
    payment_method = models.CharField(max_length=50, blank=True)
    status = models.CharField(
        max_length=20,
        choices=SalaryPaymentStatus.choices,
        default=SalaryPaymentStatus.PENDING
    )
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'salary_payments'
        indexes = [
            models.Index(fields=['user', 'payment_date']),
        ]
        ordering = ['-payment_date']

    def __str__(self):
        return f"{self.user.email} {self.payment_date}: {self.net_salary}"
