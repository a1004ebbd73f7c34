from django.db import models
import uuid


class DepartmentType(models.TextChoices):
    RESTAURANT = 'restaurant', 'Restaurant'
    BAR = 'bar', 'Bar & Club'
    ROOMS = 'rooms', 'Rooms'
    HOUSEKEEPING = 'housekeeping', 'Housekeeping'
    SERVICES = 'services', 'Hotel Services'
    RECREATION = 'recreation', 'Gym & Recreation'
    STORE = 'store', 'Store'
    OTHER = 'other', 'Other'


class Department(models.Model):
    """Organisational unit of the hotel (bar, restaurant, store...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Stable code used by POS terminals, e.g. "RESTAURANT" or "BAR_CLUB"
    code = models.CharField(max_length=64, unique=True, db_index=True)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    slug = models.SlugField(max_length=200, blank=True)
    type = models.CharField(
        max_length=20,
        choices=DepartmentType.choices,
        default=DepartmentType.OTHER
    )
    icon = models.CharField(max_length=100, blank=True)
    image = models.CharField(max_length=500, blank=True)

    # Optional link to the record this department fronts (a restaurant, a bar...)
    reference_type = models.CharField(max_length=50, blank=True)
    reference_id = models.CharField(max_length=128, blank=True)

    # Free-form data; payment processing stores "lastTransaction" here
    metadata = models.JSONField(default=dict, blank=True)

    # Sales from this department consume DepartmentInventory stock
    tracks_inventory = models.BooleanField(default=False)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'departments'
        indexes = [
            models.Index(fields=['code']),
            models.Index(fields=['is_active']),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.code})"


class DepartmentSection(models.Model):
    """Sub-area of a department, e.g. the terrace of the restaurant."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    department = models.ForeignKey(
        Department,
        on_delete=models.CASCADE,
        related_name='sections'
    )
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200)
    metadata = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'department_sections'
        unique_together = [['department', 'slug']]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.department.code}:{self.slug}"

    @property
    def code(self):
        """Section code as used by POS terminals (``PARENT:slug``)."""
        return f"{self.department.code}:{self.slug}"
