"""
Department management service.

Handles department and section CRUD plus resolution of POS department
codes. A POS code is either a department code (``RESTAURANT``) or a
section code (``RESTAURANT:terrace``) where the part after the colon is
the section slug or id.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils.text import slugify

from apps.departments.models import Department, DepartmentSection

from .exceptions import (
    DepartmentNotFoundError,
    SectionNotFoundError,
    DuplicateDepartmentError,
    DuplicateSectionError,
)

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = ':'


def split_department_code(code: str) -> Tuple[str, Optional[str]]:
    """Split ``parent:section`` into ``('PARENT', 'section')``; the parent is upper-cased."""
    code = code.strip()
    if SECTION_SEPARATOR in code:
        parent, section = code.split(SECTION_SEPARATOR, 1)
        return parent.strip().upper(), section.strip()
    return code.upper(), None


def get_department(code: str) -> Department:
    """
    Get a department by code, compared upper-case.

    Raises:
        DepartmentNotFoundError: If no department has this code
    """
    try:
        return Department.objects.get(code=code.strip().upper())
    except Department.DoesNotExist:
        raise DepartmentNotFoundError(f"Department {code} not found")


def get_section(department: Department, slug_or_id: str) -> DepartmentSection:
    """
    Find an active section of ``department`` by slug or id.

    Raises:
        SectionNotFoundError: If no active section matches
    """
    lookup = Q(slug=slug_or_id)
    if _looks_like_uuid(slug_or_id):
        lookup |= Q(id=slug_or_id)
    section = (
        DepartmentSection.objects
        .filter(department=department, is_active=True)
        .filter(lookup)
        .first()
    )
    if section is None:
        raise SectionNotFoundError(
            f"Section {slug_or_id} not found in department {department.code}"
        )
    return section


def resolve_department_code(code: str) -> Tuple[Department, Optional[DepartmentSection]]:
    """
    Resolve a POS department code to a department and optional section.

    Args:
        code: ``PARENT`` or ``PARENT:section-slug-or-id``

    Returns:
        Tuple of (Department, DepartmentSection or None)

    Raises:
        DepartmentNotFoundError: If the parent department doesn't exist
        SectionNotFoundError: If the section part doesn't match an active section
    """
    parent_code, section_ref = split_department_code(code)
    department = get_department(parent_code)
    if section_ref is None:
        return department, None
    return department, get_section(department, section_ref)


def list_departments(*, include_inactive: bool = False) -> QuerySet:
    queryset = Department.objects.prefetch_related('sections')
    if not include_inactive:
        queryset = queryset.filter(is_active=True)
    return queryset


@transaction.atomic
def create_department(
    *,
    code: str,
    name: str,
    description: str = '',
    type: str = 'other',
    tracks_inventory: bool = False,
    **extra_fields
) -> Department:
    """
    Create a department.

    The code is stored upper-case and the slug is derived from the name.

    Raises:
        DuplicateDepartmentError: If the code is already in use
    """
    code = code.strip().upper()
    if Department.objects.filter(code=code).exists():
        raise DuplicateDepartmentError(f"Department code {code} already exists")

    department = Department.objects.create(
        code=code,
        name=name,
        description=description,
        slug=slugify(name),
        type=type,
        tracks_inventory=tracks_inventory,
        **extra_fields
    )
    logger.info("Created department %s", department.code)
    return department


@transaction.atomic
def update_department(*, code: str, **fields) -> Department:
    """Update mutable department fields. The code itself never changes."""
    department = get_department(code)
    fields.pop('code', None)
    for name, value in fields.items():
        setattr(department, name, value)
    if 'name' in fields and 'slug' not in fields:
        department.slug = slugify(department.name)
    department.save()
    return department


@transaction.atomic
def deactivate_department(*, code: str) -> Department:
    """Soft delete a department and its sections."""
    department = get_department(code)
    department.is_active = False
    department.save(update_fields=['is_active', 'updated_at'])
    department.sections.update(is_active=False)
    logger.info("Deactivated department %s", department.code)
    return department


def list_sections(*, code: str) -> List[DepartmentSection]:
    department = get_department(code)
    return list(department.sections.filter(is_active=True))


@transaction.atomic
def create_section(*, code: str, name: str, slug: str = '') -> DepartmentSection:
    """
    Add a section to a department.

    Raises:
        DepartmentNotFoundError: If department doesn't exist
        DuplicateSectionError: If the slug is taken within the department
    """
    department = get_department(code)
    slug = slugify(slug or name)
    if department.sections.filter(slug=slug).exists():
        raise DuplicateSectionError(
            f"Section {slug} already exists in department {department.code}"
        )
    section = DepartmentSection.objects.create(
        department=department,
        name=name,
        slug=slug
    )
    logger.info("Created section %s", section.code)
    return section


def _looks_like_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
