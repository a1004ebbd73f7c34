"""
Service layer tests for departments and POS code resolution.
"""

import pytest

from apps.departments.models import Department, DepartmentSection
from apps.departments.services import (
    split_department_code,
    resolve_department_code,
    list_departments,
    create_department,
    update_department,
    deactivate_department,
    list_sections,
    create_section,
)
from apps.departments.services.exceptions import (
    DepartmentNotFoundError,
    SectionNotFoundError,
    DuplicateDepartmentError,
    DuplicateSectionError,
)


class TestSplitDepartmentCode:

    @pytest.mark.parametrize('code, expected', [
        ('RESTAURANT', ('RESTAURANT', None)),
        ('RESTAURANT:terrace', ('RESTAURANT', 'terrace')),
        ('BAR:vip:upper', ('BAR', 'vip:upper')),
        (' bar_club : vip', ('BAR_CLUB', 'vip')),
        ('restaurant', ('RESTAURANT', None)),
    ])
    def test_split(self, code, expected):
        assert split_department_code(code) == expected


@pytest.mark.django_db
class TestResolveDepartmentCode:

    def test_department_only(self, restaurant):
        assert resolve_department_code('RESTAURANT') == (restaurant, None)

    def test_lower_case_code(self, restaurant):
        department, section = resolve_department_code('restaurant:terrace')

        assert department == restaurant
        assert section.slug == 'terrace'

    def test_section_by_slug(self, restaurant):
        department, section = resolve_department_code('RESTAURANT:terrace')

        assert department == restaurant
        assert section.slug == 'terrace'

    def test_section_by_id(self, restaurant):
        terrace = restaurant.sections.get()
        assert resolve_department_code(f'RESTAURANT:{terrace.id}')[1] == terrace

    def test_inactive_section(self, restaurant):
        restaurant.sections.update(is_active=False)
        with pytest.raises(SectionNotFoundError):
            resolve_department_code('RESTAURANT:terrace')

    def test_unknown_department(self, db):
        with pytest.raises(DepartmentNotFoundError, match='Department SPA not found'):
            resolve_department_code('SPA:sauna')


@pytest.mark.django_db
class TestDepartmentManagement:

    def test_create_normalizes_code_and_slug(self, db):
        department = create_department(code=' spa ', name='Spa & Wellness', type='recreation')

        assert department.code == 'SPA'
        assert department.slug == 'spa-wellness'
        assert department.tracks_inventory is False

    def test_duplicate_code(self, restaurant):
        with pytest.raises(DuplicateDepartmentError):
            create_department(code='restaurant', name='Second restaurant')

    def test_update_keeps_code(self, restaurant):
        department = update_department(code='RESTAURANT', name='Main Restaurant')

        assert department.code == 'RESTAURANT'
        assert department.slug == 'main-restaurant'

    def test_deactivate_is_soft(self, restaurant):
        deactivate_department(code='RESTAURANT')

        restaurant.refresh_from_db()
        assert restaurant.is_active is False
        assert not restaurant.sections.filter(is_active=True).exists()
        assert not list_departments().exists()
        assert list(list_departments(include_inactive=True)) == [restaurant]

    def test_sections(self, restaurant):
        section = create_section(code='RESTAURANT', name='Lobby Bar')

        assert section.slug == 'lobby-bar'
        assert section.code == 'RESTAURANT:lobby-bar'
        assert [s.slug for s in list_sections(code='RESTAURANT')] == ['terrace', 'lobby-bar']

    def test_duplicate_section(self, restaurant):
        with pytest.raises(DuplicateSectionError):
            create_section(code='RESTAURANT', name='Terrace')

    def test_section_for_unknown_department(self, db):
        with pytest.raises(DepartmentNotFoundError):
            create_section(code='SPA', name='Sauna')
        assert not DepartmentSection.objects.exists()
        assert not Department.objects.exists()
