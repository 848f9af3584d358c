"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for the organizational
             hierarchy (Ministry and Department).
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from apps.core.models import Ministry, Department


class DepartmentInline(admin.TabularInline):
    """Inline departments on the ministry page."""

    model = Department
    extra = 0
    fields = ['name', 'code', 'is_active']


@admin.register(Ministry)
class MinistryAdmin(admin.ModelAdmin):
    """Admin configuration for Ministry model."""

    list_display = ['name', 'code', 'secretary_name', 'department_count', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'code', 'minister_name', 'secretary_name']
    ordering = ['name']
    inlines = [DepartmentInline]

    def department_count(self, obj: Ministry) -> int:
        """Count departments in this ministry."""
        return obj.departments.count()
    department_count.short_description = _('Departments')


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    """Admin configuration for Department model."""

    list_display = ['name', 'code', 'ministry', 'user_count', 'is_active']
    list_filter = ['ministry', 'is_active']
    search_fields = ['name', 'code', 'ministry__name']
    ordering = ['ministry__name', 'name']

    def user_count(self, obj: Department) -> int:
        """Count users assigned to this department."""
        return obj.users.count()
    user_count.short_description = _('Users')
