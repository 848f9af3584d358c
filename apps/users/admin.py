"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Admin configuration for the CustomUser model.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    """Admin configuration for CustomUser model."""

    model = CustomUser

    list_display = (
        'email', 'first_name', 'last_name', 'role',
        'ministry', 'department', 'is_active', 'is_staff'
    )
    list_display_links = ('email',)
    list_filter = ('role', 'is_active', 'is_staff', 'ministry')
    search_fields = ('email', 'first_name', 'last_name', 'designation', 'public_id')
    ordering = ('first_name', 'last_name')

    readonly_fields = ('public_id',)

    fieldsets = (
        (None, {'fields': ('public_id', 'email', 'password')}),
        (_('Personal Info'), {
            'fields': ('first_name', 'last_name', 'phone', 'designation')
        }),
        (_('Role & Scope'), {
            'fields': ('role', 'ministry', 'department')
        }),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        (_('Important Dates'), {
            'fields': ('last_login', 'date_joined'),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': (
                'email', 'first_name', 'last_name',
                'password1', 'password2', 'role', 'ministry', 'department'
            ),
        }),
    )
