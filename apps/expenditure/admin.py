"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for the expenditure module.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from apps.expenditure.models import Expenditure


@admin.register(Expenditure)
class ExpenditureAdmin(admin.ModelAdmin):
    """Admin configuration for Expenditure model."""

    list_display = [
        'id', 'scheme', 'ministry', 'financial_year', 'month',
        'expenditure_type', 'amount', 'status', 'transaction_date'
    ]
    list_filter = ['status', 'expenditure_type', 'financial_year', 'ministry']
    search_fields = ['voucher_number', 'scheme__code', 'scheme__name', 'description']
    date_hierarchy = 'transaction_date'
    readonly_fields = [
        'status', 'financial_year', 'month', 'submitted_at', 'approved_at', 'approved_by',
        'created_at', 'updated_at', 'created_by', 'updated_by'
    ]

    fieldsets = (
        (None, {
            'fields': ('scheme', 'allocation', 'ministry', 'department')
        }),
        (_('Transaction'), {
            'fields': ('amount', 'expenditure_type', 'transaction_date', 'financial_year', 'month',
                       'voucher_number', 'description')
        }),
        (_('Approval'), {
            'fields': ('status', 'submitted_at', 'approved_at', 'approved_by')
        }),
        (_('Audit Trail'), {
            'fields': ('created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',)
        }),
    )
