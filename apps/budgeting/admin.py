"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for the budgeting module.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from apps.budgeting.models import (
    Scheme, BudgetProposal, BudgetLineItem, BudgetAllocation
)
from apps.core.models import ProposalStatus


class BudgetLineItemInline(admin.TabularInline):
    """Inline admin for line items within a proposal."""
    model = BudgetLineItem
    extra = 0
    fields = ['head_of_account', 'description', 'budget_type', 'amount']


@admin.register(Scheme)
class SchemeAdmin(admin.ModelAdmin):
    """Admin configuration for Scheme model."""

    list_display = ['code', 'name', 'ministry', 'department', 'scheme_type', 'is_active']
    list_filter = ['scheme_type', 'ministry', 'is_active']
    search_fields = ['code', 'name', 'ministry__name']
    ordering = ['ministry__name', 'code']


@admin.register(BudgetProposal)
class BudgetProposalAdmin(admin.ModelAdmin):
    """
    Admin configuration for BudgetProposal model.

    Status is read-only here; it is driven by the approval workflow.
    """

    list_display = [
        'proposal_number', 'scheme', 'ministry', 'financial_year',
        'proposal_type', 'total_amount', 'status_badge'
    ]
    list_filter = ['status', 'proposal_type', 'financial_year', 'ministry']
    search_fields = ['proposal_number', 'scheme__name', 'scheme__code']
    readonly_fields = [
        'proposal_number', 'status', 'total_amount', 'revenue_amount', 'capital_amount',
        'submitted_at', 'approved_at', 'approved_by',
        'created_at', 'updated_at', 'created_by', 'updated_by'
    ]
    inlines = [BudgetLineItemInline]

    fieldsets = (
        (None, {
            'fields': ('proposal_number', 'scheme', 'ministry', 'department', 'financial_year', 'proposal_type')
        }),
        (_('Amounts'), {
            'fields': ('revenue_amount', 'capital_amount', 'total_amount', 'justification')
        }),
        (_('Approval'), {
            'fields': ('status', 'submitted_at', 'approved_at', 'approved_by')
        }),
        (_('Audit Trail'), {
            'fields': ('created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj: BudgetProposal) -> str:
        """Display status as a colored badge."""
        color_map = {
            ProposalStatus.DRAFT: 'secondary',
            ProposalStatus.SUBMITTED: 'info',
            ProposalStatus.UNDER_REVIEW: 'warning',
            ProposalStatus.APPROVED: 'success',
            ProposalStatus.REJECTED: 'danger',
            ProposalStatus.REVISION_REQUESTED: 'warning',
        }
        color = color_map.get(obj.status, 'secondary')
        return format_html('<span class="badge bg-{}">{}</span>', color, obj.get_status_display())
    status_badge.short_description = _('Status')


@admin.register(BudgetAllocation)
class BudgetAllocationAdmin(admin.ModelAdmin):
    """Admin configuration for BudgetAllocation model."""

    list_display = [
        'proposal', 'scheme', 'financial_year', 'sanctioned_amount',
        'utilization', 'status', 'sanctioned_at'
    ]
    list_filter = ['status', 'financial_year']
    search_fields = ['proposal__proposal_number', 'scheme__code', 'scheme__name']
    readonly_fields = ['sanctioned_at', 'sanctioned_by', 'created_at', 'updated_at']

    def utilization(self, obj: BudgetAllocation) -> str:
        return f"{obj.get_utilization_percentage()}%"
    utilization.short_description = _('Utilization')
