"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for approval workflows.
             Workflows are read-only here; decisions go through the
             workflow endpoints so the gated record stays in step.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from apps.workflow.models import ApprovalStage, ApprovalWorkflow, WorkflowAction


class ApprovalStageInline(admin.TabularInline):
    """Inline admin for stages within a workflow."""
    model = ApprovalStage
    extra = 0
    can_delete = False
    fields = ['stage_number', 'stage_name', 'approver_role', 'status', 'approver', 'comments', 'action_date']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class WorkflowActionInline(admin.TabularInline):
    """Decision history of a workflow."""
    model = WorkflowAction
    extra = 0
    can_delete = False
    fields = ['created_at', 'stage_number', 'action', 'actor', 'from_status', 'to_status', 'comments']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ApprovalWorkflow)
class ApprovalWorkflowAdmin(admin.ModelAdmin):
    """Admin configuration for ApprovalWorkflow model."""

    list_display = [
        'id', 'entity_type', 'entity_id', 'stage_progress',
        'status', 'submitted_by', 'submitted_at', 'completed_at'
    ]
    list_filter = ['entity_type', 'status']
    search_fields = ['entity_id']
    readonly_fields = [
        'entity_type', 'entity_id', 'current_stage', 'total_stages', 'status',
        'submitted_by', 'submitted_at', 'completed_at', 'created_at', 'updated_at'
    ]
    inlines = [ApprovalStageInline, WorkflowActionInline]

    def stage_progress(self, obj: ApprovalWorkflow) -> str:
        return f"{obj.current_stage}/{obj.total_stages}"
    stage_progress.short_description = _('Stage')

    def has_add_permission(self, request):
        return False
