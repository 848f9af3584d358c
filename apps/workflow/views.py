"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON views for approval workflows: workflow state for a
             record, the current user's approval queue, stage
             decisions and resubmission.
-------------------------------------------------------------------------
"""
from typing import Any, Dict
from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import Http404, HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.generic import View

from apps.core.exceptions import WorkflowNotFoundException
from apps.users.permissions import can_manage_department
from apps.workflow.forms import StageActionForm
from apps.workflow.models import ApprovalWorkflow, EntityType
from apps.workflow.repositories import DjangoEntityStatusWriter
from apps.workflow.services import (
    approve_stage,
    get_current_stage,
    get_workflow,
    pending_workflows_for,
    reject_stage,
    request_revision,
    resubmit_workflow,
    user_can_act,
)
from apps.workflow.workflows import can_approve_stage


# URL slugs for entity types that have an approval path
ENTITY_SLUGS = {
    'budget-proposal': EntityType.BUDGET_PROPOSAL,
    'expenditure': EntityType.EXPENDITURE,
}

STAGE_ACTIONS = {
    StageActionForm.APPROVE: approve_stage,
    StageActionForm.REJECT: reject_stage,
    StageActionForm.REVISE: request_revision,
}


def _format_datetime(value) -> Any:
    return value.isoformat() if value else None


def serialize_workflow(workflow: ApprovalWorkflow, include_history: bool = False) -> Dict[str, Any]:
    """Render a workflow and its stages as a JSON-ready dict."""
    data = {
        'id': workflow.pk,
        'entity_type': workflow.entity_type,
        'entity_id': workflow.entity_id,
        'current_stage': workflow.current_stage,
        'total_stages': workflow.total_stages,
        'status': workflow.status,
        'submitted_by': workflow.submitted_by_id,
        'submitted_at': _format_datetime(workflow.submitted_at),
        'completed_at': _format_datetime(workflow.completed_at),
        'stages': [
            {
                'stage_number': stage.stage_number,
                'stage_name': stage.stage_name,
                'approver_role': stage.approver_role,
                'status': stage.status,
                'approver': stage.approver.get_full_name() if stage.approver else None,
                'comments': stage.comments,
                'action_date': _format_datetime(stage.action_date),
            }
            for stage in workflow.stages.all()
        ],
    }
    if include_history:
        data['history'] = [
            {
                'stage_number': action.stage_number,
                'action': action.action,
                'actor': action.actor_id,
                'comments': action.comments,
                'from_status': action.from_status,
                'to_status': action.to_status,
                'created_at': _format_datetime(action.created_at),
            }
            for action in workflow.actions.all()
        ]
    return data


class WorkflowDetailAPIView(LoginRequiredMixin, View):
    """Latest workflow of a record, with whether the user can act on it."""

    def get(self, request: HttpRequest, entity_slug: str, entity_id: str) -> JsonResponse:
        entity_type = ENTITY_SLUGS.get(entity_slug)
        if entity_type is None:
            raise Http404('Unknown record type.')

        workflow = get_workflow(entity_type, entity_id)
        if workflow is None:
            return JsonResponse({
                'success': False,
                'error': 'No approval workflow found for this record.'
            }, status=404)

        current_stage = get_current_stage(workflow)
        return JsonResponse({
            'success': True,
            'workflow': serialize_workflow(workflow, include_history=True),
            'can_act': user_can_act(request.user, workflow, current_stage),
        })


class PendingApprovalsAPIView(LoginRequiredMixin, View):
    """Workflows awaiting a decision from the current user."""

    def get(self, request: HttpRequest) -> JsonResponse:
        workflows = pending_workflows_for(request.user)
        return JsonResponse({
            'success': True,
            'count': len(workflows),
            'results': [
                {
                    'id': workflow.pk,
                    'entity_type': workflow.entity_type,
                    'entity_id': workflow.entity_id,
                    'current_stage': workflow.current_stage,
                    'total_stages': workflow.total_stages,
                    'status': workflow.status,
                    'submitted_at': _format_datetime(workflow.submitted_at),
                }
                for workflow in workflows
            ],
        })


class StageActionView(LoginRequiredMixin, View):
    """
    Approve, reject or request revision on a workflow stage.

    Answers 403 when the user may not decide the stage, 400 on form
    or transition errors and 404 for unknown workflows or stages.
    """

    def post(self, request: HttpRequest, pk: int, stage_number: int, action: str) -> JsonResponse:
        if action not in STAGE_ACTIONS:
            raise Http404('Unknown workflow action.')

        workflow = get_object_or_404(ApprovalWorkflow, pk=pk)
        stage = get_object_or_404(workflow.stages, stage_number=stage_number)

        ministry_id, department_id = DjangoEntityStatusWriter().get_scope(
            workflow.entity_type, workflow.entity_id
        )
        if not can_approve_stage(request.user, stage.approver_role, ministry_id, department_id):
            return JsonResponse({
                'success': False,
                'error': 'You are not authorized to act on this stage.',
                'error_code': 'ERR_UNAUTHORIZED_ROLE',
            }, status=403)

        form = StageActionForm({'action': action, 'comments': request.POST.get('comments', '')})
        if not form.is_valid():
            return JsonResponse({'success': False, 'errors': form.errors.get_json_data()}, status=400)

        result = STAGE_ACTIONS[action](
            workflow.pk, stage_number, request.user.pk, form.cleaned_data['comments']
        )
        return _result_response(result)


class WorkflowResubmitView(LoginRequiredMixin, View):
    """Resubmit a workflow after a revision request."""

    def post(self, request: HttpRequest, pk: int) -> JsonResponse:
        workflow = get_object_or_404(ApprovalWorkflow, pk=pk)

        ministry_id, department_id = DjangoEntityStatusWriter().get_scope(
            workflow.entity_type, workflow.entity_id
        )
        is_submitter = workflow.submitted_by_id == request.user.pk
        if not (is_submitter or can_manage_department(request.user, department_id, ministry_id)):
            return JsonResponse({
                'success': False,
                'error': 'Only the submitter can resubmit this record.',
                'error_code': 'ERR_UNAUTHORIZED_ROLE',
            }, status=403)

        result = resubmit_workflow(workflow.pk, request.user.pk)
        return _result_response(result)


def _result_response(result) -> JsonResponse:
    if result.success:
        return JsonResponse(result.to_dict())
    status = 404 if result.error_code == WorkflowNotFoundException.error_code else 400
    return JsonResponse(result.to_dict(), status=status)
