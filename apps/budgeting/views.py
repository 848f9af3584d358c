"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON views for the budgeting module: proposal submission,
             allocation sanctioning and allocation utilization.
-------------------------------------------------------------------------
"""
from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.generic import View

from apps.budgeting.forms import AllocationSanctionForm
from apps.budgeting.models import BudgetAllocation, BudgetProposal
from apps.budgeting.services import sanction_allocation, submit_proposal
from apps.core.exceptions import GBMSException
from apps.users.permissions import (
    AllocationOfficerRequiredMixin,
    ProposalMakerRequiredMixin,
    can_edit_budget_proposal,
    get_user_scope,
)


class ProposalSubmitView(LoginRequiredMixin, ProposalMakerRequiredMixin, View):
    """Submit a Draft or Revision Requested proposal for approval."""

    def post(self, request: HttpRequest, pk: int) -> JsonResponse:
        proposal = get_object_or_404(BudgetProposal, pk=pk)

        if not can_edit_budget_proposal(request.user, proposal):
            return JsonResponse({
                'success': False,
                'error': 'You cannot submit this proposal.'
            }, status=403)

        try:
            submit_proposal(proposal, request.user)
        except GBMSException as e:
            return JsonResponse({'success': False, **e.to_dict()}, status=400)

        return JsonResponse({
            'success': True,
            'proposal_number': proposal.proposal_number,
            'status': proposal.status,
        })


class AllocationSanctionView(LoginRequiredMixin, AllocationOfficerRequiredMixin, View):
    """Sanction an allocation for an approved proposal."""

    def post(self, request: HttpRequest, pk: int) -> JsonResponse:
        proposal = get_object_or_404(BudgetProposal, pk=pk)

        form = AllocationSanctionForm(request.POST)
        if not form.is_valid():
            return JsonResponse({'success': False, 'errors': form.errors.get_json_data()}, status=400)

        try:
            allocation = sanction_allocation(
                proposal,
                form.cleaned_data['sanctioned_amount'],
                form.get_quarters(),
                request.user,
            )
        except GBMSException as e:
            return JsonResponse({'success': False, **e.to_dict()}, status=400)

        return JsonResponse({
            'success': True,
            'allocation_id': allocation.pk,
            'sanctioned_amount': str(allocation.sanctioned_amount),
            'status': allocation.status,
        })


class AllocationSummaryAPIView(LoginRequiredMixin, View):
    """API view for the utilization of an allocation."""

    def get(self, request: HttpRequest, pk: int) -> JsonResponse:
        allocation = get_object_or_404(
            BudgetAllocation.objects.select_related('proposal', 'scheme'), pk=pk
        )

        scope = get_user_scope(request.user)
        if not scope['can_access_all_ministries'] and scope['ministry_id'] != allocation.proposal.ministry_id:
            return JsonResponse({'success': False, 'error': 'Allocation not found'}, status=404)

        spent = allocation.get_spent_amount()
        return JsonResponse({
            'success': True,
            'proposal_number': allocation.proposal.proposal_number,
            'scheme': allocation.scheme.code,
            'financial_year': allocation.financial_year,
            'sanctioned_amount': str(allocation.sanctioned_amount),
            'spent_amount': str(spent),
            'available_balance': str(allocation.sanctioned_amount - spent),
            'utilization_percentage': str(allocation.get_utilization_percentage()),
            'status': allocation.status,
        })
