"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON views for recording and submitting expenditure.
-------------------------------------------------------------------------
"""
from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.generic import View

from apps.core.exceptions import GBMSException
from apps.expenditure.forms import ExpenditureForm
from apps.expenditure.models import Expenditure
from apps.expenditure.services import record_expenditure, submit_expenditure
from apps.users.permissions import ExpenditureRecorderRequiredMixin, get_user_scope


class ExpenditureCreateView(LoginRequiredMixin, ExpenditureRecorderRequiredMixin, View):
    """Record a Draft expenditure."""

    def post(self, request: HttpRequest) -> JsonResponse:
        form = ExpenditureForm(request.POST)
        if not form.is_valid():
            return JsonResponse({'success': False, 'errors': form.errors.get_json_data()}, status=400)

        data = form.cleaned_data
        scope = get_user_scope(request.user)
        if not scope['can_access_all_ministries'] and scope['ministry_id'] != data['scheme'].ministry_id:
            return JsonResponse({
                'success': False,
                'error': 'You can only record expenditure for your own ministry.'
            }, status=403)

        try:
            expenditure = record_expenditure(
                scheme=data['scheme'],
                amount=data['amount'],
                expenditure_type=data['expenditure_type'],
                transaction_date=data['transaction_date'],
                voucher_number=data['voucher_number'],
                description=data['description'],
                user=request.user,
                allocation=data['allocation'],
            )
        except GBMSException as e:
            return JsonResponse({'success': False, **e.to_dict()}, status=400)

        return JsonResponse({
            'success': True,
            'expenditure_id': expenditure.pk,
            'financial_year': expenditure.financial_year,
            'status': expenditure.status,
        }, status=201)


class ExpenditureSubmitView(LoginRequiredMixin, ExpenditureRecorderRequiredMixin, View):
    """Submit an expenditure for approval."""

    def post(self, request: HttpRequest, pk: int) -> JsonResponse:
        expenditure = get_object_or_404(Expenditure, pk=pk)

        scope = get_user_scope(request.user)
        if not scope['can_access_all_ministries'] and scope['ministry_id'] != expenditure.ministry_id:
            return JsonResponse({'success': False, 'error': 'Expenditure not found'}, status=404)

        try:
            submit_expenditure(expenditure, request.user)
        except GBMSException as e:
            return JsonResponse({'success': False, **e.to_dict()}, status=400)

        return JsonResponse({
            'success': True,
            'expenditure_id': expenditure.pk,
            'status': expenditure.status,
        })
