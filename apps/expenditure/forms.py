"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for the expenditure module.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from django import forms
from django.utils.translation import gettext_lazy as _

from apps.budgeting.models import BudgetAllocation, BudgetType, Scheme


class ExpenditureForm(forms.Form):
    """
    Form for recording an expenditure.

    The allocation, when chosen, must belong to the selected scheme.
    """

    scheme = forms.ModelChoiceField(queryset=Scheme.objects.filter(is_active=True))
    allocation = forms.ModelChoiceField(queryset=BudgetAllocation.objects.all(), required=False)
    amount = forms.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal('0.01'))
    expenditure_type = forms.ChoiceField(choices=BudgetType.choices)
    transaction_date = forms.DateField()
    voucher_number = forms.CharField(max_length=50, required=False)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))

    def clean(self) -> dict:
        cleaned_data = super().clean()
        scheme = cleaned_data.get('scheme')
        allocation = cleaned_data.get('allocation')

        if scheme and allocation and allocation.scheme_id != scheme.pk:
            raise forms.ValidationError({
                'allocation': _('Allocation must belong to the selected scheme.')
            })

        return cleaned_data
