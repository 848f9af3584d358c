"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for the budgeting module.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from django import forms
from django.utils.translation import gettext_lazy as _

from apps.budgeting.services import validate_quarterly_split


class AllocationSanctionForm(forms.Form):
    """
    Form for sanctioning an allocation out of an approved proposal.

    Quarterly figures are optional; when any is entered they must
    add up to the sanctioned amount.
    """

    sanctioned_amount = forms.DecimalField(
        max_digits=18,
        decimal_places=2,
        min_value=Decimal('0.01'),
        label=_('Sanctioned Amount')
    )
    q1_allocation = forms.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal('0'), required=False, label=_('Q1'))
    q2_allocation = forms.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal('0'), required=False, label=_('Q2'))
    q3_allocation = forms.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal('0'), required=False, label=_('Q3'))
    q4_allocation = forms.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal('0'), required=False, label=_('Q4'))

    def get_quarters(self):
        return [self.cleaned_data.get(f'q{n}_allocation') for n in range(1, 5)]

    def clean(self) -> dict:
        cleaned_data = super().clean()
        sanctioned = cleaned_data.get('sanctioned_amount')

        if sanctioned is not None:
            is_valid, error = validate_quarterly_split(sanctioned, self.get_quarters())
            if not is_valid:
                raise forms.ValidationError(error)

        return cleaned_data
