"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for approval stage decisions.
-------------------------------------------------------------------------
"""
from django import forms
from django.utils.translation import gettext_lazy as _


class StageActionForm(forms.Form):
    """
    Form for a decision on an approval stage.

    Comments are optional on approval and required when rejecting
    or requesting a revision.
    """

    APPROVE = 'approve'
    REJECT = 'reject'
    REVISE = 'revise'

    ACTION_CHOICES = [
        (APPROVE, _('Approve')),
        (REJECT, _('Reject')),
        (REVISE, _('Request Revision')),
    ]

    action = forms.ChoiceField(choices=ACTION_CHOICES)
    comments = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={
            'class': 'form-control',
            'rows': 3,
            'placeholder': 'Comments (required if rejecting or requesting revision)'
        })
    )

    def clean(self) -> dict:
        cleaned_data = super().clean()
        action = cleaned_data.get('action')
        comments = (cleaned_data.get('comments') or '').strip()

        if action in (self.REJECT, self.REVISE) and not comments:
            raise forms.ValidationError({
                'comments': _('Comments are required when rejecting or requesting a revision.')
            })

        cleaned_data['comments'] = comments or None
        return cleaned_data
