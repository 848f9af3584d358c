"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Expenditure records charged against scheme allocations.
             Each expenditure passes through a two-stage approval
             workflow before it counts against the allocation.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.budgeting.models import BudgetType
from apps.core.mixins import AuditLogMixin
from apps.core.models import ProposalStatus


class Expenditure(AuditLogMixin):
    """
    Expenditure incurred under a scheme.

    Ministry and department are copied from the scheme so the record
    keeps its organizational scope even if the scheme moves later.
    Only Approved expenditures count towards allocation utilization.
    """

    allocation = models.ForeignKey(
        'budgeting.BudgetAllocation',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='expenditures',
        verbose_name=_('Allocation')
    )
    scheme = models.ForeignKey(
        'budgeting.Scheme',
        on_delete=models.PROTECT,
        related_name='expenditures',
        verbose_name=_('Scheme')
    )
    ministry = models.ForeignKey(
        'core.Ministry',
        on_delete=models.PROTECT,
        related_name='expenditures',
        verbose_name=_('Ministry')
    )
    department = models.ForeignKey(
        'core.Department',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='expenditures',
        verbose_name=_('Department')
    )
    financial_year = models.CharField(max_length=7, verbose_name=_('Financial Year'))
    month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)],
        verbose_name=_('Month')
    )
    amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Amount')
    )
    expenditure_type = models.CharField(
        max_length=10,
        choices=BudgetType.choices,
        default=BudgetType.REVENUE,
        verbose_name=_('Expenditure Type')
    )
    description = models.TextField(blank=True, verbose_name=_('Description'))
    transaction_date = models.DateField(verbose_name=_('Transaction Date'))
    voucher_number = models.CharField(
        max_length=50,
        blank=True,
        verbose_name=_('Voucher Number')
    )
    status = models.CharField(
        max_length=30,
        choices=ProposalStatus.choices,
        default=ProposalStatus.DRAFT,
        verbose_name=_('Status')
    )
    submitted_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Submitted At'))
    approved_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Approved At'))
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_expenditures',
        verbose_name=_('Approved By')
    )

    class Meta:
        verbose_name = _('Expenditure')
        verbose_name_plural = _('Expenditures')
        ordering = ['-transaction_date', '-id']

    def __str__(self) -> str:
        return f"{self.scheme.code} {self.transaction_date}: {self.amount} ({self.status})"

    def clean(self) -> None:
        if self.allocation_id and self.scheme_id and self.allocation.scheme_id != self.scheme_id:
            raise ValidationError({'allocation': _('Allocation must belong to the same scheme.')})
