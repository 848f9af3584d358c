"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Budgeting models: Scheme, BudgetProposal with its line
             items, and the BudgetAllocation sanctioned out of an
             approved proposal.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from typing import Optional
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin, TimeStampedMixin, StatusMixin
from apps.core.models import ProposalStatus


class SchemeType(models.TextChoices):
    CENTRAL_SECTOR = 'Central Sector', _('Central Sector')
    CENTRALLY_SPONSORED = 'Centrally Sponsored', _('Centrally Sponsored')
    CORE_SCHEME = 'Core Scheme', _('Core Scheme')
    SUB_SCHEME = 'Sub Scheme', _('Sub Scheme')


class ProposalType(models.TextChoices):
    BUDGET_ESTIMATE = 'Budget Estimate', _('Budget Estimate')
    REVISED_ESTIMATE = 'Revised Estimate', _('Revised Estimate')
    SUPPLEMENTARY_GRANT = 'Supplementary Grant', _('Supplementary Grant')


class BudgetType(models.TextChoices):
    """Revenue or capital side of the budget."""
    REVENUE = 'Revenue', _('Revenue')
    CAPITAL = 'Capital', _('Capital')


class AllocationStatus(models.TextChoices):
    ACTIVE = 'Active', _('Active')
    FROZEN = 'Frozen', _('Frozen')
    EXHAUSTED = 'Exhausted', _('Exhausted')


class Scheme(TimeStampedMixin, StatusMixin):
    """
    Government scheme under a ministry.

    Budget proposals and expenditures are always raised against a scheme.
    """

    name = models.CharField(
        max_length=255,
        verbose_name=_('Scheme Name')
    )
    code = models.CharField(
        max_length=30,
        unique=True,
        verbose_name=_('Scheme Code')
    )
    ministry = models.ForeignKey(
        'core.Ministry',
        on_delete=models.PROTECT,
        related_name='schemes',
        verbose_name=_('Ministry')
    )
    department = models.ForeignKey(
        'core.Department',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='schemes',
        verbose_name=_('Department')
    )
    scheme_type = models.CharField(
        max_length=30,
        choices=SchemeType.choices,
        default=SchemeType.CENTRAL_SECTOR,
        verbose_name=_('Scheme Type')
    )
    description = models.TextField(blank=True, verbose_name=_('Description'))
    objectives = models.TextField(blank=True, verbose_name=_('Objectives'))
    start_date = models.DateField(null=True, blank=True, verbose_name=_('Start Date'))
    end_date = models.DateField(null=True, blank=True, verbose_name=_('End Date'))

    class Meta:
        verbose_name = _('Scheme')
        verbose_name_plural = _('Schemes')
        ordering = ['ministry__name', 'code']

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"

    def clean(self) -> None:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': _('End date cannot be before start date.')})
        if self.department_id and self.ministry_id and self.department.ministry_id != self.ministry_id:
            raise ValidationError({'department': _('Department must belong to the scheme ministry.')})


class BudgetProposal(AuditLogMixin):
    """
    Budget proposal raised by a ministry for one scheme and financial year.

    The status is driven by the approval workflow once submitted.
    Totals are derived from the line items via recalculate_totals().
    """

    proposal_number = models.CharField(
        max_length=40,
        unique=True,
        verbose_name=_('Proposal Number'),
        help_text=_('Format: BP-<MINISTRY CODE>-<YYYY>-<NNNN>')
    )
    financial_year = models.CharField(
        max_length=7,
        verbose_name=_('Financial Year'),
        help_text=_('Format: YYYY-YY (e.g., 2025-26)')
    )
    scheme = models.ForeignKey(
        Scheme,
        on_delete=models.PROTECT,
        related_name='proposals',
        verbose_name=_('Scheme')
    )
    ministry = models.ForeignKey(
        'core.Ministry',
        on_delete=models.PROTECT,
        related_name='budget_proposals',
        verbose_name=_('Ministry')
    )
    department = models.ForeignKey(
        'core.Department',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='budget_proposals',
        verbose_name=_('Department')
    )
    proposal_type = models.CharField(
        max_length=30,
        choices=ProposalType.choices,
        default=ProposalType.BUDGET_ESTIMATE,
        verbose_name=_('Proposal Type')
    )
    status = models.CharField(
        max_length=30,
        choices=ProposalStatus.choices,
        default=ProposalStatus.DRAFT,
        verbose_name=_('Status')
    )
    total_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name=_('Total Amount')
    )
    revenue_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name=_('Revenue Amount')
    )
    capital_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name=_('Capital Amount')
    )
    justification = models.TextField(blank=True, verbose_name=_('Justification'))
    submitted_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Submitted At'))
    approved_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Approved At'))
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_proposals',
        verbose_name=_('Approved By')
    )

    class Meta:
        verbose_name = _('Budget Proposal')
        verbose_name_plural = _('Budget Proposals')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['financial_year', 'status'], name='proposal_fy_status_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.proposal_number} ({self.status})"

    def recalculate_totals(self) -> None:
        """Recompute revenue, capital and total amounts from line items."""
        totals = {
            row['budget_type']: row['total']
            for row in self.line_items.values('budget_type').annotate(total=Sum('amount'))
        }
        self.revenue_amount = totals.get(BudgetType.REVENUE) or Decimal('0.00')
        self.capital_amount = totals.get(BudgetType.CAPITAL) or Decimal('0.00')
        self.total_amount = self.revenue_amount + self.capital_amount
        self.save(update_fields=['revenue_amount', 'capital_amount', 'total_amount', 'updated_at'])

    @property
    def is_editable(self) -> bool:
        return self.status in (ProposalStatus.DRAFT, ProposalStatus.REVISION_REQUESTED)


class BudgetLineItem(TimeStampedMixin):
    """One head-of-account line of a budget proposal."""

    proposal = models.ForeignKey(
        BudgetProposal,
        on_delete=models.CASCADE,
        related_name='line_items',
        verbose_name=_('Proposal')
    )
    head_of_account = models.CharField(
        max_length=50,
        verbose_name=_('Head of Account')
    )
    description = models.CharField(max_length=255, verbose_name=_('Description'))
    amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Amount')
    )
    budget_type = models.CharField(
        max_length=10,
        choices=BudgetType.choices,
        default=BudgetType.REVENUE,
        verbose_name=_('Budget Type')
    )

    class Meta:
        verbose_name = _('Budget Line Item')
        verbose_name_plural = _('Budget Line Items')
        ordering = ['proposal', 'id']

    def __str__(self) -> str:
        return f"{self.head_of_account}: {self.amount}"


class BudgetAllocation(TimeStampedMixin):
    """
    Funds sanctioned against an approved budget proposal.

    A proposal yields at most one allocation. Quarterly figures are
    optional; when present they add up to the sanctioned amount.
    """

    proposal = models.OneToOneField(
        BudgetProposal,
        on_delete=models.PROTECT,
        related_name='allocation',
        verbose_name=_('Proposal')
    )
    scheme = models.ForeignKey(
        Scheme,
        on_delete=models.PROTECT,
        related_name='allocations',
        verbose_name=_('Scheme')
    )
    financial_year = models.CharField(max_length=7, verbose_name=_('Financial Year'))
    sanctioned_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Sanctioned Amount')
    )
    q1_allocation = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True, verbose_name=_('Q1 Allocation'))
    q2_allocation = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True, verbose_name=_('Q2 Allocation'))
    q3_allocation = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True, verbose_name=_('Q3 Allocation'))
    q4_allocation = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True, verbose_name=_('Q4 Allocation'))
    status = models.CharField(
        max_length=20,
        choices=AllocationStatus.choices,
        default=AllocationStatus.ACTIVE,
        verbose_name=_('Status')
    )
    sanctioned_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Sanctioned At'))
    sanctioned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sanctioned_allocations',
        verbose_name=_('Sanctioned By')
    )

    class Meta:
        verbose_name = _('Budget Allocation')
        verbose_name_plural = _('Budget Allocations')
        ordering = ['-sanctioned_at', '-id']

    def __str__(self) -> str:
        return f"{self.scheme.code} {self.financial_year}: {self.sanctioned_amount}"

    def get_spent_amount(self) -> Decimal:
        """Total of approved expenditures charged to this allocation."""
        result = self.expenditures.filter(
            status=ProposalStatus.APPROVED
        ).aggregate(total=Sum('amount'))['total']
        return result or Decimal('0.00')

    def get_available_balance(self) -> Decimal:
        return self.sanctioned_amount - self.get_spent_amount()

    def get_utilization_percentage(self) -> Decimal:
        """Share of the sanctioned amount already spent, rounded to 2 places."""
        if not self.sanctioned_amount:
            return Decimal('0.00')
        percentage = self.get_spent_amount() * Decimal('100') / self.sanctioned_amount
        return percentage.quantize(Decimal('0.01'))

    def get_quarter_amounts(self) -> Optional[list]:
        """Return [q1, q2, q3, q4] or None when no quarter is set."""
        quarters = [self.q1_allocation, self.q2_allocation, self.q3_allocation, self.q4_allocation]
        if all(q is None for q in quarters):
            return None
        return quarters
