"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Business logic services for the budgeting module:
             financial year rules, proposal preparation and submission,
             and sanctioning allocations out of approved proposals.
-------------------------------------------------------------------------
"""
import logging
import re
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple
from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import (
    AllocationException,
    FinancialYearException,
    WorkflowTransitionException,
)
from apps.core.models import ProposalStatus

logger = logging.getLogger(__name__)


# Constants
FINANCIAL_YEAR_START_MONTH = 4  # April
QUARTER_TOLERANCE = Decimal('0.01')
FINANCIAL_YEAR_PATTERN = re.compile(r'^(\d{4})-(\d{2})$')


def validate_financial_year(value: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a financial year string.

    A financial year is written YYYY-YY where YY is the last two
    digits of the following year (e.g., 2025-26).

    Returns:
        Tuple of (is_valid, error_message)
    """
    match = FINANCIAL_YEAR_PATTERN.match(value or '')
    if not match:
        return False, f"Financial year '{value}' must be in YYYY-YY format (e.g., 2025-26)."

    start_year = int(match.group(1))
    if match.group(2) != f"{(start_year + 1) % 100:02d}":
        return False, f"Financial year '{value}' must span consecutive years (e.g., {start_year}-{(start_year + 1) % 100:02d})."

    return True, None


def get_financial_year(for_date: Optional[date] = None) -> str:
    """
    Return the April-March financial year containing a date.

    Args:
        for_date: Date to classify. Defaults to today.

    Returns:
        Financial year string, e.g. "2025-26" for 15 January 2026.
    """
    for_date = for_date or timezone.localdate()
    start_year = for_date.year if for_date.month >= FINANCIAL_YEAR_START_MONTH else for_date.year - 1
    return f"{start_year}-{(start_year + 1) % 100:02d}"


def generate_proposal_number(ministry, financial_year: str) -> str:
    """
    Generate the next proposal number for a ministry and financial year.

    Format: BP-<MINISTRY CODE>-<YYYY>-<NNNN> where YYYY is the start
    year and NNNN is a sequence per ministry and financial year.
    """
    from apps.budgeting.models import BudgetProposal

    year_prefix = financial_year.split('-')[0]
    prefix = f"BP-{ministry.code}-{year_prefix}-"

    count = BudgetProposal.objects.filter(
        ministry=ministry,
        financial_year=financial_year
    ).count()

    sequence = count + 1
    while BudgetProposal.objects.filter(proposal_number=f"{prefix}{sequence:04d}").exists():
        sequence += 1

    return f"{prefix}{sequence:04d}"


@transaction.atomic
def create_proposal(
    scheme,
    financial_year: str,
    proposal_type: str,
    justification: str,
    line_items: Sequence[Dict],
    user
):
    """
    Create a Draft budget proposal with its line items.

    Args:
        scheme: Scheme the proposal is raised for; its ministry and
            department are copied onto the proposal.
        financial_year: Financial year in YYYY-YY format.
        proposal_type: A ProposalType value.
        justification: Free-text justification.
        line_items: Dicts with head_of_account, description, amount
            and budget_type.
        user: The user preparing the proposal.

    Returns:
        The created BudgetProposal with totals computed.

    Raises:
        FinancialYearException: If financial_year is malformed.
    """
    from apps.budgeting.models import BudgetLineItem, BudgetProposal

    is_valid, error = validate_financial_year(financial_year)
    if not is_valid:
        raise FinancialYearException(error)

    proposal = BudgetProposal(
        proposal_number=generate_proposal_number(scheme.ministry, financial_year),
        financial_year=financial_year,
        scheme=scheme,
        ministry_id=scheme.ministry_id,
        department_id=scheme.department_id,
        proposal_type=proposal_type,
        justification=justification or '',
        status=ProposalStatus.DRAFT,
    )
    proposal.save_with_user(user)

    BudgetLineItem.objects.bulk_create([
        BudgetLineItem(
            proposal=proposal,
            head_of_account=item.get('head_of_account', ''),
            description=item['description'],
            amount=Decimal(str(item['amount'])),
            budget_type=item['budget_type'],
        )
        for item in line_items
    ])
    proposal.recalculate_totals()

    logger.info(
        "Budget proposal %s created for scheme %s (%s)",
        proposal.proposal_number, scheme.code, financial_year
    )
    return proposal


def submit_for_approval(entity_type: str, record, user) -> None:
    """
    Route a Draft or Revision Requested record into its approval workflow.

    Draft records get a new workflow; records sent back for revision
    resume their existing workflow from stage 1.

    Raises:
        WorkflowTransitionException: If the record is in any other status.
    """
    from apps.workflow.services import get_engine, get_workflow

    engine = get_engine()
    user_id = getattr(user, 'pk', None)

    if record.status == ProposalStatus.DRAFT:
        record.status = ProposalStatus.SUBMITTED
        record.submitted_at = timezone.now()
        record.save_with_user(user)
        engine.create(entity_type, record.pk, user_id)
    elif record.status == ProposalStatus.REVISION_REQUESTED:
        workflow = get_workflow(entity_type, record.pk)
        if workflow is None:
            raise WorkflowTransitionException(
                f"{entity_type} {record.pk} has no workflow to resubmit."
            )
        engine.resubmit(workflow.pk, user_id)
        record.refresh_from_db()
    else:
        raise WorkflowTransitionException(
            f"Only Draft or Revision Requested records can be submitted (current status: {record.status})."
        )


@transaction.atomic
def submit_proposal(proposal, user):
    """
    Submit a budget proposal for approval.

    Returns:
        The refreshed proposal.
    """
    from apps.workflow.models import EntityType

    submit_for_approval(EntityType.BUDGET_PROPOSAL, proposal, user)
    logger.info("Budget proposal %s submitted (status %s)", proposal.proposal_number, proposal.status)
    return proposal


def validate_quarterly_split(
    sanctioned_amount: Decimal,
    quarters: Optional[Sequence[Optional[Decimal]]]
) -> Tuple[bool, Optional[str]]:
    """
    Validate quarterly allocations against the sanctioned amount.

    Quarters are optional. When any quarter is given, the four figures
    (missing ones counted as zero) must add up to the sanctioned amount.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not quarters or all(q is None for q in quarters):
        return True, None

    if len(quarters) != 4:
        return False, "Exactly four quarterly figures are required."

    values = [Decimal(str(q)) if q is not None else Decimal('0') for q in quarters]
    if any(v < 0 for v in values):
        return False, "Quarterly allocations cannot be negative."

    total = sum(values, Decimal('0'))
    if abs(total - Decimal(str(sanctioned_amount))) > QUARTER_TOLERANCE:
        return False, (
            f"Quarterly allocations total {total} but the sanctioned amount is {sanctioned_amount}."
        )

    return True, None


@transaction.atomic
def sanction_allocation(
    proposal,
    sanctioned_amount: Decimal,
    quarters: Optional[List[Optional[Decimal]]] = None,
    user=None
):
    """
    Sanction an allocation out of an approved budget proposal.

    Raises:
        AllocationException: If the proposal is not approved, already has
            an allocation, or the amounts are invalid.
    """
    from apps.budgeting.models import AllocationStatus, BudgetAllocation, BudgetProposal

    proposal = BudgetProposal.objects.select_for_update().get(pk=proposal.pk)

    if proposal.status != ProposalStatus.APPROVED:
        raise AllocationException(
            f"Only approved proposals can be allocated ({proposal.proposal_number} is {proposal.status})."
        )

    if BudgetAllocation.objects.filter(proposal=proposal).exists():
        raise AllocationException(
            f"An allocation already exists for {proposal.proposal_number}."
        )

    sanctioned_amount = Decimal(str(sanctioned_amount))
    if sanctioned_amount <= 0:
        raise AllocationException("Sanctioned amount must be greater than zero.")

    is_valid, error = validate_quarterly_split(sanctioned_amount, quarters)
    if not is_valid:
        raise AllocationException(error)

    has_quarters = quarters and any(q is not None for q in quarters)
    q1, q2, q3, q4 = list(quarters) if has_quarters else [None] * 4
    allocation = BudgetAllocation.objects.create(
        proposal=proposal,
        scheme=proposal.scheme,
        financial_year=proposal.financial_year,
        sanctioned_amount=sanctioned_amount,
        q1_allocation=q1,
        q2_allocation=q2,
        q3_allocation=q3,
        q4_allocation=q4,
        status=AllocationStatus.ACTIVE,
        sanctioned_at=timezone.now(),
        sanctioned_by=user,
    )

    logger.info(
        "Allocation of %s sanctioned for %s",
        sanctioned_amount, proposal.proposal_number
    )
    return allocation
