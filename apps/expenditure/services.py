"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Business logic services for recording expenditure and
             submitting it for approval.
-------------------------------------------------------------------------
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple
from django.db import transaction

from apps.budgeting.services import get_financial_year, submit_for_approval
from apps.core.exceptions import AllocationException, BudgetExceededException
from apps.core.models import ProposalStatus

logger = logging.getLogger(__name__)


def check_allocation_balance(allocation, amount: Decimal) -> Tuple[bool, Optional[str]]:
    """
    Check whether an allocation can absorb an expenditure.

    Returns:
        Tuple of (is_valid, error_message)
    """
    from apps.budgeting.models import AllocationStatus

    if allocation.status != AllocationStatus.ACTIVE:
        return False, f"Allocation for {allocation.scheme.code} is {allocation.status}; no expenditure can be charged."

    available = allocation.get_available_balance()
    if amount > available:
        return False, (
            f"Expenditure of {amount} exceeds the available balance of {available} "
            f"for {allocation.scheme.code} ({allocation.financial_year})."
        )

    return True, None


@transaction.atomic
def record_expenditure(
    scheme,
    amount: Decimal,
    expenditure_type: str,
    transaction_date: date,
    voucher_number: str = '',
    description: str = '',
    user=None,
    allocation=None
):
    """
    Record a Draft expenditure under a scheme.

    Month and financial year are derived from the transaction date;
    ministry and department are copied from the scheme.

    Raises:
        AllocationException: If the allocation belongs to another scheme
            or is not Active.
        BudgetExceededException: If amount exceeds the allocation's
            available balance.
    """
    from apps.budgeting.models import AllocationStatus, BudgetAllocation
    from apps.expenditure.models import Expenditure

    amount = Decimal(str(amount))
    financial_year = get_financial_year(transaction_date)

    if allocation is not None:
        allocation = BudgetAllocation.objects.select_for_update().get(pk=allocation.pk)
        if allocation.scheme_id != scheme.pk:
            raise AllocationException(
                f"Allocation {allocation.pk} does not belong to scheme {scheme.code}."
            )
        is_valid, error = check_allocation_balance(allocation, amount)
        if not is_valid:
            if allocation.status != AllocationStatus.ACTIVE:
                raise AllocationException(error)
            raise BudgetExceededException(
                error,
                details={'available': str(allocation.get_available_balance()), 'requested': str(amount)}
            )

    expenditure = Expenditure(
        allocation=allocation,
        scheme=scheme,
        ministry_id=scheme.ministry_id,
        department_id=scheme.department_id,
        financial_year=financial_year,
        month=transaction_date.month,
        amount=amount,
        expenditure_type=expenditure_type,
        transaction_date=transaction_date,
        voucher_number=voucher_number or '',
        description=description or '',
        status=ProposalStatus.DRAFT,
    )
    expenditure.save_with_user(user)

    logger.info(
        "Expenditure of %s recorded for scheme %s (%s, month %s)",
        amount, scheme.code, financial_year, transaction_date.month
    )
    return expenditure


@transaction.atomic
def submit_expenditure(expenditure, user):
    """Submit a Draft or Revision Requested expenditure for approval."""
    from apps.workflow.models import EntityType

    submit_for_approval(EntityType.EXPENDITURE, expenditure, user)
    logger.info("Expenditure %s submitted (status %s)", expenditure.pk, expenditure.status)
    return expenditure
