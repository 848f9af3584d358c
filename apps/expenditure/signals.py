"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Signal handlers for the expenditure module. Marks an
             allocation Exhausted once approved expenditure uses up
             its sanctioned amount.
-------------------------------------------------------------------------
"""
import logging
from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.core.models import ProposalStatus
from apps.workflow.models import ActionType, EntityType, WorkflowAction

logger = logging.getLogger(__name__)


@receiver(post_save, sender=WorkflowAction)
def exhaust_allocation_on_approval(sender, instance: WorkflowAction, created: bool, **kwargs):
    """
    Flag the allocation as Exhausted after the final expenditure approval
    leaves no available balance.

    Runs inside the approval transaction.
    """
    if not created:
        return

    if instance.action != ActionType.APPROVED or instance.to_status != ProposalStatus.APPROVED:
        return

    workflow = instance.workflow
    if workflow.entity_type != EntityType.EXPENDITURE:
        return

    from apps.budgeting.models import AllocationStatus
    from apps.expenditure.models import Expenditure

    expenditure = Expenditure.objects.select_related('allocation').filter(pk=workflow.entity_id).first()
    if expenditure is None or expenditure.allocation is None:
        return

    allocation = expenditure.allocation
    if allocation.status == AllocationStatus.ACTIVE and allocation.get_available_balance() <= 0:
        allocation.status = AllocationStatus.EXHAUSTED
        allocation.save(update_fields=['status', 'updated_at'])
        logger.info(
            "Allocation %s for %s marked Exhausted after expenditure %s",
            allocation.pk, allocation.scheme_id, expenditure.pk
        )
