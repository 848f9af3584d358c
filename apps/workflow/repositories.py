"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django ORM persistence for the workflow engine: workflow
             and stage storage, action history, and status updates on
             the records that a workflow gates.
-------------------------------------------------------------------------
"""
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from django.apps import apps
from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import EntityNotFoundException, UnsupportedEntityTypeException
from apps.core.models import ProposalStatus
from apps.workflow.models import (
    ApprovalStage, ApprovalStatus, ApprovalWorkflow, EntityType, WorkflowAction,
)


# Model that holds the status for each entity type with an approval path
ENTITY_MODELS = {
    EntityType.BUDGET_PROPOSAL: 'budgeting.BudgetProposal',
    EntityType.EXPENDITURE: 'expenditure.Expenditure',
}


def get_entity_model(entity_type: str):
    """
    Resolve the model class for an entity type.

    Raises:
        UnsupportedEntityTypeException: If the type has no status target.
    """
    label = ENTITY_MODELS.get(entity_type)
    if label is None:
        raise UnsupportedEntityTypeException(
            f"No record type is registered for entity type '{entity_type}'.",
            details={'entity_type': entity_type}
        )
    return apps.get_model(label)


class DjangoWorkflowRepository:
    """Stores workflows, stages and history rows through the ORM."""

    def atomic(self):
        return transaction.atomic()

    def create_workflow(
        self,
        entity_type: str,
        entity_id: str,
        total_stages: int,
        submitted_by_id: Optional[int],
        submitted_at: datetime
    ) -> ApprovalWorkflow:
        return ApprovalWorkflow.objects.create(
            entity_type=entity_type,
            entity_id=entity_id,
            current_stage=1,
            total_stages=total_stages,
            status=ProposalStatus.SUBMITTED,
            submitted_by_id=submitted_by_id,
            submitted_at=submitted_at,
        )

    def create_stages(self, workflow: ApprovalWorkflow, templates: Iterable) -> List[ApprovalStage]:
        return ApprovalStage.objects.bulk_create([
            ApprovalStage(
                workflow=workflow,
                stage_number=template.stage_number,
                stage_name=template.stage_name,
                approver_role=template.approver_role,
                status=ApprovalStatus.PENDING,
            )
            for template in templates
        ])

    def get_workflow_for_update(self, workflow_id) -> Optional[ApprovalWorkflow]:
        """Load a workflow and lock its row until the transaction ends."""
        try:
            return ApprovalWorkflow.objects.select_for_update().filter(pk=workflow_id).first()
        except (ValueError, TypeError):
            return None

    def get_stage(self, workflow: ApprovalWorkflow, stage_number: int) -> Optional[ApprovalStage]:
        return ApprovalStage.objects.filter(workflow=workflow, stage_number=stage_number).first()

    def get_stages(self, workflow: ApprovalWorkflow) -> List[ApprovalStage]:
        return list(ApprovalStage.objects.filter(workflow=workflow).order_by('stage_number'))

    def save_workflow(self, workflow: ApprovalWorkflow, fields: List[str]) -> None:
        workflow.save(update_fields=fields + ['updated_at'])

    def save_stage(self, stage: ApprovalStage, fields: List[str]) -> None:
        stage.save(update_fields=fields + ['updated_at'])

    def record_action(
        self,
        workflow: ApprovalWorkflow,
        stage_number: int,
        action: str,
        actor_id: Optional[int],
        from_status: str,
        to_status: str,
        comments: Optional[str] = None
    ) -> WorkflowAction:
        return WorkflowAction.objects.create(
            workflow=workflow,
            stage_number=stage_number,
            action=action,
            actor_id=actor_id,
            comments=comments or '',
            from_status=from_status,
            to_status=to_status,
        )


class DjangoEntityStatusWriter:
    """Pushes workflow outcomes onto budget proposals and expenditures."""

    def update(
        self,
        entity_type: str,
        entity_id: str,
        status: str,
        approved_by_id: Optional[int] = None,
        approved_at: Optional[datetime] = None
    ) -> None:
        """
        Write the status of the record gated by a workflow.

        approved_by and approved_at are written only for an Approved
        status with an approver.

        Raises:
            UnsupportedEntityTypeException: If the type has no status target.
            EntityNotFoundException: If no record matches entity_id.
        """
        model = get_entity_model(entity_type)

        values = {'status': status, 'updated_at': timezone.now()}
        if status == ProposalStatus.APPROVED and approved_by_id is not None:
            values['approved_by_id'] = approved_by_id
            values['approved_at'] = approved_at or timezone.now()
        if status == ProposalStatus.SUBMITTED:
            values['submitted_at'] = timezone.now()

        try:
            updated = model.objects.filter(pk=entity_id).update(**values)
        except (ValueError, TypeError):
            updated = 0

        if not updated:
            raise EntityNotFoundException(
                f"{entity_type} {entity_id} was not found.",
                details={'entity_type': entity_type, 'entity_id': entity_id}
            )

    def get_scope(self, entity_type: str, entity_id: str) -> Tuple[Optional[int], Optional[int]]:
        """Return (ministry_id, department_id) of a record, or (None, None)."""
        model = get_entity_model(entity_type)
        try:
            row = model.objects.filter(pk=entity_id).values('ministry_id', 'department_id').first()
        except (ValueError, TypeError):
            row = None
        if row is None:
            return None, None
        return row['ministry_id'], row['department_id']
