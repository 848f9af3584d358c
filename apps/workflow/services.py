"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Approval workflow engine. Creates workflows from stage
             templates, applies approve / reject / revision / resubmit
             decisions, and keeps the gated record's status in step
             with its workflow.
-------------------------------------------------------------------------
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from django.db import DatabaseError
from django.db.models import F, Prefetch
from django.utils import timezone

from apps.core.exceptions import (
    GBMSException,
    CommentsRequiredException,
    UnsupportedEntityTypeException,
    WorkflowNotFoundException,
    WorkflowTransitionException,
)
from apps.core.models import ProposalStatus
from apps.users.models import UserRole
from apps.workflow.logging import WorkflowLogger
from apps.workflow.models import (
    ActionType, ApprovalStage, ApprovalStatus, ApprovalWorkflow, OPEN_STATUSES,
)
from apps.workflow.workflows import (
    can_approve_stage,
    get_workflow_stages,
    has_workflow,
    validate_resubmission,
    validate_stage_action,
)

logger = logging.getLogger(__name__)

PERSISTENCE_ERROR_CODE = 'ERR_PERSISTENCE'


@dataclass
class WorkflowResult:
    """Outcome of a workflow operation, safe to hand to a view."""
    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    workflow_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'error': self.error,
            'error_code': self.error_code,
            'workflow_id': self.workflow_id,
        }


class WorkflowEngine:
    """
    State machine for multi-stage approvals.

    Persistence is delegated to a repository (workflows, stages and
    history) and a status writer (the gated records). Every mutating
    method runs inside repository.atomic() and locks the workflow row
    before validating, so concurrent decisions on the same stage
    cannot both succeed.

    Methods raise GBMSException subclasses on failure.
    """

    def __init__(self, repository, status_writer, clock: Callable = timezone.now):
        self.repository = repository
        self.status_writer = status_writer
        self.clock = clock

    def create(self, entity_type: str, entity_id: Any, submitted_by_id: Optional[int] = None):
        """
        Create a workflow at stage 1 with one Pending stage per template entry.

        Raises:
            UnsupportedEntityTypeException: If entity_type has no stage template.
        """
        if not has_workflow(entity_type):
            raise UnsupportedEntityTypeException(
                f"No approval workflow is defined for entity type '{entity_type}'.",
                details={'entity_type': entity_type}
            )

        templates = get_workflow_stages(entity_type)
        now = self.clock()
        with self.repository.atomic():
            workflow = self.repository.create_workflow(
                entity_type=entity_type,
                entity_id=str(entity_id),
                total_stages=len(templates),
                submitted_by_id=submitted_by_id,
                submitted_at=now,
            )
            self.repository.create_stages(workflow, templates)
            self.repository.record_action(
                workflow, 1, ActionType.SUBMITTED, submitted_by_id,
                from_status='', to_status=ProposalStatus.SUBMITTED,
            )

        WorkflowLogger.log_workflow_created(workflow, submitted_by_id)
        return workflow

    def approve(self, workflow_id, stage_number: int, approver_id: Optional[int], comments: Optional[str] = None):
        """
        Approve the current stage.

        The final stage approves the workflow and the record; any other
        stage advances the workflow to the next stage, Under Review.
        """
        now = self.clock()
        with self.repository.atomic():
            workflow, stage = self._load_actionable(workflow_id, stage_number)
            previous_status = workflow.status

            self._decide(stage, ApprovalStatus.APPROVED, approver_id, comments, now)

            if stage_number == workflow.total_stages:
                workflow.status = ProposalStatus.APPROVED
                workflow.completed_at = now
                self.repository.save_workflow(workflow, ['status', 'completed_at'])
                self.status_writer.update(
                    workflow.entity_type,
                    workflow.entity_id,
                    ProposalStatus.APPROVED,
                    approved_by_id=approver_id,
                    approved_at=now,
                )
            else:
                workflow.current_stage = stage_number + 1
                workflow.status = ProposalStatus.UNDER_REVIEW
                self.repository.save_workflow(workflow, ['current_stage', 'status'])
                self.status_writer.update(
                    workflow.entity_type, workflow.entity_id, ProposalStatus.UNDER_REVIEW
                )

            self.repository.record_action(
                workflow, stage_number, ActionType.APPROVED, approver_id,
                from_status=previous_status, to_status=workflow.status, comments=comments,
            )

        WorkflowLogger.log_stage_approved(workflow, stage_number, approver_id)
        return workflow

    def reject(self, workflow_id, stage_number: int, approver_id: Optional[int], comments: str):
        """Reject the current stage, ending the workflow as Rejected."""
        self._require_comments(comments)

        now = self.clock()
        with self.repository.atomic():
            workflow, stage = self._load_actionable(workflow_id, stage_number)
            previous_status = workflow.status

            self._decide(stage, ApprovalStatus.REJECTED, approver_id, comments, now)

            workflow.status = ProposalStatus.REJECTED
            workflow.completed_at = now
            self.repository.save_workflow(workflow, ['status', 'completed_at'])
            self.status_writer.update(workflow.entity_type, workflow.entity_id, ProposalStatus.REJECTED)

            self.repository.record_action(
                workflow, stage_number, ActionType.REJECTED, approver_id,
                from_status=previous_status, to_status=workflow.status, comments=comments,
            )

        WorkflowLogger.log_stage_rejected(workflow, stage_number, approver_id, comments)
        return workflow

    def request_revision(self, workflow_id, stage_number: int, approver_id: Optional[int], comments: str):
        """Send the record back to its submitter; the workflow stays open for resubmission."""
        self._require_comments(comments)

        now = self.clock()
        with self.repository.atomic():
            workflow, stage = self._load_actionable(workflow_id, stage_number)
            previous_status = workflow.status

            self._decide(stage, ApprovalStatus.REJECTED, approver_id, comments, now)

            workflow.status = ProposalStatus.REVISION_REQUESTED
            self.repository.save_workflow(workflow, ['status'])
            self.status_writer.update(
                workflow.entity_type, workflow.entity_id, ProposalStatus.REVISION_REQUESTED
            )

            self.repository.record_action(
                workflow, stage_number, ActionType.REVISION_REQUESTED, approver_id,
                from_status=previous_status, to_status=workflow.status, comments=comments,
            )

        WorkflowLogger.log_revision_requested(workflow, stage_number, approver_id, comments)
        return workflow

    def resubmit(self, workflow_id, submitted_by_id: Optional[int] = None):
        """
        Restart a workflow after a revision request.

        The workflow returns to stage 1 and every stage is reset to
        Pending. Earlier decisions remain in the action history.
        """
        now = self.clock()
        with self.repository.atomic():
            workflow = self.repository.get_workflow_for_update(workflow_id)
            if workflow is None:
                raise WorkflowNotFoundException(details={'workflow_id': workflow_id})

            is_valid, error = validate_resubmission(workflow.status)
            if not is_valid:
                raise WorkflowTransitionException(str(error), details={'workflow_id': workflow_id})

            previous_status = workflow.status
            for stage in self.repository.get_stages(workflow):
                stage.status = ApprovalStatus.PENDING
                stage.approver_id = None
                stage.comments = None
                stage.action_date = None
                self.repository.save_stage(stage, ['status', 'approver', 'comments', 'action_date'])

            workflow.current_stage = 1
            workflow.status = ProposalStatus.SUBMITTED
            workflow.submitted_by_id = submitted_by_id
            workflow.submitted_at = now
            workflow.completed_at = None
            self.repository.save_workflow(
                workflow, ['current_stage', 'status', 'submitted_by', 'submitted_at', 'completed_at']
            )
            self.status_writer.update(workflow.entity_type, workflow.entity_id, ProposalStatus.SUBMITTED)

            self.repository.record_action(
                workflow, 1, ActionType.RESUBMITTED, submitted_by_id,
                from_status=previous_status, to_status=workflow.status,
            )

        WorkflowLogger.log_workflow_resubmitted(workflow, submitted_by_id)
        return workflow

    def _load_actionable(self, workflow_id, stage_number: int):
        """Lock the workflow and return it with the stage being decided."""
        workflow = self.repository.get_workflow_for_update(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundException(details={'workflow_id': workflow_id})

        stage = self.repository.get_stage(workflow, stage_number)
        is_valid, error = validate_stage_action(
            workflow.status,
            workflow.current_stage,
            stage_number,
            stage.status if stage is not None else None,
        )
        if not is_valid:
            raise WorkflowTransitionException(
                str(error),
                details={'workflow_id': workflow_id, 'stage_number': stage_number}
            )
        return workflow, stage

    def _decide(self, stage, status: str, approver_id: Optional[int], comments: Optional[str], now) -> None:
        stage.status = status
        stage.approver_id = approver_id
        stage.comments = comments
        stage.action_date = now
        self.repository.save_stage(stage, ['status', 'approver', 'comments', 'action_date'])

    @staticmethod
    def _require_comments(comments: Optional[str]) -> None:
        if not (comments or '').strip():
            raise CommentsRequiredException()


def get_engine() -> WorkflowEngine:
    """Engine wired to the Django ORM."""
    from apps.workflow.repositories import DjangoEntityStatusWriter, DjangoWorkflowRepository

    return WorkflowEngine(DjangoWorkflowRepository(), DjangoEntityStatusWriter())


def _run(
    action: str,
    operation: Callable,
    workflow_id: Optional[int] = None,
    stage_number: Optional[int] = None,
    user_id: Optional[int] = None
) -> WorkflowResult:
    """Run an engine operation and convert its outcome to a WorkflowResult."""
    try:
        workflow = operation()
    except GBMSException as exc:
        WorkflowLogger.log_action_failed(
            action, workflow_id, user_id, exc.error_code, str(exc.message), stage_number
        )
        return WorkflowResult(
            success=False,
            error=str(exc.message),
            error_code=exc.error_code,
            workflow_id=workflow_id,
        )
    except DatabaseError as exc:
        logger.exception("Database error during workflow %s on workflow #%s", action, workflow_id)
        WorkflowLogger.log_action_failed(
            action, workflow_id, user_id, PERSISTENCE_ERROR_CODE, str(exc), stage_number
        )
        return WorkflowResult(
            success=False,
            error='The workflow could not be saved. No changes were made.',
            error_code=PERSISTENCE_ERROR_CODE,
            workflow_id=workflow_id,
        )
    return WorkflowResult(success=True, workflow_id=workflow.pk)


def create_workflow(
    entity_type: str,
    entity_id: Any,
    submitted_by_id: Optional[int] = None,
    engine: Optional[WorkflowEngine] = None
) -> WorkflowResult:
    """Create an approval workflow for a record. See WorkflowEngine.create."""
    engine = engine or get_engine()
    return _run(
        'create',
        lambda: engine.create(entity_type, entity_id, submitted_by_id),
        user_id=submitted_by_id,
    )


def approve_stage(
    workflow_id: int,
    stage_number: int,
    approver_id: Optional[int],
    comments: Optional[str] = None,
    engine: Optional[WorkflowEngine] = None
) -> WorkflowResult:
    """Approve the current stage of a workflow."""
    engine = engine or get_engine()
    return _run(
        'approve',
        lambda: engine.approve(workflow_id, stage_number, approver_id, comments),
        workflow_id, stage_number, approver_id,
    )


def reject_stage(
    workflow_id: int,
    stage_number: int,
    approver_id: Optional[int],
    comments: str,
    engine: Optional[WorkflowEngine] = None
) -> WorkflowResult:
    """Reject the current stage of a workflow. Comments are required."""
    engine = engine or get_engine()
    return _run(
        'reject',
        lambda: engine.reject(workflow_id, stage_number, approver_id, comments),
        workflow_id, stage_number, approver_id,
    )


def request_revision(
    workflow_id: int,
    stage_number: int,
    approver_id: Optional[int],
    comments: str,
    engine: Optional[WorkflowEngine] = None
) -> WorkflowResult:
    """Send a record back for revision. Comments are required."""
    engine = engine or get_engine()
    return _run(
        'revision',
        lambda: engine.request_revision(workflow_id, stage_number, approver_id, comments),
        workflow_id, stage_number, approver_id,
    )


def resubmit_workflow(
    workflow_id: int,
    submitted_by_id: Optional[int] = None,
    engine: Optional[WorkflowEngine] = None
) -> WorkflowResult:
    """Restart a workflow at stage 1 after a revision request."""
    engine = engine or get_engine()
    return _run(
        'resubmit',
        lambda: engine.resubmit(workflow_id, submitted_by_id),
        workflow_id, 1, submitted_by_id,
    )


def update_entity_status(
    entity_type: str,
    entity_id: Any,
    status: str,
    approved_by_id: Optional[int] = None,
    approved_at=None
) -> None:
    """
    Write a status onto the record gated by a workflow.

    Raises:
        UnsupportedEntityTypeException: If entity_type has no status target.
        EntityNotFoundException: If the record does not exist.
    """
    from apps.workflow.repositories import DjangoEntityStatusWriter

    DjangoEntityStatusWriter().update(
        entity_type, str(entity_id), status,
        approved_by_id=approved_by_id, approved_at=approved_at,
    )


def get_workflow(entity_type: str, entity_id: Any) -> Optional[ApprovalWorkflow]:
    """Return the most recent workflow for a record, stages prefetched in order."""
    return (
        ApprovalWorkflow.objects
        .filter(entity_type=entity_type, entity_id=str(entity_id))
        .select_related('submitted_by')
        .prefetch_related(
            Prefetch('stages', queryset=ApprovalStage.objects.select_related('approver').order_by('stage_number'))
        )
        .order_by('-created_at', '-id')
        .first()
    )


def get_current_stage(workflow: Optional[ApprovalWorkflow]) -> Optional[ApprovalStage]:
    """Return the stage a workflow is waiting on."""
    if workflow is None:
        return None
    for stage in workflow.stages.all():
        if stage.stage_number == workflow.current_stage:
            return stage
    return None


def user_can_act(user, workflow: ApprovalWorkflow, stage: Optional[ApprovalStage] = None) -> bool:
    """Whether user may decide the current stage of an open workflow."""
    from apps.workflow.repositories import DjangoEntityStatusWriter

    if workflow is None or workflow.status not in OPEN_STATUSES:
        return False
    stage = stage or get_current_stage(workflow)
    if stage is None or stage.status != ApprovalStatus.PENDING:
        return False

    ministry_id, department_id = DjangoEntityStatusWriter().get_scope(
        workflow.entity_type, workflow.entity_id
    )
    return can_approve_stage(user, stage.approver_role, ministry_id, department_id)


def pending_workflows_for(user) -> List[ApprovalWorkflow]:
    """
    Open workflows whose current stage the user may decide.

    Returns:
        Workflows ordered by submission date, oldest first.
    """
    if user is None or not getattr(user, 'is_authenticated', True):
        return []

    stages = ApprovalStage.objects.filter(
        workflow__status__in=OPEN_STATUSES,
        stage_number=F('workflow__current_stage'),
        status=ApprovalStatus.PENDING,
    ).select_related('workflow').order_by('workflow__submitted_at', 'workflow_id')

    is_admin = getattr(user, 'is_superuser', False) or user.role == UserRole.FINANCE_MINISTRY_ADMIN
    if not is_admin:
        stages = stages.filter(approver_role=user.role)

    return [stage.workflow for stage in stages if user_can_act(user, stage.workflow, stage)]
