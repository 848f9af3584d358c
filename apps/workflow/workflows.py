"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Approval stage templates per entity type, stage action
             validation and the approval authorization predicate.
             Everything here is pure and needs no database.
-------------------------------------------------------------------------
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from django.utils.translation import gettext_lazy as _

from apps.core.models import ProposalStatus
from apps.users.models import UserRole
from apps.workflow.models import ApprovalStatus, EntityType, OPEN_STATUSES


@dataclass(frozen=True)
class StageTemplate:
    """One stage of an approval path: who must act, and in which order."""
    stage_number: int
    stage_name: str
    approver_role: str


# Ordered approval paths. Stage numbers are contiguous from 1.
WORKFLOW_STAGES: Dict[str, List[StageTemplate]] = {
    EntityType.BUDGET_PROPOSAL: [
        StageTemplate(1, 'Department Review', UserRole.DEPARTMENT_HEAD),
        StageTemplate(2, 'Ministry Review', UserRole.MINISTRY_SECRETARY),
        StageTemplate(3, 'Finance Ministry Approval', UserRole.FINANCE_MINISTRY_ADMIN),
    ],
    EntityType.EXPENDITURE: [
        StageTemplate(1, 'Department Approval', UserRole.DEPARTMENT_HEAD),
        StageTemplate(2, 'Ministry Approval', UserRole.MINISTRY_SECRETARY),
    ],
}


def get_workflow_stages(entity_type: str) -> List[StageTemplate]:
    """
    Return the ordered stage template for an entity type.

    Args:
        entity_type: An EntityType value.

    Returns:
        List of StageTemplate, empty when the type has no approval path
        (Reallocation, Scheme, or anything unknown).
    """
    return list(WORKFLOW_STAGES.get(entity_type, []))


def has_workflow(entity_type: str) -> bool:
    return entity_type in WORKFLOW_STAGES


def validate_stage_action(
    workflow_status: str,
    current_stage: int,
    stage_number: int,
    stage_status: Optional[str]
) -> Tuple[bool, Optional[str]]:
    """
    Validate that a decision may be taken on a stage.

    Args:
        workflow_status: Current status of the workflow.
        current_stage: Stage number the workflow is waiting on.
        stage_number: Stage number the caller wants to act on.
        stage_status: Status of that stage, None when it does not exist.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if workflow_status not in OPEN_STATUSES:
        return False, _(
            f"Workflow is {workflow_status}; no further decisions can be taken."
        )

    if stage_number != current_stage:
        return False, _(
            f"Stage {stage_number} is not the current stage (stage {current_stage} is awaiting a decision)."
        )

    if stage_status is None:
        return False, _(f"Stage {stage_number} does not exist on this workflow.")

    if stage_status != ApprovalStatus.PENDING:
        return False, _(f"Stage {stage_number} has already been {stage_status.lower()}.")

    return True, None


def validate_resubmission(workflow_status: str) -> Tuple[bool, Optional[str]]:
    """Only workflows sent back for revision can be resubmitted."""
    if workflow_status != ProposalStatus.REVISION_REQUESTED:
        return False, _(
            f"Only workflows with status {ProposalStatus.REVISION_REQUESTED} can be resubmitted "
            f"(current status: {workflow_status})."
        )
    return True, None


def can_approve_stage(
    profile: Any,
    current_stage_role: str,
    ministry_id: Optional[int] = None,
    department_id: Optional[int] = None
) -> bool:
    """
    Decide whether a user may act on a stage gated to current_stage_role.

    Finance Ministry Admins (and superusers) may act on any stage.
    Everyone else must hold the stage role; Department Heads are further
    limited to their own department and Ministry Secretaries to their
    own ministry. A record without a department (or ministry) cannot be
    decided by a scoped role.

    Args:
        profile: The acting user, or None.
        current_stage_role: approver_role of the stage awaiting a decision.
        ministry_id: Ministry of the record under approval.
        department_id: Department of the record under approval.
    """
    if profile is None:
        return False

    if getattr(profile, 'is_superuser', False) or profile.role == UserRole.FINANCE_MINISTRY_ADMIN:
        return True

    if profile.role != current_stage_role:
        return False

    if profile.role == UserRole.DEPARTMENT_HEAD:
        return department_id is not None and profile.department_id == department_id

    if profile.role == UserRole.MINISTRY_SECRETARY:
        return ministry_id is not None and profile.ministry_id == ministry_id

    return True
