"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Centralized logging for approval workflow operations.
-------------------------------------------------------------------------
"""
import logging
from typing import Optional

logger = logging.getLogger('workflow')


class WorkflowLogger:
    """Centralized logging for workflow operations"""

    @staticmethod
    def log_workflow_created(workflow, submitted_by_id: Optional[int]):
        """Log a new workflow with its stage count"""
        logger.info(
            f"Workflow created: #{workflow.pk} | "
            f"Entity: {workflow.entity_type} {workflow.entity_id} | "
            f"Stages: {workflow.total_stages} | "
            f"Submitted by: {submitted_by_id}",
            extra={
                'workflow_id': workflow.pk,
                'entity_type': workflow.entity_type,
                'entity_id': workflow.entity_id,
                'total_stages': workflow.total_stages,
                'user_id': submitted_by_id,
            }
        )

    @staticmethod
    def log_stage_approved(workflow, stage_number: int, approver_id: Optional[int]):
        """Log stage approval, noting whether the workflow completed"""
        outcome = 'workflow approved' if workflow.status == 'Approved' else f"moved to stage {workflow.current_stage}"
        logger.info(
            f"Stage approved: workflow #{workflow.pk} stage {stage_number} | "
            f"Entity: {workflow.entity_type} {workflow.entity_id} | "
            f"Outcome: {outcome} | "
            f"Approver: {approver_id}",
            extra={
                'workflow_id': workflow.pk,
                'stage_number': stage_number,
                'workflow_status': workflow.status,
                'user_id': approver_id,
            }
        )

    @staticmethod
    def log_stage_rejected(workflow, stage_number: int, approver_id: Optional[int], comments: str):
        """Log stage rejection"""
        logger.warning(
            f"Stage rejected: workflow #{workflow.pk} stage {stage_number} | "
            f"Entity: {workflow.entity_type} {workflow.entity_id} | "
            f"Reason: {comments} | "
            f"Rejected by: {approver_id}",
            extra={
                'workflow_id': workflow.pk,
                'stage_number': stage_number,
                'comments': comments,
                'user_id': approver_id,
            }
        )

    @staticmethod
    def log_revision_requested(workflow, stage_number: int, approver_id: Optional[int], comments: str):
        """Log a revision request"""
        logger.info(
            f"Revision requested: workflow #{workflow.pk} stage {stage_number} | "
            f"Entity: {workflow.entity_type} {workflow.entity_id} | "
            f"Comments: {comments} | "
            f"Requested by: {approver_id}",
            extra={
                'workflow_id': workflow.pk,
                'stage_number': stage_number,
                'comments': comments,
                'user_id': approver_id,
            }
        )

    @staticmethod
    def log_workflow_resubmitted(workflow, submitted_by_id: Optional[int]):
        """Log resubmission after a revision request"""
        logger.info(
            f"Workflow resubmitted: #{workflow.pk} | "
            f"Entity: {workflow.entity_type} {workflow.entity_id} | "
            f"Resubmitted by: {submitted_by_id}",
            extra={
                'workflow_id': workflow.pk,
                'entity_type': workflow.entity_type,
                'entity_id': workflow.entity_id,
                'user_id': submitted_by_id,
            }
        )

    @staticmethod
    def log_action_failed(
        action: str,
        workflow_id: Optional[int],
        user_id: Optional[int],
        error_code: str,
        message: str,
        stage_number: Optional[int] = None
    ):
        """Log failed workflow operations"""
        logger.error(
            f"Workflow {action} failed: workflow #{workflow_id} stage {stage_number} | "
            f"Error: {error_code} {message} | "
            f"User: {user_id}",
            extra={
                'action': action,
                'workflow_id': workflow_id,
                'stage_number': stage_number,
                'error_code': error_code,
                'user_id': user_id,
            }
        )
