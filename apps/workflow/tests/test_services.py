"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tests for the workflow services against the database:
             full approval paths, rejection, revision and resubmission,
             status propagation and the approval queue.
-------------------------------------------------------------------------
"""
from django.test import TestCase

from apps.budgeting.services import submit_proposal
from apps.core.exceptions import (
    EntityNotFoundException,
    UnsupportedEntityTypeException,
    WorkflowTransitionException,
)
from apps.core.models import ProposalStatus
from apps.workflow.models import (
    ActionType, ApprovalStage, ApprovalStatus, ApprovalWorkflow, EntityType, WorkflowAction,
)
from apps.workflow.services import (
    approve_stage,
    create_workflow,
    get_current_stage,
    get_workflow,
    pending_workflows_for,
    reject_stage,
    request_revision,
    resubmit_workflow,
    update_entity_status,
    user_can_act,
)
from apps.workflow.tests.fixtures import OrganizationTestData


class ProposalApprovalTests(OrganizationTestData, TestCase):
    """End-to-end approval of budget proposals."""

    def test_submission_creates_workflow(self) -> None:
        proposal = self.make_submitted_proposal()

        self.assertEqual(proposal.status, ProposalStatus.SUBMITTED)
        self.assertIsNotNone(proposal.submitted_at)

        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)
        self.assertEqual(workflow.entity_id, str(proposal.pk))
        self.assertEqual(workflow.total_stages, 3)
        self.assertEqual(workflow.current_stage, 1)
        self.assertEqual(workflow.submitted_by, self.section_officer)
        self.assertEqual(
            [stage.stage_number for stage in workflow.stages.all()], [1, 2, 3]
        )
        self.assertEqual(get_current_stage(workflow).stage_name, 'Department Review')

    def test_full_approval_updates_proposal(self) -> None:
        proposal = self.make_submitted_proposal()
        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)

        result = approve_stage(workflow.pk, 1, self.department_head.pk, 'Recommended')
        self.assertTrue(result.success)
        proposal.refresh_from_db()
        self.assertEqual(proposal.status, ProposalStatus.UNDER_REVIEW)

        self.assertTrue(approve_stage(workflow.pk, 2, self.secretary.pk).success)
        self.assertTrue(approve_stage(workflow.pk, 3, self.admin.pk).success)

        proposal.refresh_from_db()
        workflow.refresh_from_db()
        self.assertEqual(proposal.status, ProposalStatus.APPROVED)
        self.assertEqual(proposal.approved_by, self.admin)
        self.assertIsNotNone(proposal.approved_at)
        self.assertEqual(workflow.status, ProposalStatus.APPROVED)
        self.assertEqual(workflow.current_stage, 3)
        self.assertIsNotNone(workflow.completed_at)

        first_stage = workflow.stages.get(stage_number=1)
        self.assertEqual(first_stage.approver, self.department_head)
        self.assertEqual(first_stage.comments, 'Recommended')
        self.assertIsNotNone(first_stage.action_date)

    def test_history_records_every_decision(self) -> None:
        proposal = self.make_submitted_proposal()
        self.approve_proposal(proposal)
        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)

        history = list(workflow.actions.values_list('action', 'stage_number', 'to_status'))
        self.assertEqual(history, [
            (ActionType.SUBMITTED, 1, ProposalStatus.SUBMITTED),
            (ActionType.APPROVED, 1, ProposalStatus.UNDER_REVIEW),
            (ActionType.APPROVED, 2, ProposalStatus.UNDER_REVIEW),
            (ActionType.APPROVED, 3, ProposalStatus.APPROVED),
        ])

    def test_reject_at_second_stage(self) -> None:
        proposal = self.make_submitted_proposal()
        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)
        approve_stage(workflow.pk, 1, self.department_head.pk)

        result = reject_stage(workflow.pk, 2, self.secretary.pk, 'Not a priority this year')

        self.assertTrue(result.success)
        proposal.refresh_from_db()
        workflow.refresh_from_db()
        self.assertEqual(proposal.status, ProposalStatus.REJECTED)
        self.assertIsNone(proposal.approved_by)
        self.assertEqual(workflow.status, ProposalStatus.REJECTED)
        self.assertIsNotNone(workflow.completed_at)
        self.assertEqual(workflow.stages.get(stage_number=2).status, ApprovalStatus.REJECTED)
        self.assertEqual(workflow.stages.get(stage_number=3).status, ApprovalStatus.PENDING)

    def test_reject_without_comments_changes_nothing(self) -> None:
        proposal = self.make_submitted_proposal()
        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)

        result = reject_stage(workflow.pk, 1, self.department_head.pk, '  ')

        self.assertFalse(result.success)
        self.assertEqual(result.error_code, 'ERR_COMMENTS_REQUIRED')
        proposal.refresh_from_db()
        self.assertEqual(proposal.status, ProposalStatus.SUBMITTED)

    def test_rejected_proposal_cannot_be_resubmitted(self) -> None:
        proposal = self.make_submitted_proposal()
        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)
        reject_stage(workflow.pk, 1, self.department_head.pk, 'Duplicate proposal')
        proposal.refresh_from_db()

        with self.assertRaises(WorkflowTransitionException):
            submit_proposal(proposal, self.section_officer)

        result = resubmit_workflow(workflow.pk, self.section_officer.pk)
        self.assertEqual(result.error_code, 'ERR_INVALID_TRANSITION')

    def test_revision_then_resubmission(self) -> None:
        proposal = self.make_submitted_proposal()
        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)
        approve_stage(workflow.pk, 1, self.department_head.pk)

        result = request_revision(workflow.pk, 2, self.secretary.pk, 'Break up the capital heads')
        self.assertTrue(result.success)
        proposal.refresh_from_db()
        self.assertEqual(proposal.status, ProposalStatus.REVISION_REQUESTED)
        self.assertTrue(proposal.is_editable)

        submit_proposal(proposal, self.section_officer)

        self.assertEqual(proposal.status, ProposalStatus.SUBMITTED)
        self.assertEqual(
            ApprovalWorkflow.objects.filter(
                entity_type=EntityType.BUDGET_PROPOSAL, entity_id=str(proposal.pk)
            ).count(),
            1
        )
        workflow.refresh_from_db()
        self.assertEqual(workflow.current_stage, 1)
        self.assertEqual(workflow.status, ProposalStatus.SUBMITTED)
        self.assertFalse(
            workflow.stages.exclude(status=ApprovalStatus.PENDING).exists()
        )
        self.assertEqual(workflow.actions.last().action, ActionType.RESUBMITTED)

        # The resubmitted proposal goes through all stages again
        self.approve_proposal(proposal)
        self.assertEqual(proposal.status, ProposalStatus.APPROVED)

    def test_second_approval_of_stage_fails_without_changes(self) -> None:
        proposal = self.make_submitted_proposal()
        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)
        approve_stage(workflow.pk, 1, self.department_head.pk)
        action_count = WorkflowAction.objects.filter(workflow=workflow).count()

        result = approve_stage(workflow.pk, 1, self.department_head.pk)

        self.assertFalse(result.success)
        self.assertEqual(result.error_code, 'ERR_INVALID_TRANSITION')
        workflow.refresh_from_db()
        self.assertEqual(workflow.current_stage, 2)
        self.assertEqual(WorkflowAction.objects.filter(workflow=workflow).count(), action_count)

    def test_submitting_approved_proposal_fails(self) -> None:
        proposal = self.approve_proposal(self.make_submitted_proposal())

        with self.assertRaises(WorkflowTransitionException):
            submit_proposal(proposal, self.section_officer)


class WorkflowPersistenceTests(OrganizationTestData, TestCase):
    """Tests for status propagation and transactional behaviour."""

    def test_missing_record_rolls_back_stage_decision(self) -> None:
        created = create_workflow(EntityType.EXPENDITURE, '987654', self.section_officer.pk)
        self.assertTrue(created.success)

        result = approve_stage(created.workflow_id, 1, self.department_head.pk)

        self.assertFalse(result.success)
        self.assertEqual(result.error_code, 'ERR_ENTITY_NOT_FOUND')
        stage = ApprovalStage.objects.get(workflow_id=created.workflow_id, stage_number=1)
        self.assertEqual(stage.status, ApprovalStatus.PENDING)
        workflow = ApprovalWorkflow.objects.get(pk=created.workflow_id)
        self.assertEqual(workflow.current_stage, 1)
        self.assertEqual(workflow.actions.count(), 1)

    def test_malformed_workflow_id_is_not_found(self) -> None:
        proposal = self.make_submitted_proposal()

        results = [
            approve_stage('wf-abc', 1, self.department_head.pk),
            reject_stage('wf-abc', 1, self.department_head.pk, 'Incomplete'),
            request_revision(None, 1, self.department_head.pk, 'Incomplete'),
            resubmit_workflow('wf-abc', self.section_officer.pk),
        ]

        for result in results:
            self.assertFalse(result.success)
            self.assertEqual(result.error_code, 'ERR_WORKFLOW_NOT_FOUND')
        proposal.refresh_from_db()
        self.assertEqual(proposal.status, ProposalStatus.SUBMITTED)

    def test_create_for_unsupported_type(self) -> None:
        result = create_workflow(EntityType.REALLOCATION, '1')

        self.assertFalse(result.success)
        self.assertEqual(result.error_code, 'ERR_UNSUPPORTED_ENTITY_TYPE')
        self.assertFalse(ApprovalWorkflow.objects.exists())

    def test_update_entity_status_writes_record(self) -> None:
        proposal = self.make_proposal()

        update_entity_status(EntityType.BUDGET_PROPOSAL, proposal.pk, ProposalStatus.UNDER_REVIEW)

        proposal.refresh_from_db()
        self.assertEqual(proposal.status, ProposalStatus.UNDER_REVIEW)

    def test_update_entity_status_errors(self) -> None:
        with self.assertRaises(UnsupportedEntityTypeException):
            update_entity_status(EntityType.SCHEME, self.scheme.pk, ProposalStatus.APPROVED)

        with self.assertRaises(EntityNotFoundException):
            update_entity_status(EntityType.BUDGET_PROPOSAL, 123456, ProposalStatus.APPROVED)

        with self.assertRaises(EntityNotFoundException):
            update_entity_status(EntityType.BUDGET_PROPOSAL, 'not-a-number', ProposalStatus.APPROVED)

    def test_get_workflow_returns_latest(self) -> None:
        proposal = self.make_proposal()
        first = create_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)
        second = create_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)

        self.assertNotEqual(first.workflow_id, second.workflow_id)
        self.assertEqual(get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk).pk, second.workflow_id)
        self.assertIsNone(get_workflow(EntityType.EXPENDITURE, proposal.pk))


class PendingApprovalTests(OrganizationTestData, TestCase):
    """Tests for the approval queue and the can-act check."""

    def setUp(self) -> None:
        self.proposal = self.make_submitted_proposal()
        self.workflow = get_workflow(EntityType.BUDGET_PROPOSAL, self.proposal.pk)

    def test_queue_follows_current_stage(self) -> None:
        self.assertEqual(pending_workflows_for(self.department_head), [self.workflow])
        self.assertEqual(pending_workflows_for(self.secretary), [])

        approve_stage(self.workflow.pk, 1, self.department_head.pk)

        self.assertEqual(pending_workflows_for(self.department_head), [])
        self.assertEqual(pending_workflows_for(self.secretary), [self.workflow])

    def test_queue_is_scoped(self) -> None:
        self.assertEqual(pending_workflows_for(self.other_head), [])
        self.assertEqual(pending_workflows_for(self.section_officer), [])
        self.assertEqual(pending_workflows_for(self.auditor), [])

    def test_finance_admin_sees_every_open_workflow(self) -> None:
        self.assertEqual(pending_workflows_for(self.admin), [self.workflow])

        reject_stage(self.workflow.pk, 1, self.admin.pk, 'Withdrawn')

        self.assertEqual(pending_workflows_for(self.admin), [])

    def test_user_can_act(self) -> None:
        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, self.proposal.pk)

        self.assertTrue(user_can_act(self.department_head, workflow))
        self.assertFalse(user_can_act(self.other_head, workflow))
        self.assertFalse(user_can_act(self.secretary, workflow))
        self.assertFalse(user_can_act(self.department_head, None))
