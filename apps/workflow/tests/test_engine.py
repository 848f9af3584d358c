"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the WorkflowEngine state machine using
             in-memory storage, without a database.
-------------------------------------------------------------------------
"""
import contextlib
from datetime import datetime, timezone as dt_timezone
from types import SimpleNamespace
from django.db import DatabaseError
from django.test import SimpleTestCase

from apps.core.exceptions import (
    CommentsRequiredException,
    EntityNotFoundException,
    UnsupportedEntityTypeException,
    WorkflowNotFoundException,
    WorkflowTransitionException,
)
from apps.core.models import ProposalStatus
from apps.users.models import UserRole
from apps.workflow.models import ActionType, ApprovalStatus, EntityType
from apps.workflow.services import (
    WorkflowEngine,
    approve_stage,
    create_workflow,
    reject_stage,
    request_revision,
    resubmit_workflow,
)


NOW = datetime(2025, 9, 1, 10, 30, tzinfo=dt_timezone.utc)


class InMemoryWorkflowRepository:
    """Stores workflows, stages and history in dictionaries."""

    def __init__(self):
        self.workflows = {}
        self.stages = {}
        self.actions = []
        self.next_id = 1

    @contextlib.contextmanager
    def atomic(self):
        yield

    def create_workflow(self, entity_type, entity_id, total_stages, submitted_by_id, submitted_at):
        workflow = SimpleNamespace(
            pk=self.next_id,
            entity_type=entity_type,
            entity_id=entity_id,
            current_stage=1,
            total_stages=total_stages,
            status=ProposalStatus.SUBMITTED,
            submitted_by_id=submitted_by_id,
            submitted_at=submitted_at,
            completed_at=None,
        )
        self.workflows[workflow.pk] = workflow
        self.stages[workflow.pk] = []
        self.next_id += 1
        return workflow

    def create_stages(self, workflow, templates):
        stages = [
            SimpleNamespace(
                stage_number=t.stage_number,
                stage_name=t.stage_name,
                approver_role=t.approver_role,
                approver_id=None,
                status=ApprovalStatus.PENDING,
                comments=None,
                action_date=None,
            )
            for t in templates
        ]
        self.stages[workflow.pk] = stages
        return stages

    def get_workflow_for_update(self, workflow_id):
        return self.workflows.get(workflow_id)

    def get_stage(self, workflow, stage_number):
        for stage in self.stages[workflow.pk]:
            if stage.stage_number == stage_number:
                return stage
        return None

    def get_stages(self, workflow):
        return list(self.stages[workflow.pk])

    def save_workflow(self, workflow, fields):
        pass

    def save_stage(self, stage, fields):
        pass

    def record_action(self, workflow, stage_number, action, actor_id, from_status, to_status, comments=None):
        self.actions.append((workflow.pk, stage_number, action, actor_id, from_status, to_status))


class RecordingStatusWriter:
    """Remembers every status write; can be told a record is missing."""

    def __init__(self, missing=False):
        self.updates = []
        self.missing = missing

    def update(self, entity_type, entity_id, status, approved_by_id=None, approved_at=None):
        if self.missing:
            raise EntityNotFoundException()
        self.updates.append((entity_type, entity_id, status, approved_by_id, approved_at))


class FailingRepository(InMemoryWorkflowRepository):
    def create_workflow(self, *args, **kwargs):
        raise DatabaseError('connection lost')


class WorkflowEngineTests(SimpleTestCase):
    """Tests for WorkflowEngine transitions."""

    def setUp(self) -> None:
        self.repository = InMemoryWorkflowRepository()
        self.writer = RecordingStatusWriter()
        self.engine = WorkflowEngine(self.repository, self.writer, clock=lambda: NOW)

    def create_proposal_workflow(self, entity_id='101'):
        return self.engine.create(EntityType.BUDGET_PROPOSAL, entity_id, submitted_by_id=7)

    def test_create_builds_pending_stages(self) -> None:
        workflow = self.create_proposal_workflow()

        self.assertEqual(workflow.current_stage, 1)
        self.assertEqual(workflow.total_stages, 3)
        self.assertEqual(workflow.status, ProposalStatus.SUBMITTED)
        self.assertEqual(workflow.submitted_at, NOW)
        self.assertIsNone(workflow.completed_at)

        stages = self.repository.stages[workflow.pk]
        self.assertEqual([s.stage_number for s in stages], [1, 2, 3])
        self.assertTrue(all(s.status == ApprovalStatus.PENDING for s in stages))
        self.assertEqual(self.repository.actions[0][2], ActionType.SUBMITTED)

    def test_create_stores_entity_id_as_text(self) -> None:
        workflow = self.engine.create(EntityType.EXPENDITURE, 55)

        self.assertEqual(workflow.entity_id, '55')
        self.assertEqual(workflow.total_stages, 2)

    def test_create_rejects_types_without_template(self) -> None:
        for entity_type in (EntityType.REALLOCATION, EntityType.SCHEME):
            with self.subTest(entity_type=entity_type):
                with self.assertRaises(UnsupportedEntityTypeException):
                    self.engine.create(entity_type, '1')

        self.assertEqual(self.repository.workflows, {})

    def test_approving_every_stage_approves_workflow_and_record(self) -> None:
        workflow = self.create_proposal_workflow()

        self.engine.approve(workflow.pk, 1, approver_id=11)
        self.assertEqual(workflow.current_stage, 2)
        self.assertEqual(workflow.status, ProposalStatus.UNDER_REVIEW)

        self.engine.approve(workflow.pk, 2, approver_id=12)
        self.assertEqual(workflow.current_stage, 3)
        self.assertEqual(workflow.status, ProposalStatus.UNDER_REVIEW)

        self.engine.approve(workflow.pk, 3, approver_id=13, comments='Sanctioned')
        self.assertEqual(workflow.current_stage, 3)
        self.assertEqual(workflow.status, ProposalStatus.APPROVED)
        self.assertEqual(workflow.completed_at, NOW)

        self.assertEqual(self.writer.updates, [
            (EntityType.BUDGET_PROPOSAL, '101', ProposalStatus.UNDER_REVIEW, None, None),
            (EntityType.BUDGET_PROPOSAL, '101', ProposalStatus.UNDER_REVIEW, None, None),
            (EntityType.BUDGET_PROPOSAL, '101', ProposalStatus.APPROVED, 13, NOW),
        ])

        final_stage = self.repository.get_stage(workflow, 3)
        self.assertEqual(final_stage.status, ApprovalStatus.APPROVED)
        self.assertEqual(final_stage.approver_id, 13)
        self.assertEqual(final_stage.comments, 'Sanctioned')
        self.assertEqual(final_stage.action_date, NOW)

    def test_reject_ends_workflow(self) -> None:
        workflow = self.create_proposal_workflow()
        self.engine.approve(workflow.pk, 1, approver_id=11)

        self.engine.reject(workflow.pk, 2, approver_id=12, comments='Insufficient justification')

        self.assertEqual(workflow.status, ProposalStatus.REJECTED)
        self.assertEqual(workflow.current_stage, 2)
        self.assertEqual(workflow.completed_at, NOW)
        stage = self.repository.get_stage(workflow, 2)
        self.assertEqual(stage.status, ApprovalStatus.REJECTED)
        self.assertEqual(stage.comments, 'Insufficient justification')
        self.assertEqual(self.writer.updates[-1][2], ProposalStatus.REJECTED)

    def test_reject_and_revision_require_comments(self) -> None:
        workflow = self.create_proposal_workflow()

        for method in (self.engine.reject, self.engine.request_revision):
            for comments in ('', '   ', None):
                with self.subTest(method=method.__name__, comments=comments):
                    with self.assertRaises(CommentsRequiredException):
                        method(workflow.pk, 1, 11, comments)

        self.assertEqual(self.repository.get_stage(workflow, 1).status, ApprovalStatus.PENDING)

    def test_request_revision_keeps_workflow_open(self) -> None:
        workflow = self.create_proposal_workflow()

        self.engine.request_revision(workflow.pk, 1, approver_id=11, comments='Split capital heads')

        self.assertEqual(workflow.status, ProposalStatus.REVISION_REQUESTED)
        self.assertEqual(workflow.current_stage, 1)
        self.assertIsNone(workflow.completed_at)
        self.assertEqual(self.repository.get_stage(workflow, 1).status, ApprovalStatus.REJECTED)
        self.assertEqual(self.writer.updates[-1][2], ProposalStatus.REVISION_REQUESTED)

    def test_resubmit_resets_to_first_stage(self) -> None:
        workflow = self.create_proposal_workflow()
        self.engine.approve(workflow.pk, 1, approver_id=11)
        self.engine.request_revision(workflow.pk, 2, approver_id=12, comments='Revise')

        self.engine.resubmit(workflow.pk, submitted_by_id=8)

        self.assertEqual(workflow.status, ProposalStatus.SUBMITTED)
        self.assertEqual(workflow.current_stage, 1)
        self.assertEqual(workflow.submitted_by_id, 8)
        for stage in self.repository.stages[workflow.pk]:
            self.assertEqual(stage.status, ApprovalStatus.PENDING)
            self.assertIsNone(stage.approver_id)
            self.assertIsNone(stage.comments)
            self.assertIsNone(stage.action_date)
        self.assertEqual(self.writer.updates[-1][2], ProposalStatus.SUBMITTED)
        self.assertEqual(
            [a[2] for a in self.repository.actions],
            [ActionType.SUBMITTED, ActionType.APPROVED, ActionType.REVISION_REQUESTED, ActionType.RESUBMITTED]
        )

    def test_resubmit_requires_revision_requested(self) -> None:
        workflow = self.create_proposal_workflow()

        with self.assertRaises(WorkflowTransitionException):
            self.engine.resubmit(workflow.pk, submitted_by_id=7)

    def test_second_approval_of_same_stage_fails(self) -> None:
        workflow = self.create_proposal_workflow()
        self.engine.approve(workflow.pk, 1, approver_id=11)
        updates_before = list(self.writer.updates)

        with self.assertRaises(WorkflowTransitionException):
            self.engine.approve(workflow.pk, 1, approver_id=11)

        self.assertEqual(workflow.current_stage, 2)
        self.assertEqual(self.writer.updates, updates_before)

    def test_acting_ahead_of_current_stage_fails(self) -> None:
        workflow = self.create_proposal_workflow()

        with self.assertRaises(WorkflowTransitionException):
            self.engine.approve(workflow.pk, 3, approver_id=13)

        self.assertEqual(workflow.status, ProposalStatus.SUBMITTED)

    def test_no_decision_after_final_approval(self) -> None:
        workflow = self.engine.create(EntityType.EXPENDITURE, '9')
        self.engine.approve(workflow.pk, 1, 11)
        self.engine.approve(workflow.pk, 2, 12)

        with self.assertRaises(WorkflowTransitionException):
            self.engine.reject(workflow.pk, 2, 12, 'Too late')

    def test_unknown_workflow_raises_not_found(self) -> None:
        with self.assertRaises(WorkflowNotFoundException):
            self.engine.approve(999, 1, 11)
        with self.assertRaises(WorkflowNotFoundException):
            self.engine.resubmit(999)

    def test_missing_record_propagates(self) -> None:
        engine = WorkflowEngine(self.repository, RecordingStatusWriter(missing=True), clock=lambda: NOW)
        workflow = engine.create(EntityType.EXPENDITURE, '404')

        with self.assertRaises(EntityNotFoundException):
            engine.approve(workflow.pk, 1, 11)


class WorkflowResultTests(SimpleTestCase):
    """Tests for the public service functions wrapping the engine."""

    def setUp(self) -> None:
        self.repository = InMemoryWorkflowRepository()
        self.engine = WorkflowEngine(self.repository, RecordingStatusWriter(), clock=lambda: NOW)

    def test_success_result_carries_workflow_id(self) -> None:
        result = create_workflow(EntityType.EXPENDITURE, '1', 7, engine=self.engine)

        self.assertTrue(result.success)
        self.assertEqual(result.workflow_id, 1)
        self.assertEqual(result.to_dict(), {
            'success': True, 'error': None, 'error_code': None, 'workflow_id': 1,
        })

    def test_domain_errors_become_failed_results(self) -> None:
        created = create_workflow(EntityType.EXPENDITURE, '1', 7, engine=self.engine)

        result = reject_stage(created.workflow_id, 1, 11, '', engine=self.engine)
        self.assertFalse(result.success)
        self.assertEqual(result.error_code, 'ERR_COMMENTS_REQUIRED')

        result = approve_stage(created.workflow_id, 2, 11, engine=self.engine)
        self.assertEqual(result.error_code, 'ERR_INVALID_TRANSITION')

        result = resubmit_workflow(created.workflow_id, 7, engine=self.engine)
        self.assertEqual(result.error_code, 'ERR_INVALID_TRANSITION')

        result = request_revision(42, 1, 11, 'Revise', engine=self.engine)
        self.assertEqual(result.error_code, 'ERR_WORKFLOW_NOT_FOUND')
        self.assertEqual(result.workflow_id, 42)

    def test_unsupported_type_result(self) -> None:
        result = create_workflow(EntityType.SCHEME, '1', engine=self.engine)

        self.assertFalse(result.success)
        self.assertEqual(result.error_code, 'ERR_UNSUPPORTED_ENTITY_TYPE')

    def test_database_errors_become_persistence_failures(self) -> None:
        engine = WorkflowEngine(FailingRepository(), RecordingStatusWriter(), clock=lambda: NOW)

        with self.assertLogs('workflow', level='ERROR'):
            result = create_workflow(EntityType.EXPENDITURE, '1', engine=engine)

        self.assertFalse(result.success)
        self.assertEqual(result.error_code, 'ERR_PERSISTENCE')

    def test_failures_are_logged(self) -> None:
        with self.assertLogs('workflow', level='ERROR') as logs:
            approve_stage(5, 1, 11, engine=self.engine)

        self.assertIn('ERR_WORKFLOW_NOT_FOUND', logs.output[0])


class StageTemplateRoleTests(SimpleTestCase):
    def test_final_stage_role_is_finance_admin(self) -> None:
        from apps.workflow.workflows import get_workflow_stages

        self.assertEqual(
            get_workflow_stages(EntityType.BUDGET_PROPOSAL)[-1].approver_role,
            UserRole.FINANCE_MINISTRY_ADMIN
        )
