"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for stage templates, stage action validation
             and the approval authorization predicate.
-------------------------------------------------------------------------
"""
from types import SimpleNamespace
from django.test import SimpleTestCase

from apps.core.models import ProposalStatus
from apps.users.models import UserRole
from apps.workflow.models import ApprovalStatus, EntityType
from apps.workflow.repositories import ENTITY_MODELS
from apps.workflow.workflows import (
    WORKFLOW_STAGES,
    can_approve_stage,
    get_workflow_stages,
    has_workflow,
    validate_resubmission,
    validate_stage_action,
)


def profile(role, ministry_id=None, department_id=None, is_superuser=False):
    return SimpleNamespace(
        role=role,
        ministry_id=ministry_id,
        department_id=department_id,
        is_superuser=is_superuser,
    )


class WorkflowTemplateTests(SimpleTestCase):
    """Tests for the stage templates per entity type."""

    def test_budget_proposal_has_three_stages(self) -> None:
        stages = get_workflow_stages(EntityType.BUDGET_PROPOSAL)

        self.assertEqual(
            [(s.stage_number, s.stage_name, s.approver_role) for s in stages],
            [
                (1, 'Department Review', UserRole.DEPARTMENT_HEAD),
                (2, 'Ministry Review', UserRole.MINISTRY_SECRETARY),
                (3, 'Finance Ministry Approval', UserRole.FINANCE_MINISTRY_ADMIN),
            ]
        )

    def test_expenditure_has_two_stages(self) -> None:
        stages = get_workflow_stages(EntityType.EXPENDITURE)

        self.assertEqual(
            [(s.stage_number, s.stage_name, s.approver_role) for s in stages],
            [
                (1, 'Department Approval', UserRole.DEPARTMENT_HEAD),
                (2, 'Ministry Approval', UserRole.MINISTRY_SECRETARY),
            ]
        )

    def test_types_without_template_return_empty_list(self) -> None:
        self.assertEqual(get_workflow_stages(EntityType.REALLOCATION), [])
        self.assertEqual(get_workflow_stages(EntityType.SCHEME), [])
        self.assertEqual(get_workflow_stages('Unknown'), [])

    def test_has_workflow(self) -> None:
        self.assertTrue(has_workflow(EntityType.BUDGET_PROPOSAL))
        self.assertTrue(has_workflow(EntityType.EXPENDITURE))
        self.assertFalse(has_workflow(EntityType.SCHEME))
        self.assertFalse(has_workflow('Unknown'))

    def test_stage_numbers_are_contiguous_from_one(self) -> None:
        for entity_type, stages in WORKFLOW_STAGES.items():
            with self.subTest(entity_type=entity_type):
                self.assertEqual(
                    [s.stage_number for s in stages],
                    list(range(1, len(stages) + 1))
                )

    def test_returned_list_is_a_copy(self) -> None:
        stages = get_workflow_stages(EntityType.EXPENDITURE)
        stages.clear()

        self.assertEqual(len(get_workflow_stages(EntityType.EXPENDITURE)), 2)

    def test_every_templated_type_has_a_status_target(self) -> None:
        """A workflow outcome must always reach the record it gates."""
        for entity_type in WORKFLOW_STAGES:
            with self.subTest(entity_type=entity_type):
                self.assertIn(entity_type, ENTITY_MODELS)


class StageActionValidationTests(SimpleTestCase):
    """Tests for validate_stage_action and validate_resubmission."""

    def test_pending_current_stage_of_open_workflow_is_valid(self) -> None:
        for status in (ProposalStatus.SUBMITTED, ProposalStatus.UNDER_REVIEW):
            with self.subTest(status=status):
                is_valid, error = validate_stage_action(status, 2, 2, ApprovalStatus.PENDING)

                self.assertTrue(is_valid)
                self.assertIsNone(error)

    def test_closed_workflow_is_invalid(self) -> None:
        for status in (ProposalStatus.APPROVED, ProposalStatus.REJECTED, ProposalStatus.REVISION_REQUESTED):
            with self.subTest(status=status):
                is_valid, error = validate_stage_action(status, 1, 1, ApprovalStatus.PENDING)

                self.assertFalse(is_valid)
                self.assertIn(status, str(error))

    def test_stage_other_than_current_is_invalid(self) -> None:
        is_valid, error = validate_stage_action(ProposalStatus.UNDER_REVIEW, 2, 1, ApprovalStatus.APPROVED)

        self.assertFalse(is_valid)
        self.assertIn('not the current stage', str(error))

    def test_missing_stage_is_invalid(self) -> None:
        is_valid, error = validate_stage_action(ProposalStatus.SUBMITTED, 1, 1, None)

        self.assertFalse(is_valid)
        self.assertIn('does not exist', str(error))

    def test_already_decided_stage_is_invalid(self) -> None:
        is_valid, error = validate_stage_action(ProposalStatus.SUBMITTED, 1, 1, ApprovalStatus.APPROVED)

        self.assertFalse(is_valid)
        self.assertIn('already been approved', str(error))

    def test_resubmission_only_after_revision_request(self) -> None:
        self.assertEqual(validate_resubmission(ProposalStatus.REVISION_REQUESTED), (True, None))

        for status in (ProposalStatus.SUBMITTED, ProposalStatus.APPROVED, ProposalStatus.REJECTED):
            with self.subTest(status=status):
                is_valid, error = validate_resubmission(status)
                self.assertFalse(is_valid)
                self.assertIsNotNone(error)


class CanApproveStageTests(SimpleTestCase):
    """Tests for the approval authorization predicate."""

    def test_no_profile_cannot_approve(self) -> None:
        self.assertFalse(can_approve_stage(None, UserRole.DEPARTMENT_HEAD, 1, 1))

    def test_finance_admin_can_approve_any_stage(self) -> None:
        admin = profile(UserRole.FINANCE_MINISTRY_ADMIN)

        for role in (UserRole.DEPARTMENT_HEAD, UserRole.MINISTRY_SECRETARY, UserRole.FINANCE_MINISTRY_ADMIN):
            with self.subTest(role=role):
                self.assertTrue(can_approve_stage(admin, role, 99, 99))

    def test_superuser_can_approve_any_stage(self) -> None:
        superuser = profile(UserRole.SECTION_OFFICER, is_superuser=True)

        self.assertTrue(can_approve_stage(superuser, UserRole.MINISTRY_SECRETARY, 1, 1))

    def test_role_must_match_stage_role(self) -> None:
        officer = profile(UserRole.SECTION_OFFICER, ministry_id=1, department_id=1)

        self.assertFalse(can_approve_stage(officer, UserRole.DEPARTMENT_HEAD, 1, 1))

    def test_department_head_limited_to_own_department(self) -> None:
        head = profile(UserRole.DEPARTMENT_HEAD, ministry_id=1, department_id=5)

        self.assertTrue(can_approve_stage(head, UserRole.DEPARTMENT_HEAD, 1, 5))
        self.assertFalse(can_approve_stage(head, UserRole.DEPARTMENT_HEAD, 1, 6))
        self.assertFalse(can_approve_stage(head, UserRole.DEPARTMENT_HEAD, 1, None))

    def test_ministry_secretary_limited_to_own_ministry(self) -> None:
        secretary = profile(UserRole.MINISTRY_SECRETARY, ministry_id=3)

        self.assertTrue(can_approve_stage(secretary, UserRole.MINISTRY_SECRETARY, 3, None))
        self.assertFalse(can_approve_stage(secretary, UserRole.MINISTRY_SECRETARY, 4, None))

    def test_other_matching_role_is_not_scope_limited(self) -> None:
        officer = profile(UserRole.BUDGET_DIVISION_OFFICER)

        self.assertTrue(can_approve_stage(officer, UserRole.BUDGET_DIVISION_OFFICER, 1, 2))

    def test_scoped_roles_need_a_record_scope(self) -> None:
        head = profile(UserRole.DEPARTMENT_HEAD, ministry_id=1)
        secretary = profile(UserRole.MINISTRY_SECRETARY)

        self.assertFalse(can_approve_stage(head, UserRole.DEPARTMENT_HEAD, 1, None))
        self.assertFalse(can_approve_stage(secretary, UserRole.MINISTRY_SECRETARY, None, None))
