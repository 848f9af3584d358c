"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tests for the workflow JSON views.
-------------------------------------------------------------------------
"""
from django.test import TestCase
from django.urls import reverse

from apps.core.models import ProposalStatus
from apps.workflow.models import ApprovalStatus, EntityType
from apps.workflow.services import approve_stage, get_workflow, request_revision
from apps.workflow.tests.fixtures import PASSWORD, OrganizationTestData


class WorkflowViewTestBase(OrganizationTestData, TestCase):

    def setUp(self) -> None:
        self.proposal = self.make_submitted_proposal()
        self.workflow = get_workflow(EntityType.BUDGET_PROPOSAL, self.proposal.pk)

    def login(self, user):
        self.assertTrue(self.client.login(email=user.email, password=PASSWORD))

    def stage_url(self, stage_number, action):
        return reverse('workflow:stage_action', kwargs={
            'pk': self.workflow.pk, 'stage_number': stage_number, 'action': action,
        })


class WorkflowDetailViewTests(WorkflowViewTestBase):
    """Tests for WorkflowDetailAPIView."""

    def detail_url(self, slug='budget-proposal', entity_id=None):
        return reverse('workflow:detail', kwargs={
            'entity_slug': slug, 'entity_id': entity_id or self.proposal.pk,
        })

    def test_anonymous_user_is_redirected(self) -> None:
        response = self.client.get(self.detail_url())
        self.assertEqual(response.status_code, 302)

    def test_detail_shows_stages_and_history(self) -> None:
        self.login(self.department_head)

        response = self.client.get(self.detail_url())

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['success'])
        self.assertTrue(data['can_act'])
        self.assertEqual(data['workflow']['status'], ProposalStatus.SUBMITTED)
        self.assertEqual(
            [stage['stage_name'] for stage in data['workflow']['stages']],
            ['Department Review', 'Ministry Review', 'Finance Ministry Approval']
        )
        self.assertEqual(len(data['workflow']['history']), 1)

    def test_user_outside_scope_cannot_act(self) -> None:
        self.login(self.other_head)

        data = self.client.get(self.detail_url()).json()

        self.assertFalse(data['can_act'])

    def test_unknown_slug_or_record(self) -> None:
        self.login(self.admin)

        self.assertEqual(self.client.get(self.detail_url(slug='scheme')).status_code, 404)
        self.assertEqual(self.client.get(self.detail_url(entity_id='999999')).status_code, 404)


class PendingApprovalsViewTests(WorkflowViewTestBase):
    """Tests for PendingApprovalsAPIView."""

    def test_department_head_queue(self) -> None:
        self.login(self.department_head)

        data = self.client.get(reverse('workflow:pending')).json()

        self.assertEqual(data['count'], 1)
        self.assertEqual(data['results'][0]['id'], self.workflow.pk)
        self.assertEqual(data['results'][0]['entity_id'], str(self.proposal.pk))

    def test_other_department_queue_is_empty(self) -> None:
        self.login(self.other_head)

        data = self.client.get(reverse('workflow:pending')).json()

        self.assertEqual(data['count'], 0)


class StageActionViewTests(WorkflowViewTestBase):
    """Tests for StageActionView."""

    def test_approve_current_stage(self) -> None:
        self.login(self.department_head)

        response = self.client.post(self.stage_url(1, 'approve'), {'comments': 'Recommended'})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['success'])
        self.proposal.refresh_from_db()
        self.assertEqual(self.proposal.status, ProposalStatus.UNDER_REVIEW)

    def test_head_of_other_department_is_forbidden(self) -> None:
        self.login(self.other_head)

        response = self.client.post(self.stage_url(1, 'approve'))

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['error_code'], 'ERR_UNAUTHORIZED_ROLE')
        self.assertEqual(self.workflow.stages.get(stage_number=1).status, ApprovalStatus.PENDING)

    def test_wrong_role_is_forbidden(self) -> None:
        self.login(self.secretary)

        response = self.client.post(self.stage_url(1, 'approve'))

        self.assertEqual(response.status_code, 403)

    def test_reject_without_comments_is_bad_request(self) -> None:
        self.login(self.department_head)

        response = self.client.post(self.stage_url(1, 'reject'), {'comments': ''})

        self.assertEqual(response.status_code, 400)
        self.assertIn('comments', response.json()['errors'])
        self.proposal.refresh_from_db()
        self.assertEqual(self.proposal.status, ProposalStatus.SUBMITTED)

    def test_reject_with_comments(self) -> None:
        self.login(self.department_head)

        response = self.client.post(self.stage_url(1, 'reject'), {'comments': 'Duplicate of BP-MOH-2025-0001'})

        self.assertEqual(response.status_code, 200)
        self.proposal.refresh_from_db()
        self.assertEqual(self.proposal.status, ProposalStatus.REJECTED)

    def test_stage_ahead_of_current_is_bad_request(self) -> None:
        self.login(self.admin)

        response = self.client.post(self.stage_url(2, 'approve'))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_INVALID_TRANSITION')

    def test_unknown_workflow_stage_or_action(self) -> None:
        self.login(self.admin)

        missing = reverse('workflow:stage_action', kwargs={'pk': 999999, 'stage_number': 1, 'action': 'approve'})
        self.assertEqual(self.client.post(missing).status_code, 404)
        self.assertEqual(self.client.post(self.stage_url(9, 'approve')).status_code, 404)
        self.assertEqual(self.client.post(self.stage_url(1, 'escalate')).status_code, 404)

    def test_anonymous_user_is_redirected(self) -> None:
        response = self.client.post(self.stage_url(1, 'approve'))
        self.assertEqual(response.status_code, 302)


class WorkflowResubmitViewTests(WorkflowViewTestBase):
    """Tests for WorkflowResubmitView."""

    def setUp(self) -> None:
        super().setUp()
        approve_stage(self.workflow.pk, 1, self.department_head.pk)
        request_revision(self.workflow.pk, 2, self.secretary.pk, 'Add a cost breakdown')

    def test_submitter_can_resubmit(self) -> None:
        self.login(self.section_officer)

        response = self.client.post(reverse('workflow:resubmit', kwargs={'pk': self.workflow.pk}))

        self.assertEqual(response.status_code, 200)
        self.proposal.refresh_from_db()
        self.assertEqual(self.proposal.status, ProposalStatus.SUBMITTED)

    def test_unrelated_user_cannot_resubmit(self) -> None:
        self.login(self.other_head)

        response = self.client.post(reverse('workflow:resubmit', kwargs={'pk': self.workflow.pk}))

        self.assertEqual(response.status_code, 403)
        self.proposal.refresh_from_db()
        self.assertEqual(self.proposal.status, ProposalStatus.REVISION_REQUESTED)

    def test_resubmitting_twice_fails(self) -> None:
        self.login(self.section_officer)
        url = reverse('workflow:resubmit', kwargs={'pk': self.workflow.pk})
        self.client.post(url)

        response = self.client.post(url)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_INVALID_TRANSITION')
