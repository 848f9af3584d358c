"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the user model and permission helpers.
-------------------------------------------------------------------------
"""
from types import SimpleNamespace
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase, TestCase

from apps.core.models import ProposalStatus
from apps.users.models import UserRole
from apps.users.permissions import (
    can_approve_budget,
    can_edit_budget_proposal,
    can_manage_department,
    can_manage_ministry,
    can_record_expenditure,
    can_sanction_allocation,
    get_user_scope,
    has_role,
)


User = get_user_model()


def make_user(role, ministry_id=None, department_id=None, pk=1, is_superuser=False):
    return SimpleNamespace(
        pk=pk,
        role=role,
        ministry_id=ministry_id,
        department_id=department_id,
        is_superuser=is_superuser,
        is_authenticated=True,
    )


class UserManagerTests(TestCase):
    """Tests for CustomUserManager."""

    def test_create_user_uses_email(self):
        """Test that users log in with a normalized email."""
        user = User.objects.create_user(email='Officer@MOH.gov.in', password='Gbms@12345')

        self.assertEqual(user.email, 'Officer@moh.gov.in')
        self.assertTrue(user.check_password('Gbms@12345'))
        self.assertFalse(user.is_superuser)

    def test_create_user_requires_email(self):
        """Test that an email is mandatory."""
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='x')

    def test_superuser_is_finance_admin(self):
        """Test superuser defaults."""
        user = User.objects.create_superuser(email='root@finmin.gov.in', password='Gbms@12345')

        self.assertTrue(user.is_staff)
        self.assertEqual(user.role, UserRole.FINANCE_MINISTRY_ADMIN)
        self.assertTrue(user.is_admin())


class PermissionHelperTests(SimpleTestCase):
    """Tests for role and scope helpers."""

    def test_has_role(self):
        """Test role membership and the superuser override."""
        officer = make_user(UserRole.SECTION_OFFICER)

        self.assertTrue(has_role(officer, [UserRole.SECTION_OFFICER]))
        self.assertFalse(has_role(officer, [UserRole.AUDITOR]))
        self.assertTrue(has_role(make_user(UserRole.AUDITOR, is_superuser=True), [UserRole.SECTION_OFFICER]))
        self.assertFalse(has_role(None, [UserRole.SECTION_OFFICER]))
        self.assertFalse(has_role(AnonymousUser(), [UserRole.SECTION_OFFICER]))

    def test_approval_levels(self):
        """Test which roles approve at each level."""
        secretary = make_user(UserRole.MINISTRY_SECRETARY)

        self.assertTrue(can_approve_budget(secretary, 'department'))
        self.assertTrue(can_approve_budget(secretary, 'ministry'))
        self.assertFalse(can_approve_budget(secretary, 'central'))
        self.assertFalse(can_approve_budget(secretary, 'unknown'))

    def test_recording_and_sanctioning(self):
        """Test expenditure and allocation rights."""
        self.assertTrue(can_record_expenditure(make_user(UserRole.SECTION_OFFICER)))
        self.assertFalse(can_record_expenditure(make_user(UserRole.AUDITOR)))
        self.assertTrue(can_sanction_allocation(make_user(UserRole.BUDGET_DIVISION_OFFICER)))
        self.assertFalse(can_sanction_allocation(make_user(UserRole.MINISTRY_SECRETARY)))

    def test_manage_scope(self):
        """Test ministry and department management scope."""
        secretary = make_user(UserRole.MINISTRY_SECRETARY, ministry_id=1)
        head = make_user(UserRole.DEPARTMENT_HEAD, ministry_id=1, department_id=10)
        admin = make_user(UserRole.FINANCE_MINISTRY_ADMIN)

        self.assertTrue(can_manage_ministry(secretary, 1))
        self.assertFalse(can_manage_ministry(secretary, 2))
        self.assertTrue(can_manage_ministry(admin, 2))
        self.assertTrue(can_manage_department(secretary, 99, 1))
        self.assertTrue(can_manage_department(head, 10, 1))
        self.assertFalse(can_manage_department(head, 11, 1))

    def test_user_scope(self):
        """Test the scope dictionary."""
        auditor = make_user(UserRole.AUDITOR)
        officer = make_user(UserRole.SECTION_OFFICER, ministry_id=3, department_id=7)

        self.assertTrue(get_user_scope(auditor)['can_access_all_ministries'])
        self.assertEqual(get_user_scope(officer), {
            'can_access_all_ministries': False,
            'ministry_id': 3,
            'department_id': 7,
        })
        self.assertIsNone(get_user_scope(None)['ministry_id'])

    def test_edit_budget_proposal(self):
        """Test who can edit a proposal."""
        proposal = SimpleNamespace(
            created_by_id=5, status=ProposalStatus.DRAFT, ministry_id=1, department_id=10
        )

        self.assertTrue(can_edit_budget_proposal(make_user(UserRole.SECTION_OFFICER, pk=5), proposal))
        self.assertFalse(can_edit_budget_proposal(make_user(UserRole.SECTION_OFFICER, pk=6), proposal))
        self.assertTrue(can_edit_budget_proposal(make_user(UserRole.DEPARTMENT_HEAD, 1, 10), proposal))
        self.assertFalse(can_edit_budget_proposal(make_user(UserRole.MINISTRY_SECRETARY, 2), proposal))

        proposal.status = ProposalStatus.SUBMITTED
        self.assertFalse(can_edit_budget_proposal(make_user(UserRole.SECTION_OFFICER, pk=5), proposal))


class FailedLoginSignalTests(TestCase):
    """Tests for the failed login handler."""

    def test_failed_login_is_logged(self):
        """Test that a wrong password logs the attempted email."""
        User.objects.create_user(email='head@moh.gov.in', password='Gbms@12345')

        with self.assertLogs('apps.users.signals', level='WARNING') as logs:
            self.assertFalse(self.client.login(email='head@moh.gov.in', password='wrong'))

        self.assertIn('head@moh.gov.in', logs.output[0])
