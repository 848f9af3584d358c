"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Shared test data: two ministries with one department each,
             a user per role, and a scheme to raise proposals against.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from django.contrib.auth import get_user_model

from apps.budgeting.models import BudgetType, ProposalType, Scheme
from apps.core.models import Department, Ministry
from apps.users.models import UserRole


User = get_user_model()

PASSWORD = 'Gbms@12345'


class OrganizationTestData:
    """
    Mixin for TestCase classes needing the organizational hierarchy.

    Health (MOH) / Public Health is the home scope; Education (EDU) /
    Schools is used to check that approvers cannot act outside it.
    """

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        cls.ministry = Ministry.objects.create(name='Ministry of Health', code='MOH')
        cls.department = Department.objects.create(
            ministry=cls.ministry, name='Public Health', code='PH'
        )
        cls.other_ministry = Ministry.objects.create(name='Ministry of Education', code='EDU')
        cls.other_department = Department.objects.create(
            ministry=cls.other_ministry, name='Schools', code='SCH'
        )

        cls.section_officer = cls.make_user('officer@moh.gov.in', UserRole.SECTION_OFFICER)
        cls.department_head = cls.make_user('head@moh.gov.in', UserRole.DEPARTMENT_HEAD)
        cls.secretary = cls.make_user('secretary@moh.gov.in', UserRole.MINISTRY_SECRETARY)
        cls.admin = cls.make_user('admin@finmin.gov.in', UserRole.FINANCE_MINISTRY_ADMIN, scoped=False)
        cls.budget_officer = cls.make_user('budget@finmin.gov.in', UserRole.BUDGET_DIVISION_OFFICER, scoped=False)
        cls.auditor = cls.make_user('auditor@finmin.gov.in', UserRole.AUDITOR, scoped=False)
        cls.other_head = User.objects.create_user(
            email='head@edu.gov.in',
            password=PASSWORD,
            first_name='Other',
            role=UserRole.DEPARTMENT_HEAD,
            ministry=cls.other_ministry,
            department=cls.other_department,
        )
        cls.other_secretary = User.objects.create_user(
            email='secretary@edu.gov.in',
            password=PASSWORD,
            first_name='Other',
            role=UserRole.MINISTRY_SECRETARY,
            ministry=cls.other_ministry,
        )

        cls.scheme = Scheme.objects.create(
            name='National Health Mission',
            code='NHM',
            ministry=cls.ministry,
            department=cls.department,
        )

    @classmethod
    def make_user(cls, email, role, scoped=True):
        return User.objects.create_user(
            email=email,
            password=PASSWORD,
            first_name='Test',
            last_name=str(role),
            role=role,
            ministry=cls.ministry if scoped else None,
            department=cls.department if scoped else None,
        )

    def make_proposal(self, financial_year='2025-26', line_items=None):
        from apps.budgeting.services import create_proposal

        if line_items is None:
            line_items = [
                {'head_of_account': '2210-01', 'description': 'Salaries', 'amount': Decimal('600000.00'), 'budget_type': BudgetType.REVENUE},
                {'head_of_account': '4210-02', 'description': 'Hospital buildings', 'amount': Decimal('400000.00'), 'budget_type': BudgetType.CAPITAL},
            ]
        return create_proposal(
            scheme=self.scheme,
            financial_year=financial_year,
            proposal_type=ProposalType.BUDGET_ESTIMATE,
            justification='Annual requirement',
            line_items=line_items,
            user=self.section_officer,
        )

    def make_submitted_proposal(self, **kwargs):
        from apps.budgeting.services import submit_proposal

        proposal = self.make_proposal(**kwargs)
        submit_proposal(proposal, self.section_officer)
        return proposal

    def approve_proposal(self, proposal):
        """Drive a submitted proposal through all three approval stages."""
        from apps.workflow.models import EntityType
        from apps.workflow.services import approve_stage, get_workflow

        workflow = get_workflow(EntityType.BUDGET_PROPOSAL, proposal.pk)
        for stage_number, approver in enumerate([self.department_head, self.secretary, self.admin], start=1):
            result = approve_stage(workflow.pk, stage_number, approver.pk)
            assert result.success, result.error
        proposal.refresh_from_db()
        return proposal
