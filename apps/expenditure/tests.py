"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the expenditure module: recording against
             allocations, the approval path and allocation exhaustion.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from datetime import date
from django.test import TestCase
from django.urls import reverse

from apps.budgeting.models import AllocationStatus, BudgetAllocation, BudgetType, Scheme
from apps.budgeting.services import sanction_allocation
from apps.core.exceptions import AllocationException, BudgetExceededException
from apps.core.models import ProposalStatus
from apps.expenditure.models import Expenditure
from apps.expenditure.services import (
    check_allocation_balance,
    record_expenditure,
    submit_expenditure,
)
from apps.workflow.models import EntityType
from apps.workflow.services import approve_stage, get_workflow, reject_stage
from apps.workflow.tests.fixtures import PASSWORD, OrganizationTestData


class ExpenditureTestBase(OrganizationTestData, TestCase):

    def setUp(self) -> None:
        proposal = self.approve_proposal(self.make_submitted_proposal())
        self.allocation = sanction_allocation(proposal, Decimal('100000.00'), user=self.budget_officer)

    def record(self, amount, allocation=None, **kwargs):
        return record_expenditure(
            scheme=kwargs.pop('scheme', self.scheme),
            amount=Decimal(amount),
            expenditure_type=BudgetType.REVENUE,
            transaction_date=kwargs.pop('transaction_date', date(2025, 7, 14)),
            voucher_number='VCH-001',
            user=self.section_officer,
            allocation=allocation,
            **kwargs
        )

    def approve_expenditure(self, expenditure):
        workflow = get_workflow(EntityType.EXPENDITURE, expenditure.pk)
        self.assertTrue(approve_stage(workflow.pk, 1, self.department_head.pk).success)
        self.assertTrue(approve_stage(workflow.pk, 2, self.secretary.pk).success)
        expenditure.refresh_from_db()
        return expenditure


class RecordExpenditureTests(ExpenditureTestBase):
    """Tests for record_expenditure."""

    def test_derived_fields(self) -> None:
        """Test that scope, month and financial year are derived."""
        expenditure = self.record('2500.00', transaction_date=date(2026, 2, 3))

        self.assertEqual(expenditure.status, ProposalStatus.DRAFT)
        self.assertEqual(expenditure.ministry, self.ministry)
        self.assertEqual(expenditure.department, self.department)
        self.assertEqual(expenditure.month, 2)
        self.assertEqual(expenditure.financial_year, '2025-26')
        self.assertEqual(expenditure.created_by, self.section_officer)
        self.assertIsNone(expenditure.allocation)

    def test_amount_within_balance(self) -> None:
        """Test that an expenditure up to the balance is accepted."""
        expenditure = self.record('100000.00', allocation=self.allocation)

        self.assertEqual(expenditure.allocation, self.allocation)

    def test_amount_over_balance(self) -> None:
        """Test that exceeding the balance raises with details."""
        with self.assertRaises(BudgetExceededException) as ctx:
            self.record('100000.01', allocation=self.allocation)

        self.assertEqual(ctx.exception.details['available'], '100000.00')
        self.assertEqual(ctx.exception.details['requested'], '100000.01')
        self.assertFalse(Expenditure.objects.exists())

    def test_allocation_of_other_scheme(self) -> None:
        """Test that an allocation must belong to the scheme."""
        other_scheme = Scheme.objects.create(
            name='Mid Day Meal', code='MDM', ministry=self.other_ministry
        )

        with self.assertRaises(AllocationException):
            self.record('10.00', allocation=self.allocation, scheme=other_scheme)

    def test_frozen_allocation(self) -> None:
        """Test that nothing can be charged to a frozen allocation."""
        BudgetAllocation.objects.filter(pk=self.allocation.pk).update(status=AllocationStatus.FROZEN)

        with self.assertRaises(AllocationException):
            self.record('10.00', allocation=self.allocation)

    def test_check_allocation_balance(self) -> None:
        """Test the balance check used before recording."""
        self.assertEqual(check_allocation_balance(self.allocation, Decimal('50.00')), (True, None))

        is_valid, error = check_allocation_balance(self.allocation, Decimal('200000.00'))
        self.assertFalse(is_valid)
        self.assertIn('exceeds the available balance', error)


class ExpenditureApprovalTests(ExpenditureTestBase):
    """Tests for the two-stage expenditure approval."""

    def test_submit_creates_two_stage_workflow(self) -> None:
        """Test that submission opens a workflow for the expenditure."""
        expenditure = self.record('500.00', allocation=self.allocation)

        submit_expenditure(expenditure, self.section_officer)

        self.assertEqual(expenditure.status, ProposalStatus.SUBMITTED)
        workflow = get_workflow(EntityType.EXPENDITURE, expenditure.pk)
        self.assertEqual(workflow.total_stages, 2)

    def test_approval_counts_towards_utilization(self) -> None:
        """Test that only approved expenditure reduces the balance."""
        expenditure = self.record('40000.00', allocation=self.allocation)
        submit_expenditure(expenditure, self.section_officer)
        self.assertEqual(self.allocation.get_available_balance(), Decimal('100000.00'))

        self.approve_expenditure(expenditure)

        self.assertEqual(expenditure.status, ProposalStatus.APPROVED)
        self.assertEqual(expenditure.approved_by, self.secretary)
        self.assertEqual(self.allocation.get_available_balance(), Decimal('60000.00'))
        self.allocation.refresh_from_db()
        self.assertEqual(self.allocation.status, AllocationStatus.ACTIVE)

    def test_full_utilization_exhausts_allocation(self) -> None:
        """Test that the allocation is marked Exhausted at zero balance."""
        expenditure = self.record('100000.00', allocation=self.allocation)
        submit_expenditure(expenditure, self.section_officer)

        self.approve_expenditure(expenditure)

        self.allocation.refresh_from_db()
        self.assertEqual(self.allocation.status, AllocationStatus.EXHAUSTED)

        with self.assertRaises(AllocationException):
            self.record('1.00', allocation=self.allocation)

    def test_rejection_leaves_allocation_active(self) -> None:
        """Test that a rejected expenditure never counts."""
        expenditure = self.record('100000.00', allocation=self.allocation)
        submit_expenditure(expenditure, self.section_officer)
        workflow = get_workflow(EntityType.EXPENDITURE, expenditure.pk)

        reject_stage(workflow.pk, 1, self.department_head.pk, 'Voucher missing')

        self.allocation.refresh_from_db()
        self.assertEqual(self.allocation.status, AllocationStatus.ACTIVE)
        self.assertEqual(self.allocation.get_spent_amount(), Decimal('0.00'))


class ExpenditureViewTests(ExpenditureTestBase):
    """Tests for the expenditure JSON views."""

    def login(self, user):
        self.assertTrue(self.client.login(email=user.email, password=PASSWORD))

    def form_data(self, **kwargs):
        data = {
            'scheme': self.scheme.pk,
            'allocation': self.allocation.pk,
            'amount': '1500.00',
            'expenditure_type': BudgetType.REVENUE,
            'transaction_date': '2025-08-20',
            'voucher_number': 'VCH-778',
        }
        data.update(kwargs)
        return data

    def test_create_expenditure(self) -> None:
        """Test that a section officer records a Draft expenditure."""
        self.login(self.section_officer)

        response = self.client.post(reverse('expenditure:expenditure_create'), self.form_data())

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['financial_year'], '2025-26')
        self.assertEqual(data['status'], ProposalStatus.DRAFT)

    def test_create_over_balance(self) -> None:
        """Test that exceeding the balance is a bad request."""
        self.login(self.section_officer)

        response = self.client.post(
            reverse('expenditure:expenditure_create'), self.form_data(amount='999999.00')
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_BUDGET_EXCEEDED')

    def test_create_outside_ministry(self) -> None:
        """Test that users of another ministry get 403."""
        self.login(self.other_head)

        response = self.client.post(reverse('expenditure:expenditure_create'), self.form_data())

        self.assertEqual(response.status_code, 403)

    def test_role_without_recording_rights(self) -> None:
        """Test that auditors cannot record expenditure."""
        self.login(self.auditor)

        response = self.client.post(reverse('expenditure:expenditure_create'), self.form_data())

        self.assertEqual(response.status_code, 403)

    def test_submit_expenditure(self) -> None:
        """Test submitting through the view."""
        expenditure = self.record('200.00', allocation=self.allocation)
        self.login(self.section_officer)

        response = self.client.post(reverse('expenditure:expenditure_submit', kwargs={'pk': expenditure.pk}))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], ProposalStatus.SUBMITTED)

        response = self.client.post(reverse('expenditure:expenditure_submit', kwargs={'pk': expenditure.pk}))
        self.assertEqual(response.status_code, 400)
