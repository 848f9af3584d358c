"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the budgeting module.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from datetime import date
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from apps.budgeting.forms import AllocationSanctionForm
from apps.budgeting.models import AllocationStatus, BudgetProposal, BudgetType, ProposalType
from apps.budgeting.services import (
    create_proposal,
    generate_proposal_number,
    get_financial_year,
    sanction_allocation,
    validate_financial_year,
    validate_quarterly_split,
)
from apps.core.exceptions import AllocationException, FinancialYearException
from apps.core.models import ProposalStatus
from apps.expenditure.models import Expenditure
from apps.expenditure.services import record_expenditure
from apps.workflow.tests.fixtures import PASSWORD, OrganizationTestData


class FinancialYearTests(SimpleTestCase):
    """Tests for financial year helpers."""

    def test_valid_financial_year(self) -> None:
        """Test that consecutive YYYY-YY years pass validation."""
        for value in ('2025-26', '1999-00', '2099-00'):
            with self.subTest(value=value):
                self.assertEqual(validate_financial_year(value), (True, None))

    def test_malformed_financial_year(self) -> None:
        """Test that other formats are rejected."""
        for value in ('2025', '2025-2026', '25-26', '', None, '2025/26'):
            with self.subTest(value=value):
                is_valid, error = validate_financial_year(value)
                self.assertFalse(is_valid)
                self.assertIn('YYYY-YY', error)

    def test_non_consecutive_financial_year(self) -> None:
        """Test that the second part must be the following year."""
        is_valid, error = validate_financial_year('2025-27')

        self.assertFalse(is_valid)
        self.assertIn('2025-26', error)

    def test_get_financial_year_april_to_march(self) -> None:
        """Test that April starts a new financial year."""
        self.assertEqual(get_financial_year(date(2025, 4, 1)), '2025-26')
        self.assertEqual(get_financial_year(date(2026, 3, 31)), '2025-26')
        self.assertEqual(get_financial_year(date(2026, 1, 15)), '2025-26')
        self.assertEqual(get_financial_year(date(1999, 12, 1)), '1999-00')


class QuarterlySplitTests(SimpleTestCase):
    """Tests for validate_quarterly_split and AllocationSanctionForm."""

    def test_quarters_are_optional(self) -> None:
        """Test that no quarters, or all empty quarters, pass."""
        self.assertEqual(validate_quarterly_split(Decimal('100'), None), (True, None))
        self.assertEqual(validate_quarterly_split(Decimal('100'), [None] * 4), (True, None))

    def test_quarters_must_add_up(self) -> None:
        """Test that quarters must total the sanctioned amount."""
        self.assertTrue(validate_quarterly_split(Decimal('100'), [25, 25, 25, 25])[0])
        self.assertTrue(validate_quarterly_split(Decimal('100'), [Decimal('50'), None, Decimal('50'), None])[0])

        is_valid, error = validate_quarterly_split(Decimal('100'), [25, 25, 25, 20])
        self.assertFalse(is_valid)
        self.assertIn('95', error)

    def test_rounding_tolerance(self) -> None:
        """Test that a one paisa difference is tolerated."""
        quarters = [Decimal('33.33'), Decimal('33.33'), Decimal('33.33'), Decimal('0')]
        self.assertTrue(validate_quarterly_split(Decimal('100.00'), quarters)[0])

    def test_negative_or_wrong_count(self) -> None:
        """Test that negative figures and wrong counts fail."""
        self.assertFalse(validate_quarterly_split(Decimal('100'), [150, -50, 0, 0])[0])
        self.assertFalse(validate_quarterly_split(Decimal('100'), [50, 50])[0])

    def test_form_rejects_mismatched_split(self) -> None:
        """Test that the sanction form validates the split."""
        form = AllocationSanctionForm({
            'sanctioned_amount': '1000.00',
            'q1_allocation': '500.00',
            'q2_allocation': '100.00',
        })

        self.assertFalse(form.is_valid())
        self.assertIn('__all__', form.errors)

    def test_form_quarters(self) -> None:
        """Test that get_quarters returns four entries."""
        form = AllocationSanctionForm({'sanctioned_amount': '1000.00', 'q4_allocation': '1000.00'})

        self.assertTrue(form.is_valid())
        self.assertEqual(form.get_quarters(), [None, None, None, Decimal('1000.00')])


class ProposalServiceTests(OrganizationTestData, TestCase):
    """Tests for proposal creation and numbering."""

    def test_create_proposal_computes_totals(self) -> None:
        """Test that revenue, capital and total come from line items."""
        proposal = self.make_proposal()

        self.assertEqual(proposal.status, ProposalStatus.DRAFT)
        self.assertEqual(proposal.revenue_amount, Decimal('600000.00'))
        self.assertEqual(proposal.capital_amount, Decimal('400000.00'))
        self.assertEqual(proposal.total_amount, Decimal('1000000.00'))
        self.assertEqual(proposal.ministry, self.ministry)
        self.assertEqual(proposal.department, self.department)
        self.assertEqual(proposal.created_by, self.section_officer)
        self.assertEqual(proposal.line_items.count(), 2)

    def test_proposal_numbers_are_sequential_per_ministry_and_year(self) -> None:
        """Test the BP-<code>-<year>-<seq> numbering."""
        first = self.make_proposal()
        second = self.make_proposal()
        next_year = self.make_proposal(financial_year='2026-27')

        self.assertEqual(first.proposal_number, 'BP-MOH-2025-0001')
        self.assertEqual(second.proposal_number, 'BP-MOH-2025-0002')
        self.assertEqual(next_year.proposal_number, 'BP-MOH-2026-0001')
        self.assertEqual(generate_proposal_number(self.other_ministry, '2025-26'), 'BP-EDU-2025-0001')

    def test_create_proposal_rejects_bad_financial_year(self) -> None:
        """Test that a malformed financial year raises and saves nothing."""
        with self.assertRaises(FinancialYearException):
            create_proposal(
                scheme=self.scheme,
                financial_year='2025',
                proposal_type=ProposalType.BUDGET_ESTIMATE,
                justification='',
                line_items=[],
                user=self.section_officer,
            )

        self.assertFalse(BudgetProposal.objects.exists())

    def test_proposal_without_line_items(self) -> None:
        """Test that a proposal can start empty."""
        proposal = self.make_proposal(line_items=[])

        self.assertEqual(proposal.total_amount, Decimal('0.00'))


class AllocationTests(OrganizationTestData, TestCase):
    """Tests for sanctioning allocations and utilization."""

    def setUp(self) -> None:
        self.proposal = self.approve_proposal(self.make_submitted_proposal())

    def test_sanction_approved_proposal(self) -> None:
        """Test that an approved proposal can be allocated."""
        allocation = sanction_allocation(
            self.proposal,
            Decimal('800000.00'),
            [Decimal('200000.00')] * 4,
            self.budget_officer,
        )

        self.assertEqual(allocation.status, AllocationStatus.ACTIVE)
        self.assertEqual(allocation.scheme, self.scheme)
        self.assertEqual(allocation.financial_year, '2025-26')
        self.assertEqual(allocation.sanctioned_by, self.budget_officer)
        self.assertEqual(allocation.get_quarter_amounts(), [Decimal('200000.00')] * 4)
        self.assertIsNotNone(allocation.sanctioned_at)

    def test_sanction_without_quarters(self) -> None:
        """Test that quarters default to empty."""
        allocation = sanction_allocation(self.proposal, Decimal('500000.00'), [None] * 4)

        self.assertIsNone(allocation.get_quarter_amounts())

    def test_only_one_allocation_per_proposal(self) -> None:
        """Test that a second allocation is refused."""
        sanction_allocation(self.proposal, Decimal('500000.00'))

        with self.assertRaises(AllocationException):
            sanction_allocation(self.proposal, Decimal('100000.00'))

    def test_unapproved_proposal_cannot_be_allocated(self) -> None:
        """Test that Draft or in-review proposals are refused."""
        draft = self.make_proposal()

        with self.assertRaises(AllocationException):
            sanction_allocation(draft, Decimal('100000.00'))

    def test_invalid_amounts(self) -> None:
        """Test zero amounts and mismatched quarters."""
        with self.assertRaises(AllocationException):
            sanction_allocation(self.proposal, Decimal('0'))

        with self.assertRaises(AllocationException):
            sanction_allocation(self.proposal, Decimal('1000.00'), [Decimal('100.00'), None, None, None])

    def test_utilization_counts_only_approved_expenditure(self) -> None:
        """Test spent amount, balance and utilization percentage."""
        allocation = sanction_allocation(self.proposal, Decimal('300000.00'))
        approved = record_expenditure(
            self.scheme, Decimal('100000.00'), BudgetType.REVENUE, date(2025, 6, 10),
            user=self.section_officer, allocation=allocation,
        )
        record_expenditure(
            self.scheme, Decimal('50000.00'), BudgetType.REVENUE, date(2025, 6, 11),
            user=self.section_officer, allocation=allocation,
        )
        Expenditure.objects.filter(pk=approved.pk).update(status=ProposalStatus.APPROVED)

        self.assertEqual(allocation.get_spent_amount(), Decimal('100000.00'))
        self.assertEqual(allocation.get_available_balance(), Decimal('200000.00'))
        self.assertEqual(allocation.get_utilization_percentage(), Decimal('33.33'))


class BudgetingViewTests(OrganizationTestData, TestCase):
    """Tests for the budgeting JSON views."""

    def login(self, user):
        self.assertTrue(self.client.login(email=user.email, password=PASSWORD))

    def test_submit_proposal(self) -> None:
        """Test that the creator can submit a Draft proposal."""
        proposal = self.make_proposal()
        self.login(self.section_officer)

        response = self.client.post(reverse('budgeting:proposal_submit', kwargs={'pk': proposal.pk}))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], ProposalStatus.SUBMITTED)

    def test_submit_twice_is_bad_request(self) -> None:
        """Test that an already submitted proposal cannot be submitted again."""
        proposal = self.make_submitted_proposal()
        self.login(self.department_head)

        response = self.client.post(reverse('budgeting:proposal_submit', kwargs={'pk': proposal.pk}))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_INVALID_TRANSITION')

    def test_other_ministry_cannot_submit(self) -> None:
        """Test that users outside the proposal's scope get 403."""
        proposal = self.make_proposal()
        self.login(self.other_secretary)

        response = self.client.post(reverse('budgeting:proposal_submit', kwargs={'pk': proposal.pk}))

        self.assertEqual(response.status_code, 403)

    def test_sanction_requires_allocation_role(self) -> None:
        """Test that only allocation officers can sanction."""
        proposal = self.approve_proposal(self.make_submitted_proposal())
        url = reverse('budgeting:allocation_sanction', kwargs={'pk': proposal.pk})

        self.login(self.secretary)
        self.assertEqual(self.client.post(url, {'sanctioned_amount': '1000.00'}).status_code, 403)

        self.login(self.budget_officer)
        response = self.client.post(url, {'sanctioned_amount': '1000.00'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['sanctioned_amount'], '1000.00')

    def test_allocation_summary_scoped(self) -> None:
        """Test the utilization summary and its ministry scope."""
        proposal = self.approve_proposal(self.make_submitted_proposal())
        allocation = sanction_allocation(proposal, Decimal('1000.00'))
        url = reverse('budgeting:allocation_summary', kwargs={'pk': allocation.pk})

        self.login(self.secretary)
        data = self.client.get(url).json()
        self.assertEqual(data['available_balance'], '1000.00')
        self.assertEqual(data['utilization_percentage'], '0.00')

        self.login(self.other_secretary)
        self.assertEqual(self.client.get(url).status_code, 404)
