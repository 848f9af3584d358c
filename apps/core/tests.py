"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the core module: exceptions and the
             organizational hierarchy.
-------------------------------------------------------------------------
"""
from django.db import IntegrityError
from django.test import SimpleTestCase, TestCase

from apps.core.exceptions import (
    BudgetExceededException,
    CommentsRequiredException,
    GBMSException,
    WorkflowNotFoundException,
)
from apps.core.models import Department, Ministry


class ExceptionTests(SimpleTestCase):
    """Tests for GBMSException and its subclasses."""

    def test_default_message(self):
        """Test that subclasses fall back to their default message."""
        exc = WorkflowNotFoundException()

        self.assertEqual(str(exc), 'Approval workflow not found.')
        self.assertEqual(exc.details, {})

    def test_to_dict(self):
        """Test the API representation of an exception."""
        exc = BudgetExceededException('Too much', details={'available': '10.00'})

        self.assertEqual(exc.to_dict(), {
            'error_code': 'ERR_BUDGET_EXCEEDED',
            'message': 'Too much',
            'details': {'available': '10.00'},
        })

    def test_subclasses_share_base(self):
        """Test that callers can catch every domain error at once."""
        with self.assertRaises(GBMSException):
            raise CommentsRequiredException()


class OrganizationModelTests(TestCase):
    """Tests for Ministry and Department."""

    def test_ministry_code_generated_from_name(self):
        """Test that a missing code is taken from the name."""
        ministry = Ministry.objects.create(name='Agriculture')

        self.assertEqual(ministry.code, 'AGR')
        self.assertEqual(str(ministry), 'Agriculture')

    def test_explicit_code_is_kept(self):
        """Test that a given code is not overwritten."""
        ministry = Ministry.objects.create(name='Ministry of Health', code='MOH')

        self.assertEqual(ministry.code, 'MOH')
        self.assertIsNotNone(ministry.public_id)

    def test_department_str_and_uniqueness(self):
        """Test department display and per-ministry code uniqueness."""
        ministry = Ministry.objects.create(name='Ministry of Health', code='MOH')
        department = Department.objects.create(ministry=ministry, name='Public Health', code='PH')

        self.assertEqual(str(department), 'Public Health (MOH)')
        with self.assertRaises(IntegrityError):
            Department.objects.create(ministry=ministry, name='Primary Health', code='PH')
