"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Custom exceptions for the GBMS system. These provide
             specific error codes for budget and workflow violations.
-------------------------------------------------------------------------
"""
from typing import Optional


class GBMSException(Exception):
    """Base exception for all GBMS specific errors."""

    error_code: str = "ERR_GBMS_GENERIC"
    default_message: str = "An error occurred in the GBMS system."

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None) -> None:
        """
        Initialize GBMS exception.

        Args:
            message: Custom error message. If None, uses default_message.
            details: Additional context dictionary for debugging.
        """
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# Budget-related Exceptions
class BudgetExceededException(GBMSException):
    """Raised when an expenditure exceeds the available allocation balance."""

    error_code = "ERR_BUDGET_EXCEEDED"
    default_message = "The requested amount exceeds the available balance of this allocation."


class AllocationException(GBMSException):
    """Raised when a budget allocation cannot be sanctioned or charged."""

    error_code = "ERR_ALLOCATION_INVALID"
    default_message = "The budget allocation is not valid for this operation."


class FinancialYearException(GBMSException):
    """Raised when a financial year string is malformed."""

    error_code = "ERR_INVALID_FINANCIAL_YEAR"
    default_message = "Financial year must be in YYYY-YY format (e.g., 2025-26)."


# Workflow-related Exceptions
class WorkflowNotFoundException(GBMSException):
    """Raised when a workflow id does not resolve to a workflow."""

    error_code = "ERR_WORKFLOW_NOT_FOUND"
    default_message = "Approval workflow not found."


class EntityNotFoundException(GBMSException):
    """Raised when the record gated by a workflow no longer exists."""

    error_code = "ERR_ENTITY_NOT_FOUND"
    default_message = "The record linked to this workflow was not found."


class UnsupportedEntityTypeException(GBMSException):
    """Raised when no approval workflow is defined for an entity type."""

    error_code = "ERR_UNSUPPORTED_ENTITY_TYPE"
    default_message = "No approval workflow is defined for this entity type."


class WorkflowTransitionException(GBMSException):
    """Raised when an invalid state transition is attempted."""

    error_code = "ERR_INVALID_TRANSITION"
    default_message = "Invalid workflow transition attempted."


class CommentsRequiredException(GBMSException):
    """Raised when a rejection or revision request has no comments."""

    error_code = "ERR_COMMENTS_REQUIRED"
    default_message = "Comments are required when rejecting or requesting a revision."


class UnauthorizedRoleException(GBMSException):
    """Raised when a user lacks the required role for an action."""

    error_code = "ERR_UNAUTHORIZED_ROLE"
    default_message = "You do not have the required role to perform this action."
