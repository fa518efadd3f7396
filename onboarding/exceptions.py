"""
Custom exception classes for the onboarding form.

This module provides specialized exception classes for list-operation
and submission failures with centralized error details.
"""

import logging
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)


class OnboardingError(Exception):
    """
    Base exception for onboarding form errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class FamilyListError(OnboardingError):
    """
    Raised when a sibling, spouse or child list operation is rejected.

    The message is shown to the user as-is in a transient notification.
    """

    def __init__(self, message: str, member_name: Optional[str] = None):
        context = {'member_name': member_name} if member_name else {}
        super().__init__(message, context)


class SubmissionError(OnboardingError):
    """
    Raised when the onboarding endpoint rejects or fails a submission.

    Covers non-2xx responses, non-JSON bodies and transport failures.
    """

    def __init__(self, endpoint: str, status_code: Optional[int] = None,
                 original_error: Optional[Exception] = None,
                 message: Optional[str] = None):
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error

        if message is None:
            if status_code is not None:
                message = f"Server error: {status_code}"
            elif original_error is not None:
                message = f"Request to {endpoint} failed: {original_error}"
            else:
                message = f"Request to {endpoint} failed"

        context = {
            'endpoint': endpoint,
            'status_code': status_code,
        }
        if original_error is not None:
            context['original_error_type'] = type(original_error).__name__
            context['original_error_message'] = str(original_error)

        recovery_suggestions = [
            "Check your internet connection",
            "Submit the form again; nothing was saved by the failed attempt",
        ]

        super().__init__(message, context, recovery_suggestions)
