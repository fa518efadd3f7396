"""
Error handling utilities for the onboarding form.
Maps unexpected exceptions to user-friendly messages and keeps the form usable.
"""

import streamlit as st
import logging
from typing import Optional

import requests
from pydantic import ValidationError

from .exceptions import OnboardingError, FamilyListError, SubmissionError
from .notifications import Notify

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    VALIDATION = "validation"
    LIST_OPERATION = "list_operation"
    NETWORK = "network"
    SYSTEM = "system"


ERROR_MESSAGES = {
    ErrorType.VALIDATION: {
        ValidationError: "⚠️ Some fields are invalid. Please review the highlighted fields.",
        ValueError: "⚠️ Data validation failed. Please check your input and try again.",
        "default": "⚠️ Validation error occurred. Please review your data and try again."
    },

    ErrorType.LIST_OPERATION: {
        "default": "👪 That family member change could not be applied."
    },

    ErrorType.NETWORK: {
        requests.Timeout: "⏱️ Request timed out. Please try again.",
        requests.ConnectionError: "🌐 Network connection error. Please check your internet connection.",
        "default": "Something went wrong. Please try again."
    },

    ErrorType.SYSTEM: {
        MemoryError: "💻 System is running low on memory. Please try again or contact support.",
        ImportError: "💻 Required system component is missing. Please contact support.",
        "default": "💻 System error occurred. Please try again or contact support."
    }
}


class ErrorHandler:
    """Error handling for the onboarding form."""

    @staticmethod
    def classify(error: Exception) -> str:
        """Pick the error type for an exception raised by the form's own code."""
        if isinstance(error, FamilyListError):
            return ErrorType.LIST_OPERATION
        if isinstance(error, (SubmissionError, requests.RequestException)):
            return ErrorType.NETWORK
        if isinstance(error, ValidationError):
            return ErrorType.VALIDATION
        return ErrorType.SYSTEM

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: Optional[str] = None,
        user_message: Optional[str] = None,
        notify: bool = False
    ) -> str:
        """
        Handle errors with a user-friendly message.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants); classified when None
            user_message: Custom user-friendly message
            notify: Post the message to the notice slot instead of an inline error

        Returns:
            The message shown to the user
        """
        logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if error_type is None:
            error_type = ErrorHandler.classify(error)

        if not user_message:
            user_message = ErrorHandler._get_user_friendly_message(error, error_type)

        if notify:
            Notify.error(user_message)
        else:
            ErrorHandler._display_error(user_message, error)

        return user_message

    @staticmethod
    def _get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Generate user-friendly error messages based on error type."""
        # List-operation messages are already written for the user
        if isinstance(error, FamilyListError):
            return error.message

        error_type_messages = ERROR_MESSAGES.get(error_type, ERROR_MESSAGES[ErrorType.SYSTEM])

        for exception_type, message in error_type_messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return error_type_messages.get("default", "An unexpected error occurred.")

    @staticmethod
    def _display_error(user_message: str, error: Exception) -> None:
        """Display error message to user with recovery suggestions."""
        st.error(user_message)

        if isinstance(error, OnboardingError) and error.recovery_suggestions:
            st.markdown("**🔧 Suggested Actions:**")
            for suggestion in error.recovery_suggestions:
                st.markdown(f"- {suggestion}")
