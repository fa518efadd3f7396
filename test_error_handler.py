"""
Unit tests for error_handler module.
"""

from unittest.mock import patch

import pytest
import requests
from pydantic import BaseModel, ValidationError

from onboarding.error_handler import ERROR_MESSAGES, ErrorHandler, ErrorType
from onboarding.exceptions import FamilyListError, SubmissionError
from onboarding.notifications import NOTICE_KEY


class TestClassify:
    """Exceptions map to error types."""

    @pytest.mark.parametrize("error,expected", [
        (FamilyListError("Sibling already exists"), ErrorType.LIST_OPERATION),
        (SubmissionError("https://example.test", status_code=500), ErrorType.NETWORK),
        (requests.Timeout("slow"), ErrorType.NETWORK),
        (RuntimeError("boom"), ErrorType.SYSTEM),
    ])
    def test_classify(self, error, expected):
        assert ErrorHandler.classify(error) == expected


class TestUserFriendlyMessages:
    """Message selection."""

    def test_list_errors_are_shown_verbatim(self):
        error = FamilyListError("Please select both statuses for the sibling")

        message = ErrorHandler._get_user_friendly_message(error, ErrorType.LIST_OPERATION)

        assert message == "Please select both statuses for the sibling"

    def test_network_default_is_generic_failure(self):
        error = SubmissionError("https://example.test", status_code=500)

        message = ErrorHandler._get_user_friendly_message(error, ErrorType.NETWORK)

        assert message == "Something went wrong. Please try again."

    def test_specific_exception_message(self):
        message = ErrorHandler._get_user_friendly_message(requests.Timeout(), ErrorType.NETWORK)

        assert "timed out" in message

    def test_validation_messages_use_warning_icon(self):
        class Age(BaseModel):
            value: int

        with pytest.raises(ValidationError) as exc_info:
            Age(value="old")

        message = ErrorHandler._get_user_friendly_message(exc_info.value, ErrorType.VALIDATION)

        assert message.startswith("⚠️")
        assert all(not text.startswith("✅") for text in ERROR_MESSAGES[ErrorType.VALIDATION].values())

    def test_unknown_error_type_uses_system_messages(self):
        message = ErrorHandler._get_user_friendly_message(RuntimeError(), "unknown")

        assert message.startswith("💻")


class TestHandleError:
    """Display paths."""

    @patch('streamlit.markdown')
    @patch('streamlit.error')
    def test_inline_error_with_suggestions(self, mock_error, mock_markdown):
        error = SubmissionError("https://example.test", status_code=503)

        message = ErrorHandler.handle_error(error, "submission")

        mock_error.assert_called_once_with(message)
        suggestions = [c.args[0] for c in mock_markdown.call_args_list]
        assert "- Check your internet connection" in suggestions

    @patch('streamlit.error')
    def test_notify_posts_notice_instead(self, mock_error, mock_session_state):
        ErrorHandler.handle_error(FamilyListError("Sibling already exists"), "add sibling", notify=True)

        mock_error.assert_not_called()
        assert mock_session_state[NOTICE_KEY].message == "Sibling already exists"
