"""
Session state management for the onboarding form.
Holds the family sub-form state, inline validation errors, the busy flag
and the form version used to reset every widget after a submission.
"""

import streamlit as st
from typing import Dict, Any, Optional
from datetime import datetime
import logging

from .family import FamilyState

logger = logging.getLogger(__name__)

WIDGET_PREFIX = "field_"


class SessionManager:
    """Manages Streamlit session state for the onboarding form."""

    @staticmethod
    def initialize():
        """Initialize all session state variables with default values."""
        defaults = {
            'form_version': 0,
            'family_state': FamilyState(),
            'validation_errors': {},
            'is_submitting': False,
            'current_notice': None,
            'last_activity': datetime.now(),
            'session_id': None,
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        # Generate session ID if not exists
        if not st.session_state.session_id:
            st.session_state.session_id = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
            logger.info(f"Session initialized: {st.session_state.session_id}")

    @staticmethod
    def get_form_version() -> int:
        return st.session_state.get('form_version', 0)

    @staticmethod
    def widget_key(field_name: str) -> str:
        """Session key of a field's widget for the current form version."""
        return f"{WIDGET_PREFIX}{field_name}_v{SessionManager.get_form_version()}"

    @staticmethod
    def get_widget_value(field_name: str, default: Any = None) -> Any:
        return st.session_state.get(SessionManager.widget_key(field_name), default)

    @staticmethod
    def get_family_state() -> FamilyState:
        return st.session_state.get('family_state') or FamilyState()

    @staticmethod
    def set_family_state(state: FamilyState):
        st.session_state.family_state = state
        SessionManager.update_activity()

    @staticmethod
    def get_validation_errors() -> Dict[str, str]:
        """Get current validation errors keyed by field path."""
        return st.session_state.get('validation_errors', {})

    @staticmethod
    def get_field_error(field_path: str) -> Optional[str]:
        return SessionManager.get_validation_errors().get(field_path)

    @staticmethod
    def set_validation_errors(errors: Dict[str, str]):
        """Set validation errors."""
        st.session_state.validation_errors = dict(errors)

    @staticmethod
    def clear_validation_errors():
        """Clear validation errors."""
        st.session_state.validation_errors = {}

    @staticmethod
    def is_submitting() -> bool:
        return st.session_state.get('is_submitting', False)

    @staticmethod
    def begin_submission() -> bool:
        """
        Raise the busy flag.

        Returns:
            False if a submission is already in flight
        """
        if SessionManager.is_submitting():
            logger.warning("Submission already in progress, ignoring second attempt")
            return False
        st.session_state.is_submitting = True
        SessionManager.update_activity()
        return True

    @staticmethod
    def end_submission():
        st.session_state.is_submitting = False

    @staticmethod
    def reset_form():
        """
        Discard everything the user entered.

        Bumping the form version gives every widget a fresh key, so the
        old values are dropped along with the family lists and errors.
        """
        old_version = SessionManager.get_form_version()
        stale_suffix = f"_v{old_version}"
        for key in list(st.session_state.keys()):
            if isinstance(key, str) and key.startswith(WIDGET_PREFIX) and key.endswith(stale_suffix):
                del st.session_state[key]

        st.session_state.form_version = old_version + 1
        st.session_state.family_state = FamilyState()
        st.session_state.validation_errors = {}
        SessionManager.update_activity()
        logger.info(f"Form reset (version {old_version} -> {old_version + 1})")

    @staticmethod
    def update_activity():
        """Update last activity timestamp."""
        st.session_state.last_activity = datetime.now()

    @staticmethod
    def get_session_id() -> str:
        """Get the session ID."""
        return st.session_state.get('session_id', 'unknown')
