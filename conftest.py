"""
Shared pytest fixtures for the onboarding form tests.
"""

import pytest
from unittest.mock import patch

from onboarding.config_loader import reload_config
from test_fixtures import MockSessionState


@pytest.fixture
def mock_session_state():
    """Replace st.session_state with a plain mapping for the test."""
    mock_state = MockSessionState()
    with patch('streamlit.session_state', mock_state):
        yield mock_state


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts and ends with an empty configuration cache."""
    reload_config()
    yield
    reload_config()
