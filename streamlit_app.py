"""
Main Streamlit application for the employee onboarding form.
Collects personal, contact, family, job, bank and document details and
submits them to the onboarding endpoint.
"""

import streamlit as st
import logging

from onboarding.config_loader import get_config, get_config_summary, get_config_value


def get_logging_level(level_str):
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)


# Configure logging dynamically from config
try:
    log_level_str = get_config_value('logging', 'level', 'INFO')
    logging.basicConfig(
        level=get_logging_level(log_level_str),
        format=get_config_value('logging', 'format', '%(asctime)s %(levelname)s %(name)s: %(message)s')
    )
    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured to level: {log_level_str}")
except Exception as e:
    # Fallback to INFO if config reading fails
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.error(f"Failed to configure logging from config: {e}, using INFO level")

page_title = get_config_value('app', 'page_title', 'Employee Identity Card Form')

# Page configuration
st.set_page_config(
    page_title=page_title,
    page_icon="🪪",
    layout="centered",
    initial_sidebar_state="collapsed"
)


def main():
    """Main application entry point."""
    from onboarding.error_handler import ErrorHandler, ErrorType
    from onboarding.form_sections import render_form
    from onboarding.notifications import Notify
    from onboarding.session_manager import SessionManager

    try:
        SessionManager.initialize()
        summary = get_config_summary(get_config())
        logger.debug(f"Session {SessionManager.get_session_id()} using config {summary}")

        render_header()
        Notify.render()
        render_form()

    except Exception as e:
        ErrorHandler.handle_error(e, "onboarding form", ErrorType.SYSTEM)


def render_header():
    """Render application header."""
    st.markdown(
        f"<h1 style='text-align: center; margin-bottom: 0;'>{get_config_value('app', 'name', 'ARTIBOTS')}</h1>",
        unsafe_allow_html=True
    )
    st.markdown(f"<h3 style='text-align: center;'>{page_title}</h3>", unsafe_allow_html=True)
    st.caption(get_config_value('app', 'subtitle', 'Please fill in the details below to generate your ID card.'))


if __name__ == "__main__":
    main()
