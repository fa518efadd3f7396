"""
Transient notifications for the onboarding form.

There is a single "current notice" slot in session state. Posting a
notice replaces whatever was there and stamps it with an expiry. The page
raises it once as a toast, and the slot is cleared when the expiry passes.
"""

import streamlit as st
import time
import logging
from dataclasses import dataclass, replace
from typing import Optional

from .config_loader import get_config_value

# Configure logging
logger = logging.getLogger(__name__)

NOTICE_KEY = 'current_notice'
DEFAULT_DURATION_SECONDS = 3.0

ICONS = {
    'success': '✅',
    'info': 'ℹ️',
    'warning': '⚠️',
    'error': '❌'
}


@dataclass(frozen=True)
class Notice:
    message: str
    notification_type: str
    expires_at: float
    shown: bool = False

    def is_expired(self, now: Optional[float] = None) -> bool:
        return (time.time() if now is None else now) >= self.expires_at

    @property
    def icon(self) -> str:
        return ICONS.get(self.notification_type, ICONS['info'])


def _notice_duration() -> float:
    try:
        return float(get_config_value('notifications', 'duration_seconds', DEFAULT_DURATION_SECONDS))
    except (TypeError, ValueError):
        return DEFAULT_DURATION_SECONDS


class Notify:
    """
    Notification helper backed by the current-notice slot.

    Usage:
    Notify.success("Application submitted successfully!")
    Notify.error("Sibling already exists")
    Notify.render()  # once per run, toasts and expires the current notice
    """

    @staticmethod
    def post(message: str, notification_type: str = 'info', duration: Optional[float] = None,
             now: Optional[float] = None) -> Notice:
        """Store a notice in the slot, replacing any previous one."""
        if duration is None:
            duration = _notice_duration()
        now = time.time() if now is None else now

        notice = Notice(message=message, notification_type=notification_type, expires_at=now + duration)
        st.session_state[NOTICE_KEY] = notice
        logger.debug(f"Notice posted ({notification_type}): {message}")
        return notice

    @staticmethod
    def success(message: str) -> Notice:
        """Show success notification."""
        return Notify.post(message, 'success')

    @staticmethod
    def error(message: str) -> Notice:
        """Show error notification."""
        return Notify.post(message, 'error')

    @staticmethod
    def current(now: Optional[float] = None) -> Optional[Notice]:
        """Return the live notice, clearing the slot once it has expired."""
        notice = st.session_state.get(NOTICE_KEY)
        if notice is None:
            return None
        if notice.is_expired(now):
            st.session_state[NOTICE_KEY] = None
            return None
        return notice

    @staticmethod
    def render(now: Optional[float] = None) -> Optional[Notice]:
        """
        Raise the live notice as a toast.

        A notice is toasted on the first run that sees it; later runs before
        the expiry leave the toast alone so it is not stacked again.
        """
        notice = Notify.current(now)
        if notice is None:
            return None

        if not notice.shown:
            st.toast(notice.message, icon=notice.icon)
            notice = replace(notice, shown=True)
            st.session_state[NOTICE_KEY] = notice
        return notice
