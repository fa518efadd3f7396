"""
Field widgets for the onboarding form.

Every widget is keyed with SessionManager.widget_key so its value lives in
session state under the current form version, and every widget shows the
inline validation message stored for its field path underneath it.
"""

import streamlit as st
import logging
from datetime import date
from typing import Any, Callable, List, Optional, Sequence

from .attachments import AttachmentSlot, coerce_uploads, describe_files, max_file_size_message
from .session_manager import SessionManager

logger = logging.getLogger(__name__)

MIN_DATE = date(1900, 1, 1)
PLACEHOLDER = "-- Select --"


class FormFields:
    """Renders labelled, keyed widgets with inline error text."""

    @staticmethod
    def label(text: str, required: bool = True) -> str:
        return f"{text} *" if required else text

    @staticmethod
    def show_error(field_path: str) -> Optional[str]:
        """Render the stored validation message for a field, if any."""
        message = SessionManager.get_field_error(field_path)
        if message:
            st.caption(f":red[{message}]")
        return message

    @staticmethod
    def _kwargs(field_name: str, label: str, required: bool, help: Optional[str], disabled: bool) -> dict:
        return {
            'key': SessionManager.widget_key(field_name),
            'label': FormFields.label(label, required),
            'help': help,
            'disabled': disabled,
        }

    @staticmethod
    def text_input(field_name: str, label: str, required: bool = True, placeholder: Optional[str] = None,
                   help: Optional[str] = None, disabled: bool = False, error_path: Optional[str] = None) -> str:
        kwargs = FormFields._kwargs(field_name, label, required, help, disabled)
        kwargs['placeholder'] = placeholder
        value = st.text_input(**kwargs)
        FormFields.show_error(error_path or field_name)
        return value if value is not None else ""

    @staticmethod
    def text_area(field_name: str, label: str, required: bool = True, placeholder: Optional[str] = None,
                  help: Optional[str] = None) -> str:
        kwargs = FormFields._kwargs(field_name, label, required, help, False)
        kwargs['placeholder'] = placeholder
        kwargs['height'] = 100
        value = st.text_area(**kwargs)
        FormFields.show_error(field_name)
        return value if value is not None else ""

    @staticmethod
    def number_input(field_name: str, label: str, min_value: int = 0, required: bool = True,
                     help: Optional[str] = None) -> Optional[int]:
        """Whole-number input that starts empty."""
        kwargs = FormFields._kwargs(field_name, label, required, help, False)
        kwargs.update({'min_value': int(min_value), 'step': 1, 'format': "%d", 'value': None})

        # A value already in session state wins over the default
        if kwargs['key'] in st.session_state:
            kwargs.pop('value')

        value = st.number_input(**kwargs)
        FormFields.show_error(field_name)
        return value

    @staticmethod
    def date_input(field_name: str, label: str, required: bool = True, min_value: date = MIN_DATE,
                   max_value: Optional[date] = None, help: Optional[str] = None,
                   error_path: Optional[str] = None) -> Optional[date]:
        """Date input that starts empty; returns a date or None."""
        kwargs = FormFields._kwargs(field_name, label, required, help, False)
        kwargs.update({'min_value': min_value, 'value': None, 'format': "DD/MM/YYYY"})
        if max_value is not None:
            kwargs['max_value'] = max_value
        if kwargs['key'] in st.session_state:
            kwargs.pop('value')

        value = st.date_input(**kwargs)
        FormFields.show_error(error_path or field_name)
        return value if isinstance(value, date) else None

    @staticmethod
    def selectbox(field_name: str, label: str, options: Sequence[Any], required: bool = True,
                  help: Optional[str] = None, on_change: Optional[Callable] = None,
                  error_path: Optional[str] = None) -> Any:
        """Selectbox with no initial choice."""
        kwargs = FormFields._kwargs(field_name, label, required, help, False)
        kwargs.update({'options': list(options), 'index': None, 'placeholder': PLACEHOLDER})
        if on_change is not None:
            kwargs['on_change'] = on_change

        value = st.selectbox(**kwargs)
        FormFields.show_error(error_path or field_name)
        return value

    @staticmethod
    def radio(field_name: str, label: str, options: Sequence[Any], required: bool = True) -> Any:
        kwargs = FormFields._kwargs(field_name, label, required, None, False)
        kwargs.update({'options': list(options), 'index': None, 'horizontal': True})
        return st.radio(**kwargs)

    @staticmethod
    def file_uploader(slot: AttachmentSlot, max_size_mb: float) -> List[Any]:
        """
        Uploader for one attachment slot.

        Lists the selected files with their sizes under the widget.
        """
        uploads = st.file_uploader(
            FormFields.label(slot.label, slot.required),
            type=list(slot.extensions),
            accept_multiple_files=slot.multiple,
            key=SessionManager.widget_key(slot.name),
            help=max_file_size_message(max_size_mb),
        )

        try:
            documents = coerce_uploads(uploads)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Could not read uploads for {slot.name}: {e}")
            documents = []

        for line in describe_files(documents):
            st.caption(f"📎 {line}")

        FormFields.show_error(slot.name)
        return documents
