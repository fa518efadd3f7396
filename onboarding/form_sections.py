"""
Section layout for the onboarding form.

Renders the six numbered sections, the conditional family sub-form and the
submit button. Family list edits run as widget callbacks: each callback
reads the input widgets, applies one pure operation from onboarding.family
and stores the new state, or posts the FamilyListError message as a notice.
"""

import streamlit as st
import pandas as pd
import logging
from datetime import date
from typing import Any, Dict, List

from .attachments import ATTACHMENT_SLOTS, DOCUMENT_SLOT_NAMES, MAX_FILE_SIZE_MB
from .config_loader import get_config_value
from .error_handler import ErrorHandler
from .exceptions import FamilyListError
from .family import (
    FamilyState,
    add_child,
    add_sibling,
    remove_child,
    remove_sibling,
    save_sibling_details,
    select_sibling,
    set_marital_status,
    update_spouse,
)
from .form_data_collector import BLOOD_GROUP_OTHER_KEY
from .form_fields import FormFields
from .notifications import Notify
from .schema import (
    BLOOD_GROUP_OTHER,
    BLOOD_GROUPS,
    CHILD_GENDERS,
    EMPLOYMENT_STATUSES,
    GENDERS,
    MARITAL_STATUSES,
)
from .session_manager import SessionManager
from .submission_handler import SubmissionHandler

logger = logging.getLogger(__name__)

ADDRESS_PLACEHOLDER = "(door no, street name, area, city, district, state, country, pincode)"
PHONE_PLACEHOLDER = "e.g. 9876543210"


def _key(name: str) -> str:
    return SessionManager.widget_key(name)


def _value(name: str, default: Any = None) -> Any:
    return SessionManager.get_widget_value(name, default)


# ---------------------------------------------------------------------------
# Family callbacks
# ---------------------------------------------------------------------------

def on_marital_status_change() -> None:
    """
    Switch the family sub-form to the chosen marital status.

    The spouse widgets are not rendered while unmarried, so their values are
    refilled from the kept spouse record when the married branch returns.
    """
    state = set_marital_status(SessionManager.get_family_state(), _value('marital_status'))
    SessionManager.set_family_state(state)
    if state.is_married:
        st.session_state[_key('spouse_name')] = state.spouse.name
        st.session_state[_key('spouse_employment_status')] = state.spouse.employment_status or None


def on_add_sibling() -> None:
    """Add the sibling typed in the name box and clear the box."""
    try:
        state = add_sibling(SessionManager.get_family_state(), _value('new_sibling_name', ""))
    except FamilyListError as e:
        Notify.error(e.message)
        return

    SessionManager.set_family_state(state)
    st.session_state[_key('new_sibling_name')] = ""


def on_remove_sibling(index: int) -> None:
    state = SessionManager.get_family_state()
    try:
        new_state = remove_sibling(state, index)
    except IndexError as e:
        logger.warning(f"Ignoring sibling removal: {e}")
        return

    SessionManager.set_family_state(new_state)
    if not new_state.selected_sibling:
        st.session_state[_key('selected_sibling')] = None


def on_select_sibling() -> None:
    """Load the chosen sibling's saved statuses into the edit radios."""
    state = select_sibling(SessionManager.get_family_state(), _value('selected_sibling'))
    SessionManager.set_family_state(state)
    st.session_state[_key('edit_marital_status')] = state.edit_marital_status or None
    st.session_state[_key('edit_employment_status')] = state.edit_employment_status or None


def on_save_sibling_details() -> None:
    state = SessionManager.get_family_state()
    try:
        state = save_sibling_details(
            state,
            _value('edit_marital_status'),
            _value('edit_employment_status'),
        )
    except FamilyListError as e:
        Notify.error(e.message)
        return

    SessionManager.set_family_state(state)
    Notify.success(f"Details saved for {state.selected_sibling}")


def on_add_child() -> None:
    """Add the child typed in the child inputs and clear them."""
    dob = _value('child_dob')
    try:
        state = add_child(
            SessionManager.get_family_state(),
            _value('child_name', ""),
            _value('child_gender'),
            dob if isinstance(dob, date) else None,
        )
    except FamilyListError as e:
        Notify.error(e.message)
        return

    SessionManager.set_family_state(state)
    st.session_state[_key('child_name')] = ""
    st.session_state[_key('child_dob')] = None


def on_remove_child(index: int) -> None:
    try:
        SessionManager.set_family_state(remove_child(SessionManager.get_family_state(), index))
    except IndexError as e:
        logger.warning(f"Ignoring child removal: {e}")


def sync_spouse() -> FamilyState:
    """Copy the spouse widgets into the family state."""
    state = SessionManager.get_family_state()
    new_state = update_spouse(
        state,
        name=_value('spouse_name', ""),
        employment_status=_value('spouse_employment_status') or "",
    )
    if new_state is not state:
        SessionManager.set_family_state(new_state)
    return new_state


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def siblings_table(state: FamilyState) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = [
        {
            'Name': s.name,
            'Marital Status': s.marital_status or "-",
            'Employment Status': s.employment_status or "-",
            'Details': "✔" if s.is_complete else "",
        }
        for s in state.siblings
    ]
    return pd.DataFrame(rows, columns=['Name', 'Marital Status', 'Employment Status', 'Details'])


def children_table(state: FamilyState) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = [
        {
            'Name': c.name,
            'Gender': c.gender,
            'Date of Birth': c.dob.strftime("%d/%m/%Y") if c.dob else "-",
        }
        for c in state.children
    ]
    return pd.DataFrame(rows, columns=['Name', 'Gender', 'Date of Birth'])


def _show_item_errors(prefix: str, count: int, names: List[str]) -> None:
    """Inline errors for list entries, e.g. siblings.0.marital_status."""
    errors = SessionManager.get_validation_errors()
    for index in range(count):
        item_errors = {
            path.split('.', 2)[-1]: message
            for path, message in errors.items()
            if path.startswith(f"{prefix}.{index}.")
        }
        for field, message in item_errors.items():
            st.caption(f":red[{names[index]}: {field.replace('_', ' ')}: {message}]")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def render_personal_section() -> None:
    st.subheader("1. Personal Details")
    col1, col2 = st.columns(2)
    with col1:
        FormFields.text_input('full_name', "Full Name (as per Govt ID)", placeholder="Full Name")
        FormFields.selectbox('marital_status', "Marital Status", MARITAL_STATUSES,
                             on_change=on_marital_status_change)
    with col2:
        FormFields.date_input('dob', "Date of Birth", max_value=date.today())
        FormFields.selectbox('gender', "Gender", GENDERS)
    FormFields.file_uploader(ATTACHMENT_SLOTS['photo'], _max_file_size_mb())


def render_contact_section() -> None:
    st.subheader("2. Contact Details")
    col1, col2 = st.columns(2)
    with col1:
        FormFields.text_input('contact_number', "Contact Number", placeholder=PHONE_PLACEHOLDER)
        FormFields.text_input('email', "Email ID", placeholder="name@gmail.com")
    with col2:
        FormFields.text_input('emergency_contact', "Emergency Contact Number", placeholder=PHONE_PLACEHOLDER)

    col1, col2 = st.columns(2)
    with col1:
        FormFields.text_area('contact_address', "Contact Address", placeholder=ADDRESS_PLACEHOLDER)
    with col2:
        FormFields.text_area('permanent_address', "Permanent Address", placeholder=ADDRESS_PLACEHOLDER)


def render_family_section() -> None:
    st.subheader("3. Family Details")
    col1, col2 = st.columns(2)
    with col1:
        FormFields.text_input('father_name', "Father Name")
        FormFields.text_input('mother_name', "Mother Name")
    with col2:
        FormFields.number_input('father_age', "Father Age")
        FormFields.number_input('mother_age', "Mother Age")
    FormFields.number_input('total_family_members', "Total Family Members")

    state = SessionManager.get_family_state()
    if state.is_married:
        render_spouse_details()
        render_children()
    else:
        render_siblings()


def render_spouse_details() -> None:
    st.markdown("#### 💍 Spouse Details")
    col1, col2 = st.columns(2)
    with col1:
        FormFields.text_input('spouse_name', "Spouse Name", error_path='spouse.name')
    with col2:
        FormFields.selectbox('spouse_employment_status', "Spouse Employment Status", EMPLOYMENT_STATUSES,
                             error_path='spouse.employment_status')
    sync_spouse()


def render_children() -> None:
    st.markdown("#### 👶 Children")
    col1, col2, col3, col4 = st.columns([3, 2, 2, 1])
    with col1:
        st.text_input("Child Name", key=_key('child_name'), placeholder="Name")
    with col2:
        st.selectbox("Gender", list(CHILD_GENDERS), key=_key('child_gender'))
    with col3:
        st.date_input("Date of Birth", value=None, key=_key('child_dob'), format="DD/MM/YYYY",
                      max_value=date.today())
    with col4:
        st.button("➕ Add Child", key=_key('add_child'), on_click=on_add_child)

    state = SessionManager.get_family_state()
    if not state.children:
        st.caption("No children added yet.")
        return

    st.dataframe(children_table(state), hide_index=True, use_container_width=True)
    _show_item_errors('children', len(state.children), [c.name for c in state.children])

    col1, col2 = st.columns([3, 1])
    with col1:
        index = st.selectbox(
            "Select child to remove",
            options=list(range(len(state.children))),
            format_func=lambda i: state.children[i].name,
            key=_key('remove_child_index'),
        )
    with col2:
        st.button("🗑️ Remove", key=_key('remove_child'), on_click=on_remove_child, args=(index,))


def render_siblings() -> None:
    st.markdown("#### 👫 Siblings")
    col1, col2 = st.columns([4, 1])
    with col1:
        st.text_input("Sibling Name", key=_key('new_sibling_name'), placeholder="Enter sibling name",
                      label_visibility="collapsed")
    with col2:
        st.button("➕ Add", key=_key('add_sibling'), on_click=on_add_sibling)

    state = SessionManager.get_family_state()
    if not state.siblings:
        st.caption("No siblings added yet.")
        return

    st.dataframe(siblings_table(state), hide_index=True, use_container_width=True)
    _show_item_errors('siblings', len(state.siblings), list(state.sibling_names()))

    col1, col2 = st.columns([3, 1])
    with col1:
        index = st.selectbox(
            "Select sibling to remove",
            options=list(range(len(state.siblings))),
            format_func=lambda i: state.siblings[i].name,
            key=_key('remove_sibling_index'),
        )
    with col2:
        st.button("🗑️ Remove", key=_key('remove_sibling'), on_click=on_remove_sibling, args=(index,))

    render_sibling_editor(state)


def render_sibling_editor(state: FamilyState) -> None:
    st.selectbox(
        "Select Sibling to Edit Details",
        options=list(state.sibling_names()),
        index=None,
        placeholder="-- Select --",
        key=_key('selected_sibling'),
        on_change=on_select_sibling,
    )

    if not state.selected_sibling:
        return

    st.markdown(f"**Details for _{state.selected_sibling}_**")
    col1, col2 = st.columns(2)
    with col1:
        FormFields.radio('edit_marital_status', "Marital Status", MARITAL_STATUSES, required=False)
    with col2:
        FormFields.radio('edit_employment_status', "Employment Status", EMPLOYMENT_STATUSES, required=False)

    st.button(f"Save Details for {state.selected_sibling}", key=_key('save_sibling'),
              on_click=on_save_sibling_details)


def render_job_section() -> None:
    st.subheader("4. Job Details")
    col1, col2 = st.columns(2)
    with col1:
        FormFields.text_input('department', "Department")
        FormFields.date_input('joining_date', "Joining Date")
    with col2:
        FormFields.text_input('designation', "Designation")
        blood_group = FormFields.selectbox('blood_group', "Blood Group", BLOOD_GROUPS + (BLOOD_GROUP_OTHER,))
        if blood_group == BLOOD_GROUP_OTHER:
            st.text_input("Specify Blood Group *", key=_key(BLOOD_GROUP_OTHER_KEY), placeholder="Enter Blood Group")


def render_bank_section() -> None:
    st.subheader("5. Bank & Nominee Details")
    col1, col2 = st.columns(2)
    with col1:
        FormFields.text_input('bank_name', "Bank Name", placeholder="e.g. HDFC Bank")
        FormFields.text_input('ifsc_code', "IFSC Code", placeholder="e.g. HDFC0001234")
    with col2:
        FormFields.text_input('account_number', "Account Number", placeholder="e.g. 1234567890")
        FormFields.text_input('nominee_name', "Nominee Name (for PF & ESI)",
                              placeholder="e.g. enter family member name")


def render_documents_section() -> None:
    st.subheader("6. Documents Upload")
    max_size_mb = _max_file_size_mb()
    for slot_name in DOCUMENT_SLOT_NAMES:
        FormFields.file_uploader(ATTACHMENT_SLOTS[slot_name], max_size_mb)


def render_submit_button() -> None:
    """
    Submit button. Clicking only raises the busy flag, so the rerun draws
    the button disabled before the request is sent.
    """
    busy = SessionManager.is_submitting()
    st.button(
        "⏳ Submitting..." if busy else "📤 Submit Application",
        type="primary",
        disabled=busy,
        key="submit_application",
        on_click=SessionManager.begin_submission,
    )


def run_pending_submission() -> bool:
    """Send the submission requested by the button, then rerun to redraw the form."""
    if not SessionManager.is_submitting():
        return False

    try:
        with st.spinner("Submitting..."):
            SubmissionHandler.handle_streamlit_submission()
    except Exception as e:
        ErrorHandler.handle_error(e, "submission", notify=True)
    st.rerun()
    return True


def render_form() -> None:
    """Render every section in order, then the submit button."""
    for render in (
        render_personal_section,
        render_contact_section,
        render_family_section,
        render_job_section,
        render_bank_section,
        render_documents_section,
    ):
        with st.container(border=True):
            render()
    render_submit_button()
    run_pending_submission()


def _max_file_size_mb() -> float:
    return get_config_value('uploads', 'max_file_size_mb', MAX_FILE_SIZE_MB)
