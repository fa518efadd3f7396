"""
Form data collection for the onboarding form.
Collects current values from every field widget in session state and
merges in the active family branch.
"""

import logging
from typing import Dict, Any, List
from datetime import date, datetime

from .attachments import ATTACHMENT_SLOTS, UploadedDocument, coerce_uploads
from .family import set_marital_status
from .session_manager import SessionManager

logger = logging.getLogger(__name__)

SCALAR_FIELDS = [
    # Personal
    'full_name', 'dob', 'gender',
    # Contact
    'contact_number', 'emergency_contact', 'contact_address', 'permanent_address', 'email',
    # Family
    'father_name', 'father_age', 'mother_name', 'mother_age', 'total_family_members',
    # Job
    'department', 'designation', 'joining_date', 'blood_group',
    # Bank & nominee
    'bank_name', 'account_number', 'ifsc_code', 'nominee_name',
]

DATE_FIELDS = {'dob', 'joining_date'}

BLOOD_GROUP_OTHER_KEY = 'blood_group_other'


def collect_all_form_data() -> Dict[str, Any]:
    """
    Collect current form values from all widgets in session state.

    Every widget stores its value in field_{field_name}_v{form_version}.
    Attachments are converted to UploadedDocument lists, and the family
    lists come from the family state, active branch only.

    Returns:
        Dictionary of form data keyed by snake_case field name
    """
    form_data: Dict[str, Any] = {}

    for field_name in SCALAR_FIELDS:
        value = SessionManager.get_widget_value(field_name)

        if field_name in DATE_FIELDS:
            if isinstance(value, datetime):
                value = value.date()
            elif value is not None and not isinstance(value, (date, str)):
                logger.warning(f"Unexpected date value for {field_name}: {type(value)}")
                value = None

        form_data[field_name] = value

    # "Others" reveals a free-text blood group
    if form_data.get('blood_group') == 'Others':
        specified = SessionManager.get_widget_value(BLOOD_GROUP_OTHER_KEY)
        if specified and str(specified).strip():
            form_data['blood_group'] = str(specified).strip()

    for slot_name in ATTACHMENT_SLOTS:
        form_data[slot_name] = collect_uploads(slot_name)

    form_data.update(collect_family_data())

    logger.debug(f"Collected {len(form_data)} fields")
    return form_data


def collect_family_data() -> Dict[str, Any]:
    """Family fields of the active branch, after syncing the marital status widget."""
    family = SessionManager.get_family_state()
    widget_status = SessionManager.get_widget_value('marital_status')

    if widget_status is not None and widget_status != family.marital_status:
        family = set_marital_status(family, widget_status)
        SessionManager.set_family_state(family)

    return family.to_form_data()


def collect_uploads(slot_name: str) -> List[UploadedDocument]:
    """Uploaded files of one slot as documents."""
    value = SessionManager.get_widget_value(slot_name)
    try:
        return coerce_uploads(value)
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning(f"Could not read uploads for {slot_name}: {e}")
        return []
