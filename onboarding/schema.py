"""
Validation schema for the employee onboarding form.

Declares the Pydantic models for the application record and its family
entries. Every rule raises the exact message shown next to the field, so a
ValidationError can be flattened into a {field_path: message} mapping for
inline display.
"""

import logging
import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email

from .attachments import (
    ATTACHMENT_SLOTS,
    MAX_FILE_SIZE_MB,
    UploadedDocument,
    coerce_uploads,
    validate_files,
)

logger = logging.getLogger(__name__)

GENDERS = ("Male", "Female", "Other")
CHILD_GENDERS = ("Male", "Female")
MARITAL_STATUSES = ("Single", "Married")
EMPLOYMENT_STATUSES = ("Employed", "Unemployed")
BLOOD_GROUPS = ("O+", "O-", "A+", "A-", "B+", "B-", "AB+", "AB-")
BLOOD_GROUP_OTHER = "Others"

MARRIED = "Married"
SINGLE = "Single"

PHONE_PATTERN = re.compile(r"^\d{10,15}$")
IFSC_PATTERN = re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$")

# field -> (minimum length, message)
MIN_LENGTH_RULES = {
    'full_name': (2, "Full Name is required"),
    'emergency_contact': (10, "Emergency contact required"),
    'contact_address': (10, "Address is too short"),
    'permanent_address': (10, "Address is too short"),
    'father_name': (2, "Father Name is required"),
    'mother_name': (2, "Mother Name is required"),
    'department': (2, "Department is required"),
    'designation': (2, "Designation is required"),
    'bank_name': (2, "Bank Name is required"),
    'account_number': (8, "Account Number must be valid"),
    'nominee_name': (2, "Nominee Name is required"),
}

# field -> (allowed values, message)
ENUM_RULES = {
    'gender': (GENDERS, "Gender is required"),
    'marital_status': (MARITAL_STATUSES, "Marital Status is required"),
}

# field -> (minimum, message)
NUMBER_RULES = {
    'father_age': (18, "Age must be valid"),
    'mother_age': (18, "Age must be valid"),
    'total_family_members': (1, "At least 1 member"),
}

DATE_RULES = {
    'dob': "Date of Birth is required",
    'joining_date': "Joining Date is required",
}


def parse_date(value: Any) -> Optional[date]:
    """Parse a date object or date string, returning None when unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date_parser.parse(value).date()
        except (ValueError, OverflowError):
            return None
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _require_min_length(value: Any, min_length: int, message: str) -> str:
    text = _as_text(value)
    if len(text) < min_length:
        raise ValueError(message)
    return text


def _require_choice(value: Any, choices, message: str) -> str:
    if value not in choices:
        raise ValueError(message)
    return value


def _require_number(value: Any, minimum: float, message: str) -> float:
    if isinstance(value, bool):
        raise ValueError(message)
    try:
        number = float(value) if not isinstance(value, str) else float(value.strip() or 0)
    except (TypeError, ValueError):
        raise ValueError(message)
    if math.isnan(number) or number < minimum:
        raise ValueError(message)
    return number


class FormModel(BaseModel):
    """Shared configuration: snake_case attributes, camelCase wire keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        loc_by_alias=False,
        validate_default=True,
        extra='ignore',
    )


class SiblingRecord(FormModel):
    name: str = ""
    marital_status: Optional[str] = None
    employment_status: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def _name_required(cls, v):
        return _require_min_length(v, 1, "Name required")

    @field_validator('marital_status', mode='before')
    @classmethod
    def _marital_status_choice(cls, v):
        return _require_choice(v, MARITAL_STATUSES, "Status required")

    @field_validator('employment_status', mode='before')
    @classmethod
    def _employment_status_choice(cls, v):
        return _require_choice(v, EMPLOYMENT_STATUSES, "Status required")


class SpouseRecord(FormModel):
    name: str = ""
    employment_status: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def _name_required(cls, v):
        return _require_min_length(v, 2, "Spouse Name is required")

    @field_validator('employment_status', mode='before')
    @classmethod
    def _employment_status_choice(cls, v):
        return _require_choice(v, EMPLOYMENT_STATUSES, "Spouse Employment Status is required")


class ChildRecord(FormModel):
    name: str = ""
    gender: Optional[str] = None
    dob: Optional[date] = None

    @field_validator('name', mode='before')
    @classmethod
    def _name_required(cls, v):
        return _require_min_length(v, 1, "Name required")

    @field_validator('gender', mode='before')
    @classmethod
    def _gender_choice(cls, v):
        return _require_choice(v, CHILD_GENDERS, "Gender required")

    @field_validator('dob', mode='before')
    @classmethod
    def _optional_date(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        parsed = parse_date(v)
        if parsed is None:
            raise ValueError("Invalid date")
        return parsed


class EmployeeApplication(FormModel):
    """The full onboarding record as validated before submission."""

    # Personal
    full_name: str = ""
    dob: Optional[date] = None
    gender: Optional[str] = None
    photo: List[UploadedDocument] = Field(default_factory=list)

    # Contact
    contact_number: str = ""
    emergency_contact: str = ""
    contact_address: str = ""
    permanent_address: str = ""
    email: str = ""

    # Family
    father_name: str = ""
    father_age: Optional[float] = None
    mother_name: str = ""
    mother_age: Optional[float] = None
    marital_status: Optional[str] = None
    total_family_members: Optional[float] = None
    siblings: List[SiblingRecord] = Field(default_factory=list)
    spouse: Optional[SpouseRecord] = None
    children: List[ChildRecord] = Field(default_factory=list)

    # Job
    department: str = ""
    designation: str = ""
    joining_date: Optional[date] = None
    blood_group: Optional[str] = None

    # Bank & nominee
    bank_name: str = ""
    account_number: str = ""
    ifsc_code: str = ""
    nominee_name: str = ""

    # Documents
    aadhaar: List[UploadedDocument] = Field(default_factory=list)
    pan: List[UploadedDocument] = Field(default_factory=list)
    birth_certificate: List[UploadedDocument] = Field(default_factory=list)
    educational_certificates: List[UploadedDocument] = Field(default_factory=list)
    community_certificate: List[UploadedDocument] = Field(default_factory=list)
    income_certificate: List[UploadedDocument] = Field(default_factory=list)
    nativity_certificate: List[UploadedDocument] = Field(default_factory=list)

    @model_validator(mode='before')
    @classmethod
    def _keep_active_family_branch(cls, data: Any) -> Any:
        """Drop the family data that belongs to the inactive marital-status branch."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        status = data.get('marital_status', data.get('maritalStatus'))
        if status == MARRIED:
            data.pop('siblings', None)
            if not data.get('spouse'):
                data['spouse'] = {}
        else:
            data.pop('spouse', None)
            data.pop('children', None)
        return data

    @field_validator(*MIN_LENGTH_RULES, mode='before')
    @classmethod
    def _min_length(cls, v, info: ValidationInfo):
        min_length, message = MIN_LENGTH_RULES[info.field_name]
        return _require_min_length(v, min_length, message)

    @field_validator(*ENUM_RULES, mode='before')
    @classmethod
    def _enum_choice(cls, v, info: ValidationInfo):
        choices, message = ENUM_RULES[info.field_name]
        return _require_choice(v, choices, message)

    @field_validator(*NUMBER_RULES, mode='before')
    @classmethod
    def _number_minimum(cls, v, info: ValidationInfo):
        minimum, message = NUMBER_RULES[info.field_name]
        return _require_number(v, minimum, message)

    @field_validator(*DATE_RULES, mode='before')
    @classmethod
    def _parseable_date(cls, v, info: ValidationInfo):
        parsed = parse_date(v)
        if parsed is None:
            raise ValueError(DATE_RULES[info.field_name])
        return parsed

    @field_validator('contact_number', mode='before')
    @classmethod
    def _phone_digits(cls, v):
        text = _as_text(v)
        if not PHONE_PATTERN.match(text):
            raise ValueError("Must be 10-15 digits")
        return text

    @field_validator('email', mode='before')
    @classmethod
    def _email_shape(cls, v):
        # Same checks as EmailStr, reported with the form's own message
        try:
            _, normalized = validate_email(_as_text(v).strip())
        except ValueError:
            raise ValueError("Invalid email address") from None
        return normalized

    @field_validator('ifsc_code', mode='before')
    @classmethod
    def _ifsc_pattern(cls, v):
        text = _as_text(v)
        if not IFSC_PATTERN.match(text):
            raise ValueError("Invalid IFSC Code")
        return text

    @field_validator('blood_group', mode='before')
    @classmethod
    def _blood_group_choice(cls, v):
        if v == BLOOD_GROUP_OTHER:
            raise ValueError("Please specify your blood group")
        normalized = _as_text(v).strip().upper().replace(" ", "")
        return _require_choice(normalized, BLOOD_GROUPS, "Blood Group is required")

    @field_validator(*ATTACHMENT_SLOTS, mode='before')
    @classmethod
    def _attachment_files(cls, v, info: ValidationInfo):
        files = coerce_uploads(v)
        max_size_mb = (info.context or {}).get('max_file_size_mb', MAX_FILE_SIZE_MB)
        message = validate_files(files, ATTACHMENT_SLOTS[info.field_name], max_size_mb)
        if message:
            raise ValueError(message)
        return files

    def attachments(self) -> Dict[str, List[UploadedDocument]]:
        """Attachment slot name -> files, in form order."""
        return {name: getattr(self, name) for name in ATTACHMENT_SLOTS}


def _error_message(error: Dict[str, Any]) -> str:
    """Message raised by a rule, without pydantic's 'Value error, ' prefix."""
    original = (error.get('ctx') or {}).get('error')
    if original is not None:
        return str(original)
    return error.get('msg', 'Invalid value')


def errors_by_field(exc: ValidationError) -> Dict[str, str]:
    """Flatten a ValidationError into {field_path: first message}."""
    field_errors: Dict[str, str] = {}
    for error in exc.errors():
        field_path = '.'.join(str(loc) for loc in error.get('loc', ())) or 'general'
        field_errors.setdefault(field_path, _error_message(error))
    return field_errors


def build_application(form_data: Dict[str, Any], max_file_size_mb: float = MAX_FILE_SIZE_MB) -> EmployeeApplication:
    """
    Validate form data and return the application record.

    Raises:
        ValidationError: If any field is invalid
    """
    return EmployeeApplication.model_validate(
        form_data, context={'max_file_size_mb': max_file_size_mb}
    )


def validate_application_data(form_data: Dict[str, Any], max_file_size_mb: float = MAX_FILE_SIZE_MB) -> Dict[str, str]:
    """
    Validate form data against the onboarding schema.

    Args:
        form_data: Field values keyed by snake_case field name
        max_file_size_mb: Per-file upload ceiling

    Returns:
        Empty dict when valid, otherwise {field_path: message}
    """
    try:
        build_application(form_data, max_file_size_mb)
        return {}
    except ValidationError as e:
        field_errors = errors_by_field(e)
        logger.info(f"Validation failed for {len(field_errors)} field(s): {sorted(field_errors)}")
        return field_errors
