"""
Submission handler for the onboarding form.
Handles validation, multipart payload construction and the single POST
to the onboarding endpoint.
"""

import json
import logging
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Dict, List, Tuple

import requests
from pydantic import ValidationError

from .attachments import ATTACHMENT_SLOTS, MAX_FILE_SIZE_MB
from .config_loader import get_config_value, DEFAULT_ENDPOINT
from .exceptions import SubmissionError
from .form_data_collector import collect_all_form_data
from .notifications import Notify
from .schema import EmployeeApplication, build_application, errors_by_field
from .session_manager import SessionManager

# Configure logging
logger = logging.getLogger(__name__)

DATA_PART = 'data'

FileParts = List[Tuple[str, Tuple[str, bytes, str]]]


def _sanitize_for_json(obj: Any) -> Any:
    """
    Recursively sanitize an object for JSON serialization.
    Converts date, datetime to ISO format strings, Decimal to float and
    whole-number floats to ints (ages arrive as 45.0 from numeric coercion).
    """
    if isinstance(obj, dict):
        return {k: _sanitize_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_sanitize_for_json(item) for item in obj]
    elif isinstance(obj, (datetime, date)):
        return obj.isoformat()
    elif isinstance(obj, Decimal):
        obj = float(obj)

    if isinstance(obj, float):
        # Fix floating point precision issues (e.g., 242.98000000000002 → 242.98)
        rounded = round(obj, 10)
        if rounded == int(rounded):
            return int(rounded)
        return rounded
    return obj


def build_submission_parts(application: EmployeeApplication) -> Tuple[Dict[str, Any], FileParts]:
    """
    Partition a validated application into JSON text and file parts.

    Returns:
        (text_data, files) where text_data uses the camelCase wire keys and
        files is a list of (slot_key, (filename, bytes, content_type)). The
        multi-file slot repeats its key once per file.
    """
    text_data = application.model_dump(
        by_alias=True,
        exclude=set(ATTACHMENT_SLOTS),
        exclude_none=True,
    )

    # Only the active family branch is sent
    if application.marital_status == 'Married':
        text_data.pop('siblings', None)
    else:
        text_data.pop('spouse', None)
        text_data.pop('children', None)

    text_data = _sanitize_for_json(text_data)

    files: FileParts = []
    field_aliases = EmployeeApplication.model_fields
    for slot_name, documents in application.attachments().items():
        slot = ATTACHMENT_SLOTS[slot_name]
        part_name = field_aliases[slot_name].alias or slot_name
        selected = documents if slot.multiple else documents[:1]
        for document in selected:
            files.append((part_name, document.as_request_file()))

    return text_data, files


class SubmissionHandler:
    """Handles the submission workflow for onboarding applications."""

    @staticmethod
    def get_endpoint() -> str:
        return get_config_value('submission', 'endpoint', DEFAULT_ENDPOINT)

    @staticmethod
    def submit(application: EmployeeApplication, endpoint: str, http=requests) -> Dict[str, Any]:
        """
        POST the application as multipart form data.

        Args:
            application: Validated application
            endpoint: Target URL
            http: Object with a requests-compatible post() (module or Session)

        Returns:
            Decoded JSON response body

        Raises:
            SubmissionError: On transport failure, non-2xx status or non-JSON body
        """
        text_data, files = build_submission_parts(application)
        logger.info(f"Submitting application to {endpoint}: {len(text_data)} text field(s), {len(files)} file(s)")

        try:
            response = http.post(
                endpoint,
                data={DATA_PART: json.dumps(text_data)},
                files=files,
            )
        except requests.RequestException as e:
            logger.error(f"Submission transport error: {e}", exc_info=True)
            raise SubmissionError(endpoint, original_error=e) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Submission rejected with status {response.status_code}")
            raise SubmissionError(endpoint, status_code=response.status_code)

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"Submission response was not JSON: {e}")
            raise SubmissionError(endpoint, status_code=response.status_code, original_error=e,
                                  message="Server returned an invalid response") from e

        logger.info(f"Server response: {result}")
        return result

    @staticmethod
    def validate_and_submit(
        form_data: Dict[str, Any],
        endpoint: str,
        max_file_size_mb: float = MAX_FILE_SIZE_MB,
        http=requests
    ) -> Tuple[bool, Dict[str, str]]:
        """
        Validate form data and submit it.

        Returns:
            Tuple of (success, field_errors); field_errors is empty on success

        Raises:
            SubmissionError: If validation passed but the request failed
        """
        try:
            application = build_application(form_data, max_file_size_mb)
        except ValidationError as e:
            field_errors = errors_by_field(e)
            logger.warning(f"Submission blocked: {len(field_errors)} validation error(s)")
            return False, field_errors

        SubmissionHandler.submit(application, endpoint, http=http)
        return True, {}

    @staticmethod
    def handle_streamlit_submission(http=requests) -> bool:
        """
        Run one submission from the Streamlit form.

        Runs only after the submit button raised the busy flag. Collects
        widget values, validates, submits, posts a notice and resets the
        form on success. The flag is lowered when the attempt finishes.
        """
        if not SessionManager.is_submitting():
            return False

        try:
            SessionManager.clear_validation_errors()
            form_data = collect_all_form_data()
            max_size = get_config_value('uploads', 'max_file_size_mb', MAX_FILE_SIZE_MB)

            success, field_errors = SubmissionHandler.validate_and_submit(
                form_data, SubmissionHandler.get_endpoint(), max_size, http=http
            )

            if not success:
                SessionManager.set_validation_errors(field_errors)
                Notify.error("Please fix the highlighted fields before submitting.")
                return False

            SessionManager.reset_form()
            Notify.success(get_config_value(
                'submission', 'success_message', 'Application submitted successfully!'
            ))
            return True

        except SubmissionError as e:
            logger.error(f"Submission failed: {e}")
            Notify.error(get_config_value(
                'submission', 'failure_message', 'Something went wrong. Please try again.'
            ))
            return False

        finally:
            SessionManager.end_submission()
