"""
Test fixtures for the onboarding form tests.

Provides reusable form data, fake uploads and a session-state double.
"""

from datetime import date
from typing import Any, Dict, List

from onboarding.attachments import DOCUMENT_SLOT_NAMES

MB = 1024 * 1024


class FakeUpload:
    """Stand-in for Streamlit's UploadedFile."""

    def __init__(self, name: str, type: str, size: int, data: bytes = b"content"):
        self.name = name
        self.type = type
        self.size = size
        self._data = data

    def getvalue(self) -> bytes:
        return self._data


class MockSessionState(dict):
    """Mock session state that supports both dict and attribute access."""

    def __setattr__(self, key, value):
        self[key] = value

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'")


class ApplicationFixtures:
    """Form data for the onboarding scenarios."""

    @staticmethod
    def photo(size: int = 2 * MB) -> FakeUpload:
        return FakeUpload("photo.jpg", "image/jpeg", size, b"\xff\xd8jpeg")

    @staticmethod
    def document(slot_name: str, size: int = 200 * 1024) -> FakeUpload:
        return FakeUpload(f"{slot_name}.pdf", "application/pdf", size, b"%PDF-1.4")

    @staticmethod
    def uploads() -> Dict[str, List[FakeUpload]]:
        files = {'photo': [ApplicationFixtures.photo()]}
        for slot_name in DOCUMENT_SLOT_NAMES:
            files[slot_name] = [ApplicationFixtures.document(slot_name)]
        return files

    @staticmethod
    def scalar_fields() -> Dict[str, Any]:
        return {
            'full_name': 'Ravi Kumar',
            'dob': date(1995, 4, 12),
            'gender': 'Male',
            'contact_number': '9876543210',
            'emergency_contact': '9123456780',
            'contact_address': '12 Gandhi Street, T Nagar, Chennai 600017',
            'permanent_address': '4 Temple Road, Madurai 625001',
            'email': 'ravi.kumar@example.com',
            'father_name': 'Suresh Kumar',
            'father_age': 58,
            'mother_name': 'Lakshmi',
            'mother_age': 52,
            'total_family_members': 4,
            'department': 'Engineering',
            'designation': 'Developer',
            'joining_date': date(2024, 6, 1),
            'blood_group': 'O+',
            'bank_name': 'HDFC Bank',
            'account_number': '1234567890',
            'ifsc_code': 'HDFC0001234',
            'nominee_name': 'Lakshmi',
        }

    @staticmethod
    def single_form() -> Dict[str, Any]:
        """A complete, valid form for an unmarried applicant with one sibling."""
        data = ApplicationFixtures.scalar_fields()
        data.update({
            'marital_status': 'Single',
            'siblings': [
                {'name': 'Anu', 'marital_status': 'Single', 'employment_status': 'Employed'},
            ],
        })
        data.update(ApplicationFixtures.uploads())
        return data

    @staticmethod
    def married_form() -> Dict[str, Any]:
        """A complete, valid form for a married applicant with one child."""
        data = ApplicationFixtures.scalar_fields()
        data.update({
            'marital_status': 'Married',
            'spouse': {'name': 'Priya', 'employment_status': 'Unemployed'},
            'children': [
                {'name': 'Arjun', 'gender': 'Male', 'dob': date(2020, 1, 15)},
            ],
        })
        data.update(ApplicationFixtures.uploads())
        return data

