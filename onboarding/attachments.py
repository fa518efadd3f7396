"""
Attachment slots and uploaded-file validation for the onboarding form.

Each document slot declares its label, the MIME types and extensions it
accepts and whether it takes more than one file. Files are held in memory
as UploadedDocument instances so they can be validated and re-sent in the
multipart submission.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE = MAX_FILE_SIZE_MB * 1024 * 1024

ACCEPTED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")
ACCEPTED_DOC_TYPES = ("application/pdf", "image/jpeg", "image/jpg", "image/png")

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "webp")
DOC_EXTENSIONS = ("pdf", "jpg", "jpeg", "png")

FILE_REQUIRED_MESSAGE = "File is required"
INVALID_FILE_TYPE_MESSAGE = "Invalid file type"


@dataclass(frozen=True)
class AttachmentSlot:
    """A named document slot on the form."""
    name: str
    label: str
    accepted_types: Tuple[str, ...]
    extensions: Tuple[str, ...]
    multiple: bool = False
    required: bool = True


ATTACHMENT_SLOTS: Dict[str, AttachmentSlot] = {
    slot.name: slot for slot in (
        AttachmentSlot("photo", "Passport Size Photo", ACCEPTED_IMAGE_TYPES, IMAGE_EXTENSIONS),
        AttachmentSlot("aadhaar", "Aadhaar Card", ACCEPTED_DOC_TYPES, DOC_EXTENSIONS),
        AttachmentSlot("pan", "PAN Card", ACCEPTED_DOC_TYPES, DOC_EXTENSIONS),
        AttachmentSlot("birth_certificate", "Birth Certificate", ACCEPTED_DOC_TYPES, DOC_EXTENSIONS),
        AttachmentSlot(
            "educational_certificates",
            "Educational Certificates (Combine all into one PDF: 10th, 12th, College "
            "Marksheet, TC, Degree, Consolidate, Provisional)",
            ACCEPTED_DOC_TYPES,
            DOC_EXTENSIONS,
            multiple=True,
        ),
        AttachmentSlot("community_certificate", "Community Certificate", ACCEPTED_DOC_TYPES, DOC_EXTENSIONS),
        AttachmentSlot("income_certificate", "Income Certificate", ACCEPTED_DOC_TYPES, DOC_EXTENSIONS),
        AttachmentSlot("nativity_certificate", "Nativity Certificate", ACCEPTED_DOC_TYPES, DOC_EXTENSIONS),
    )
}

DOCUMENT_SLOT_NAMES = [name for name in ATTACHMENT_SLOTS if name != "photo"]


class UploadedDocument(BaseModel):
    """One uploaded file held in memory."""

    model_config = ConfigDict(frozen=True)

    name: str
    content_type: str
    size: int
    data: bytes = b""

    @classmethod
    def from_upload(cls, upload: Any) -> "UploadedDocument":
        """
        Build a document from a Streamlit UploadedFile or any object exposing
        name, type/content_type, size and getvalue().
        """
        if isinstance(upload, cls):
            return upload

        data = upload.getvalue() if hasattr(upload, "getvalue") else b""
        content_type = getattr(upload, "type", None) or getattr(upload, "content_type", None) or ""
        size = getattr(upload, "size", None)
        if size is None:
            size = len(data)

        return cls(name=upload.name, content_type=content_type, size=int(size), data=data)

    @property
    def size_mb(self) -> float:
        return self.size / (1024 * 1024)

    def as_request_file(self) -> Tuple[str, bytes, str]:
        """Tuple in the shape requests expects for a multipart file part."""
        return self.name, self.data, self.content_type


def max_file_size_message(max_size_mb: float = MAX_FILE_SIZE_MB) -> str:
    """Human-readable size limit message, e.g. 'Max file size is 5MB'."""
    return f"Max file size is {max_size_mb:g}MB"


def coerce_uploads(value: Any) -> List[UploadedDocument]:
    """Normalize None, a single upload or a list of uploads to a list of documents."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [UploadedDocument.from_upload(item) for item in value if item is not None]
    return [UploadedDocument.from_upload(value)]


def validate_files(
    files: List[UploadedDocument],
    slot: AttachmentSlot,
    max_size_mb: float = MAX_FILE_SIZE_MB
) -> Optional[str]:
    """
    Validate the files of one slot.

    Checks presence, then the size of every file, then the type of every
    file. Returns the first failing message or None when the slot is valid.
    """
    if not files:
        return FILE_REQUIRED_MESSAGE if slot.required else None

    max_size = max_size_mb * 1024 * 1024
    if any(f.size > max_size for f in files):
        return max_file_size_message(max_size_mb)

    if any(f.content_type not in slot.accepted_types for f in files):
        rejected = [f.content_type for f in files if f.content_type not in slot.accepted_types]
        logger.debug(f"Rejected content types for {slot.name}: {rejected}")
        return INVALID_FILE_TYPE_MESSAGE

    return None


def describe_files(files: List[UploadedDocument]) -> List[str]:
    """One 'name (x.xx MB)' line per file, as listed under each uploader."""
    return [f"{f.name} ({f.size_mb:.2f} MB)" for f in files]
