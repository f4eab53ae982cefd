# File: src/lms_assessment/utils/file.py
import os
import logging
from typing import Iterable

from ..models.assignment import Assignment
from ..schemas.attachment import AttachmentCreate
from .exceptions import ValidationError

# Configure logging
logger = logging.getLogger(__name__)


def file_extension(file_name: str) -> str:
    """Lower-case extension without the dot ("Report.PDF" -> "pdf")."""
    return os.path.splitext(file_name)[1].lower().lstrip(".")


def check_file_policy(assignment: Assignment, attachments: Iterable[AttachmentCreate]) -> None:
    """
    Enforce the assignment's extension allow-list and size limit on every
    attachment reference. Raises ValidationError on the first violation.
    """
    allowed = assignment.allowed_extensions()
    for attachment in attachments:
        ext = file_extension(attachment.file_name)
        if allowed is not None and ext not in allowed:
            logger.warning(
                f"Rejected attachment '{attachment.file_name}' for assignment {assignment.id}: "
                f"extension '{ext}' not in {sorted(allowed)}"
            )
            raise ValidationError(
                f"Invalid file type. Allowed types: {assignment.allowed_file_types}",
                field="attachments",
            )
        if attachment.file_size is not None and attachment.file_size < 0:
            raise ValidationError("File size cannot be negative.", field="attachments")
        if attachment.file_size and attachment.file_size > assignment.max_file_size_bytes:
            logger.warning(
                f"Rejected attachment '{attachment.file_name}' for assignment {assignment.id}: "
                f"{attachment.file_size} bytes exceeds {assignment.max_file_size_bytes}"
            )
            raise ValidationError(
                f"File size too large. Maximum size is {assignment.max_file_size_bytes} bytes.",
                field="attachments",
            )
