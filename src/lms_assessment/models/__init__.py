# src/lms_assessment/models/__init__.py

# This file centralizes all model imports, ensuring that SQLAlchemy's metadata
# is aware of every table before any operations are performed.

# --- Catalog ---
from .assignment import Assignment, AssignmentType, AssignmentStatus

# --- Student work (depends on Assignment) ---
from .submission import Submission, SubmissionStatus
from .attachment import (
    Attachment,
    AttachmentOwner,
    AssignmentOwner,
    LessonOwner,
    OwnerType,
    SubmissionOwner,
)

# --- Ledger ---
from .grade import Grade, GradeType, Term, DEFAULT_WEIGHTS


# The __all__ list defines the public API for the 'models' package.
__all__ = [
    "Assignment",
    "AssignmentType",
    "AssignmentStatus",
    "Submission",
    "SubmissionStatus",
    "Attachment",
    "AttachmentOwner",
    "AssignmentOwner",
    "LessonOwner",
    "OwnerType",
    "SubmissionOwner",
    "Grade",
    "GradeType",
    "Term",
    "DEFAULT_WEIGHTS",
]
