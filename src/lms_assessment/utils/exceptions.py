# File: src/lms_assessment/utils/exceptions.py
"""
Errors raised by the assessment engine.

Each error carries a human readable ``detail``, the offending ``field`` when
there is one, and a ``status_code`` hint the request layer can use when it
turns the error into a response.
"""
from typing import Optional


class AssessmentError(Exception):
    status_code: int = 400
    code: str = "ASSESSMENT_ERROR"

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.field = field

    def to_dict(self) -> dict:
        return {"error": self.code, "field": self.field, "detail": self.detail}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(detail={self.detail!r}, field={self.field!r})"


class ValidationError(AssessmentError):
    """Malformed or out-of-range input. The caller can fix it and retry."""

    status_code = 422
    code = "VALIDATION_FAILED"


class NotFoundError(AssessmentError):
    """The assignment, submission or grade does not exist or was soft-deleted."""

    status_code = 404
    code = "NOT_FOUND"


class InvalidStateError(AssessmentError):
    status_code = 409
    code = "INVALID_STATE"


class AssignmentClosedError(InvalidStateError):
    """Raised when a student tries to submit to, or a teacher edits, a closed assignment."""

    code = "ASSIGNMENT_CLOSED"
