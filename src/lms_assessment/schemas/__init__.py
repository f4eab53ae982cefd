# src/lms_assessment/schemas/__init__.py

from .assignment import AssignmentCreate, AssignmentUpdate, AssignmentRead, McqQuestion, McqQuestionForStudent
from .attachment import AttachmentCreate, AttachmentRead
from .submission import SubmissionCreate, SubmissionRead, SubmissionSummary
from .grade import GradeCreate, GradeUpdate, GradeRead, SubjectAverage, SubjectStatistics

__all__ = [
    "AssignmentCreate",
    "AssignmentUpdate",
    "AssignmentRead",
    "McqQuestion",
    "McqQuestionForStudent",
    "AttachmentCreate",
    "AttachmentRead",
    "SubmissionCreate",
    "SubmissionRead",
    "SubmissionSummary",
    "GradeCreate",
    "GradeUpdate",
    "GradeRead",
    "SubjectAverage",
    "SubjectStatistics",
]
