# File: src/lms_assessment/schemas/submission.py

from pydantic import BaseModel
from typing import Optional, List, Dict
from uuid import UUID
from decimal import Decimal
from datetime import datetime

from ..models.submission import SubmissionStatus
from .attachment import AttachmentCreate

class SubmissionCreate(BaseModel):
    content: Optional[str] = None
    mcq_answers: Optional[List[int]] = None
    attachments: List[AttachmentCreate] = []

class SubmissionRead(BaseModel):
    id: UUID
    assignment_id: UUID
    student_id: UUID
    content: Optional[str]
    mcq_answers: Optional[List[int]]
    grade: Optional[Decimal]
    feedback: Optional[str]
    status: SubmissionStatus
    submitted_at: Optional[datetime]
    graded_at: Optional[datetime]
    graded_by: Optional[UUID]
    returned_at: Optional[datetime]
    is_late: bool
    attempt_number: int

    class Config:
        from_attributes = True

class SubmissionSummary(BaseModel):
    assignment_id: UUID
    total: int
    by_status: Dict[SubmissionStatus, int]
    late: int
    graded: int
    average_grade: Optional[Decimal] = None
