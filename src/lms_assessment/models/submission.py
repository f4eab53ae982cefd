# File: src/lms_assessment/models/submission.py
from sqlmodel import SQLModel, Field, Relationship, JSON
from sqlalchemy import Column, DateTime, Text, UniqueConstraint
import uuid
from decimal import Decimal
from datetime import datetime
from enum import Enum
from typing import Optional, TYPE_CHECKING

from ..utils.time import utc_now

if TYPE_CHECKING:
    from .assignment import Assignment


class SubmissionStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    GRADED = "graded"
    RETURNED = "returned"


class Submission(SQLModel, table=True):
    __tablename__ = "submissions"
    __table_args__ = (
        # one row per (assignment, student); resubmissions reuse it
        UniqueConstraint("assignment_id", "student_id", name="unique_assignment_student"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    assignment_id: uuid.UUID = Field(foreign_key="assignments.id", index=True)
    student_id: uuid.UUID = Field(index=True)

    content: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    mcq_answers: Optional[list] = Field(default=None, sa_type=JSON)

    grade: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2, nullable=True)
    feedback: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    status: SubmissionStatus = Field(default=SubmissionStatus.DRAFT, index=True)

    submitted_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime)
    graded_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    graded_by: Optional[uuid.UUID] = Field(default=None, index=True)  # None when auto-graded
    returned_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    is_late: bool = Field(default=False)
    attempt_number: int = Field(default=1)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    deleted_at: Optional[datetime] = Field(default=None, nullable=True, sa_type=DateTime)

    assignment: "Assignment" = Relationship(back_populates="submissions")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def has_been_submitted(self) -> bool:
        return self.submitted_at is not None
