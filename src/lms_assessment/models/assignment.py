# File: src/lms_assessment/models/assignment.py
from sqlmodel import SQLModel, Field, Relationship, JSON
from sqlalchemy import Column, DateTime, Text, Index
import uuid
from decimal import Decimal
from datetime import datetime
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

from ..config.settings import DEFAULT_MAX_FILE_SIZE_BYTES
from ..utils.time import utc_now

if TYPE_CHECKING:
    from .submission import Submission


class AssignmentType(str, Enum):
    ESSAY = "essay"
    MCQ = "mcq"
    FILE_UPLOAD = "file_upload"


class AssignmentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"


class Assignment(SQLModel, table=True):
    __tablename__ = "assignments"
    __table_args__ = (
        Index("idx_assignment_class_subject", "class_id", "subject_id"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    class_id: uuid.UUID = Field(index=True)
    subject_id: uuid.UUID = Field(index=True)
    created_by: uuid.UUID = Field(index=True)

    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    instructions: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    type: AssignmentType = Field(default=AssignmentType.ESSAY, index=True)
    due_date: datetime = Field(index=True, sa_type=DateTime)
    max_grade: Decimal = Field(default=Decimal("10.00"), max_digits=5, decimal_places=2)
    status: AssignmentStatus = Field(default=AssignmentStatus.DRAFT, index=True)
    auto_grade: bool = Field(default=False)

    # [{"question_text": ..., "options": [...], "correct_option_index": 0}, ...]
    mcq_questions: list = Field(sa_type=JSON, default_factory=list)

    # comma separated extensions, e.g. "pdf,doc,docx"
    allowed_file_types: Optional[str] = Field(default=None, max_length=500)
    max_file_size_bytes: int = Field(default=DEFAULT_MAX_FILE_SIZE_BYTES)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    deleted_at: Optional[datetime] = Field(default=None, nullable=True, sa_type=DateTime)

    submissions: List["Submission"] = Relationship(back_populates="assignment")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def question_count(self) -> int:
        return len(self.mcq_questions or [])

    def allowed_extensions(self) -> Optional[set[str]]:
        """None means every extension is accepted."""
        if not self.allowed_file_types:
            return None
        return {
            ext.strip().lower().lstrip(".")
            for ext in self.allowed_file_types.split(",")
            if ext.strip()
        }
