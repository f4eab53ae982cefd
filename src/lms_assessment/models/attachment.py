# File: src/lms_assessment/models/attachment.py
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text, Index
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional, Union

from ..utils.time import utc_now


class OwnerType(str, Enum):
    LESSON = "lesson"
    ASSIGNMENT = "assignment"
    SUBMISSION = "submission"


# --- Attachment owners ---
# Each owner kind is its own type so a new kind has to be added here
# (and to OWNER_KINDS) before anything can attach files to it.

@dataclass(frozen=True)
class LessonOwner:
    kind: ClassVar[OwnerType] = OwnerType.LESSON
    id: uuid.UUID


@dataclass(frozen=True)
class AssignmentOwner:
    kind: ClassVar[OwnerType] = OwnerType.ASSIGNMENT
    id: uuid.UUID


@dataclass(frozen=True)
class SubmissionOwner:
    kind: ClassVar[OwnerType] = OwnerType.SUBMISSION
    id: uuid.UUID


AttachmentOwner = Union[LessonOwner, AssignmentOwner, SubmissionOwner]

OWNER_KINDS: dict[OwnerType, type] = {
    OwnerType.LESSON: LessonOwner,
    OwnerType.ASSIGNMENT: AssignmentOwner,
    OwnerType.SUBMISSION: SubmissionOwner,
}


class Attachment(SQLModel, table=True):
    __tablename__ = "attachments"
    __table_args__ = (
        Index("attachments_owner_index", "owner_type", "owner_id"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    owner_type: OwnerType
    owner_id: uuid.UUID

    file_name: str = Field(max_length=255)
    file_url: str = Field(max_length=500)
    file_size: Optional[int] = None
    file_type: Optional[str] = Field(default=None, max_length=50, index=True)
    mime_type: Optional[str] = Field(default=None, max_length=100)
    uploaded_by: uuid.UUID = Field(index=True)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    sort_order: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    deleted_at: Optional[datetime] = Field(default=None, nullable=True, sa_type=DateTime)

    @property
    def owner(self) -> AttachmentOwner:
        return OWNER_KINDS[self.owner_type](id=self.owner_id)
