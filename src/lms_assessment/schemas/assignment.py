# File: src/lms_assessment/schemas/assignment.py

from pydantic import BaseModel
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
from datetime import datetime

from ..models.assignment import AssignmentType, AssignmentStatus

# --- Question bank ---

class McqQuestion(BaseModel):
    question_text: str
    options: List[str]
    correct_option_index: int

# --- Assignment Schemas ---

class AssignmentCreate(BaseModel):
    class_id: UUID
    subject_id: UUID
    title: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    type: AssignmentType = AssignmentType.ESSAY
    due_date: datetime
    max_grade: Decimal = Decimal("10.00")
    status: AssignmentStatus = AssignmentStatus.DRAFT
    auto_grade: bool = False
    mcq_questions: List[McqQuestion] = []
    allowed_file_types: Optional[str] = None
    max_file_size_bytes: Optional[int] = None

class AssignmentUpdate(BaseModel):
    # status is changed only through publish/close
    title: Optional[str] = None
    description: Optional[str] = None
    instructions: Optional[str] = None
    type: Optional[AssignmentType] = None
    due_date: Optional[datetime] = None
    max_grade: Optional[Decimal] = None
    auto_grade: Optional[bool] = None
    mcq_questions: Optional[List[McqQuestion]] = None
    allowed_file_types: Optional[str] = None
    max_file_size_bytes: Optional[int] = None

class AssignmentRead(BaseModel):
    id: UUID
    class_id: UUID
    subject_id: UUID
    created_by: UUID
    title: str
    description: Optional[str]
    instructions: Optional[str]
    type: AssignmentType
    due_date: datetime
    max_grade: Decimal
    status: AssignmentStatus
    auto_grade: bool
    allowed_file_types: Optional[str]
    max_file_size_bytes: int
    question_count: int

    class Config:
        from_attributes = True

class McqQuestionForStudent(BaseModel):
    """A question as shown to students, without the answer key."""
    question_text: str
    options: List[str]
