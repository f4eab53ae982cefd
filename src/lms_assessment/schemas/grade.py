# File: src/lms_assessment/schemas/grade.py

from pydantic import BaseModel
from typing import Optional, Dict
from uuid import UUID
from decimal import Decimal
from datetime import datetime

from ..models.grade import GradeType, Term

# --- Ledger Schemas ---

class GradeCreate(BaseModel):
    student_id: UUID
    subject_id: UUID
    class_id: UUID
    grade_value: Decimal
    grade_type: GradeType = GradeType.HOMEWORK
    weight: Optional[Decimal] = None          # derived from grade_type when omitted
    term: Term = Term.FIRST
    academic_year: Optional[str] = None       # derived from the clock when omitted
    remarks: Optional[str] = None

class GradeUpdate(BaseModel):
    grade_value: Optional[Decimal] = None
    weight: Optional[Decimal] = None
    remarks: Optional[str] = None
    is_active: Optional[bool] = None

class GradeRead(BaseModel):
    id: UUID
    student_id: UUID
    subject_id: UUID
    class_id: UUID
    grade_value: Decimal
    grade_type: GradeType
    weight: Decimal
    term: Term
    academic_year: str
    remarks: Optional[str]
    recorded_by: UUID
    recorded_at: datetime
    is_active: bool

    class Config:
        from_attributes = True

# --- Aggregation Schemas ---

class SubjectAverage(BaseModel):
    subject_id: UUID
    average: Decimal
    total_weight: Decimal
    entries: int

class SubjectStatistics(BaseModel):
    subject_id: UUID
    average: Decimal
    minimum: Decimal
    maximum: Decimal
    entries: int
    passing: int
    distribution: Dict[str, int]
