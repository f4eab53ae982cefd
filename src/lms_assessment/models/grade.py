# File: src/lms_assessment/models/grade.py
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text, Index
import uuid
from decimal import Decimal
from datetime import datetime
from enum import Enum
from typing import Optional

from ..utils.time import utc_now


class GradeType(str, Enum):
    HOMEWORK = "homework"
    QUIZ = "quiz"
    MIDTERM = "midterm"
    FINAL = "final"
    ASSIGNMENT = "assignment"
    PARTICIPATION = "participation"


class Term(str, Enum):
    FIRST = "1"
    SECOND = "2"
    FINAL = "final"


# Weight used when a grade is recorded without an explicit one
DEFAULT_WEIGHTS = {
    GradeType.HOMEWORK: Decimal("1.0"),
    GradeType.QUIZ: Decimal("1.5"),
    GradeType.ASSIGNMENT: Decimal("2.0"),
    GradeType.MIDTERM: Decimal("2.5"),
    GradeType.FINAL: Decimal("3.0"),
    GradeType.PARTICIPATION: Decimal("0.5"),
}

PASSING_GRADE = Decimal("5.0")

# (lower bound, rank), checked top-down
GRADE_RANKS = [
    (Decimal("9.0"), "excellent"),
    (Decimal("8.0"), "good"),
    (Decimal("6.5"), "fair"),
    (Decimal("5.0"), "average"),
]


def rank_for(value: Decimal) -> str:
    for lower_bound, rank in GRADE_RANKS:
        if value >= lower_bound:
            return rank
    return "poor"


class Grade(SQLModel, table=True):
    __tablename__ = "grades"
    __table_args__ = (
        Index("idx_grade_lookup", "student_id", "subject_id", "class_id", "term", "academic_year"),
        Index("idx_class_subject_term", "class_id", "subject_id", "term"),
        Index("idx_student_term_year", "student_id", "term", "academic_year"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    student_id: uuid.UUID
    subject_id: uuid.UUID
    class_id: uuid.UUID

    grade_value: Decimal = Field(max_digits=4, decimal_places=2)
    grade_type: GradeType = Field(default=GradeType.HOMEWORK)
    weight: Decimal = Field(max_digits=5, decimal_places=2)
    term: Term = Field(default=Term.FIRST)
    academic_year: str = Field(max_length=9)
    remarks: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    recorded_by: uuid.UUID = Field(index=True)
    recorded_at: datetime = Field(index=True, sa_type=DateTime)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    deleted_at: Optional[datetime] = Field(default=None, nullable=True, sa_type=DateTime)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def weighted_value(self) -> Decimal:
        return Decimal(self.grade_value) * Decimal(self.weight)

    def is_passing(self) -> bool:
        return Decimal(self.grade_value) >= PASSING_GRADE

    def rank(self) -> str:
        return rank_for(Decimal(self.grade_value))
