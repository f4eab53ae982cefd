# File: src/lms_assessment/controllers/grade_controller.py

import logging
import re
import uuid
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from sqlmodel import Session, select

from ..db.session import commit
from ..models.grade import DEFAULT_WEIGHTS, Grade, GradeType, Term
from ..schemas.grade import GradeCreate, GradeUpdate
from ..utils.auto_grader import fits_two_places
from ..utils.exceptions import NotFoundError, ValidationError
from ..utils.time import Clock, derive_academic_year, storage_now, system_clock

logger = logging.getLogger(__name__)

ACADEMIC_YEAR_PATTERN = re.compile(r"^\d{4}-\d{4}$")
MAX_REMARKS_LENGTH = 1000


# --- Validation ---

def _as_decimal(value, field: str) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number.", field=field)
    if not number.is_finite():
        raise ValidationError(f"{field} must be a finite number.", field=field)
    return number


def _validate_grade_value(value) -> Decimal:
    grade_value = _as_decimal(value, "grade_value")
    if not (Decimal("0") <= grade_value <= Decimal("10")):
        raise ValidationError("Grade value must be between 0 and 10.", field="grade_value")
    if not fits_two_places(grade_value):
        raise ValidationError("Grade value can have at most two decimal places.", field="grade_value")
    return grade_value


def _validate_weight(value) -> Decimal:
    weight = _as_decimal(value, "weight")
    if not (Decimal("0") < weight <= Decimal("100")):
        raise ValidationError("Weight must be greater than 0 and at most 100.", field="weight")
    if not fits_two_places(weight):
        raise ValidationError("Weight can have at most two decimal places.", field="weight")
    return weight


def validate_academic_year(value: Optional[str]) -> str:
    if not value or not ACADEMIC_YEAR_PATTERN.match(value):
        raise ValidationError("Academic year must use the format YYYY-YYYY (e.g. 2024-2025).", field="academic_year")
    return value


def _validate_remarks(remarks: Optional[str]) -> None:
    if remarks is not None and len(remarks) > MAX_REMARKS_LENGTH:
        raise ValidationError(f"Remarks cannot exceed {MAX_REMARKS_LENGTH} characters.", field="remarks")


def _find_active_entry(
    db: Session,
    student_id: uuid.UUID,
    subject_id: uuid.UUID,
    class_id: uuid.UUID,
    grade_type: GradeType,
    term: Term,
    academic_year: str,
) -> Optional[Grade]:
    return db.exec(
        select(Grade).where(
            Grade.student_id == student_id,
            Grade.subject_id == subject_id,
            Grade.class_id == class_id,
            Grade.grade_type == GradeType(grade_type),
            Grade.term == Term(term),
            Grade.academic_year == academic_year,
            Grade.is_active == True,  # noqa: E712
            Grade.deleted_at.is_(None),
        )
    ).first()


def _reject_duplicate(existing: Grade) -> None:
    logger.warning(
        f"Rejected duplicate {existing.grade_type.value} grade for student {existing.student_id}: "
        f"entry {existing.id} already covers term {existing.term.value} of {existing.academic_year}"
    )
    raise ValidationError(
        f"A {existing.grade_type.value} grade for this student already exists in term {existing.term.value} "
        f"of {existing.academic_year}. Amend it instead of recording a new one.",
        field="grade_type",
    )


def apply_ledger_defaults(payload: GradeCreate, clock: Clock) -> GradeCreate:
    """
    Fill in what a teacher may leave out when recording a grade: the weight
    (from the grade type) and the academic year (from the clock, with the
    year starting in September). Explicit values are kept as given.
    """
    updates = {}
    if payload.weight is None:
        updates["weight"] = DEFAULT_WEIGHTS[GradeType(payload.grade_type)]
    if not payload.academic_year:
        updates["academic_year"] = derive_academic_year(clock.now())
    return payload.model_copy(update=updates) if updates else payload


# --- Ledger operations ---

def record(
    db: Session,
    payload: GradeCreate,
    recorded_by: uuid.UUID,
    clock: Clock = system_clock,
) -> Grade:
    logger.info(
        f"Recording {payload.grade_type} grade for student {payload.student_id}, "
        f"subject {payload.subject_id}, class {payload.class_id}"
    )
    entry = apply_ledger_defaults(payload, clock)

    grade_value = _validate_grade_value(entry.grade_value)
    weight = _validate_weight(entry.weight)
    academic_year = validate_academic_year(entry.academic_year)
    _validate_remarks(entry.remarks)

    # one active entry per student, subject, class, type, term and year
    existing = _find_active_entry(
        db, entry.student_id, entry.subject_id, entry.class_id, entry.grade_type, entry.term, academic_year
    )
    if existing:
        _reject_duplicate(existing)

    now = storage_now(clock)
    grade = Grade(
        student_id=entry.student_id,
        subject_id=entry.subject_id,
        class_id=entry.class_id,
        grade_value=grade_value,
        grade_type=GradeType(entry.grade_type),
        weight=weight,
        term=Term(entry.term),
        academic_year=academic_year,
        remarks=entry.remarks,
        recorded_by=recorded_by,
        recorded_at=now,
        created_at=now,
        updated_at=now,
    )
    db.add(grade)
    commit(db, "record grade", grade)
    logger.info(
        f"New grade {grade.id}: student {grade.student_id}, subject {grade.subject_id}, "
        f"value {grade.grade_value} x {grade.weight} ({grade.academic_year}, term {grade.term.value})"
    )
    return grade


def amend(
    db: Session,
    grade_id: uuid.UUID,
    patch: GradeUpdate,
    amended_by: uuid.UUID,
    clock: Clock = system_clock,
) -> Grade:
    grade = get_grade(db, grade_id)
    update_data = patch.model_dump(exclude_unset=True)

    # validate everything before the row is touched
    if update_data.get("grade_value") is not None:
        update_data["grade_value"] = _validate_grade_value(update_data["grade_value"])
    if update_data.get("weight") is not None:
        update_data["weight"] = _validate_weight(update_data["weight"])
    if "remarks" in update_data:
        _validate_remarks(update_data["remarks"])
    if update_data.get("is_active") and not grade.is_active:
        existing = _find_active_entry(
            db, grade.student_id, grade.subject_id, grade.class_id, grade.grade_type, grade.term, grade.academic_year
        )
        if existing:
            _reject_duplicate(existing)

    for key, value in update_data.items():
        if value is None and key != "remarks":
            continue
        setattr(grade, key, value)

    now = storage_now(clock)
    grade.recorded_by = amended_by
    grade.recorded_at = now
    grade.updated_at = now

    db.add(grade)
    commit(db, "amend grade", grade)
    logger.info(f"Grade {grade_id} amended by {amended_by}: new value {grade.grade_value} x {grade.weight}")
    return grade


def retract(db: Session, grade_id: uuid.UUID, clock: Clock = system_clock) -> Grade:
    """Soft-delete a ledger entry; it drops out of every aggregate."""
    grade = get_grade(db, grade_id)
    now = storage_now(clock)
    grade.is_active = False
    grade.deleted_at = now
    grade.updated_at = now
    db.add(grade)
    commit(db, "retract grade", grade)
    logger.info(f"Retracted grade {grade_id}")
    return grade


# --- Lookups ---

def get_grade(db: Session, grade_id: uuid.UUID) -> Grade:
    grade = db.get(Grade, grade_id)
    if not grade or grade.is_deleted:
        logger.warning(f"Grade not found: {grade_id}")
        raise NotFoundError("Grade not found", field="grade_id")
    return grade


def list_grades(
    db: Session,
    student_id: Optional[uuid.UUID] = None,
    class_id: Optional[uuid.UUID] = None,
    subject_id: Optional[uuid.UUID] = None,
    term: Optional[Term] = None,
    academic_year: Optional[str] = None,
    grade_type: Optional[GradeType] = None,
) -> List[Grade]:
    statement = select(Grade).where(Grade.is_active == True, Grade.deleted_at.is_(None))  # noqa: E712
    if student_id:
        statement = statement.where(Grade.student_id == student_id)
    if class_id:
        statement = statement.where(Grade.class_id == class_id)
    if subject_id:
        statement = statement.where(Grade.subject_id == subject_id)
    if term is not None:
        statement = statement.where(Grade.term == Term(term))
    if academic_year is not None:
        statement = statement.where(Grade.academic_year == academic_year)
    if grade_type:
        statement = statement.where(Grade.grade_type == GradeType(grade_type))
    grades = db.exec(statement.order_by(Grade.recorded_at.desc())).all()
    logger.info(f"Found {len(grades)} grades")
    return list(grades)
