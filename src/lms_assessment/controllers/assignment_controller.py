# File: src/lms_assessment/controllers/assignment_controller.py

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence

from sqlmodel import Session, select

from ..db.session import commit
from ..models.assignment import Assignment, AssignmentStatus, AssignmentType
from ..schemas.assignment import (
    AssignmentCreate,
    AssignmentUpdate,
    McqQuestion,
    McqQuestionForStudent,
)
from ..utils.auto_grader import fits_two_places
from ..utils.exceptions import (
    AssignmentClosedError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..utils.time import Clock, storage_now, system_clock, to_storage_time

logger = logging.getLogger(__name__)

MAX_GRADE_CEILING = Decimal("100")


# --- Policy validation ---

def _validate_title(title: Optional[str]) -> None:
    if not title or not title.strip():
        raise ValidationError("Assignment title cannot be empty.", field="title")
    if len(title) > 200:
        raise ValidationError("Assignment title must be 1-200 characters.", field="title")


def _validate_max_grade(max_grade) -> Decimal:
    try:
        value = Decimal(str(max_grade))
    except (InvalidOperation, ValueError):
        raise ValidationError("Max grade must be a number.", field="max_grade")
    if not value.is_finite():
        raise ValidationError("Max grade must be a finite number.", field="max_grade")
    if not (Decimal("0") < value <= MAX_GRADE_CEILING):
        raise ValidationError("Max grade must be greater than 0 and at most 100.", field="max_grade")
    if not fits_two_places(value):
        raise ValidationError("Max grade can have at most two decimal places.", field="max_grade")
    return value


def _validate_question_bank(questions: Sequence[McqQuestion]) -> None:
    if not questions:
        raise ValidationError("Multiple-choice assignments need at least one question.", field="mcq_questions")
    for number, question in enumerate(questions, start=1):
        if not question.question_text or not question.question_text.strip():
            raise ValidationError(f"Question {number} has no text.", field="mcq_questions")
        if len(question.options) < 2:
            raise ValidationError(f"Question {number} needs at least 2 options.", field="mcq_questions")
        if not (0 <= question.correct_option_index < len(question.options)):
            raise ValidationError(
                f"Question {number} has an invalid correct option index: {question.correct_option_index}.",
                field="mcq_questions",
            )


def _validate_file_size(max_file_size_bytes: Optional[int]) -> None:
    if max_file_size_bytes is not None and max_file_size_bytes <= 0:
        raise ValidationError("Max file size must be a positive number of bytes.", field="max_file_size_bytes")


def _dump_questions(questions: Sequence[McqQuestion]) -> list:
    return [question.model_dump() for question in questions]


# --- Lookups ---

def get_assignment(db: Session, assignment_id: uuid.UUID, include_deleted: bool = False) -> Assignment:
    assignment = db.get(Assignment, assignment_id)
    if not assignment or (assignment.is_deleted and not include_deleted):
        logger.warning(f"Assignment not found: {assignment_id}")
        raise NotFoundError("Assignment not found", field="assignment_id")
    return assignment


def list_assignments_for_class(
    db: Session,
    class_id: uuid.UUID,
    subject_id: Optional[uuid.UUID] = None,
    status: Optional[AssignmentStatus] = None,
) -> List[Assignment]:
    statement = select(Assignment).where(
        Assignment.class_id == class_id,
        Assignment.deleted_at.is_(None),
    )
    if subject_id:
        statement = statement.where(Assignment.subject_id == subject_id)
    if status:
        statement = statement.where(Assignment.status == AssignmentStatus(status))
    assignments = db.exec(statement.order_by(Assignment.due_date)).all()
    logger.info(f"Found {len(assignments)} assignments for class {class_id}")
    return list(assignments)


def get_questions_for_student(db: Session, assignment_id: uuid.UUID) -> List[McqQuestionForStudent]:
    """The question bank of a published assignment with the answer key stripped."""
    assignment = get_assignment(db, assignment_id)
    if assignment.status == AssignmentStatus.DRAFT:
        raise InvalidStateError("Assignment has not been published yet.", field="status")
    return [
        McqQuestionForStudent(question_text=q["question_text"], options=q["options"])
        for q in assignment.mcq_questions or []
    ]


# --- Catalog operations ---

def create_assignment(
    db: Session,
    payload: AssignmentCreate,
    created_by: uuid.UUID,
    clock: Clock = system_clock,
) -> Assignment:
    logger.info(f"--- Creating assignment '{payload.title}' for class {payload.class_id} ---")
    now = storage_now(clock)
    due_date = to_storage_time(payload.due_date)

    _validate_title(payload.title)
    # due dates are only checked on creation; edits may move them anywhere
    if due_date <= now:
        logger.warning(f"Rejected assignment '{payload.title}': due date {due_date} is not after {now}")
        raise ValidationError("Due date must be after the current time.", field="due_date")
    max_grade = _validate_max_grade(payload.max_grade)
    if payload.type == AssignmentType.MCQ:
        _validate_question_bank(payload.mcq_questions)
    _validate_file_size(payload.max_file_size_bytes)
    if payload.status == AssignmentStatus.CLOSED:
        raise ValidationError("An assignment cannot be created closed.", field="status")

    assignment_data = payload.model_dump(exclude={"mcq_questions", "max_grade", "due_date", "max_file_size_bytes"})
    assignment = Assignment(
        **assignment_data,
        created_by=created_by,
        due_date=due_date,
        max_grade=max_grade,
        mcq_questions=_dump_questions(payload.mcq_questions),
        created_at=now,
        updated_at=now,
    )
    if payload.max_file_size_bytes is not None:
        assignment.max_file_size_bytes = payload.max_file_size_bytes

    db.add(assignment)
    commit(db, "create assignment", assignment)
    logger.info(f"Created assignment {assignment.id} ({assignment.type.value}, status={assignment.status.value})")
    return assignment


def update_assignment(
    db: Session,
    assignment_id: uuid.UUID,
    patch: AssignmentUpdate,
    clock: Clock = system_clock,
) -> Assignment:
    assignment = get_assignment(db, assignment_id)
    if assignment.status == AssignmentStatus.CLOSED:
        raise AssignmentClosedError("Closed assignments can no longer be edited.", field="status")

    update_data = patch.model_dump(exclude_unset=True)
    logger.info(f"Updating assignment {assignment_id} fields: {sorted(update_data)}")

    # 1️⃣ validate the would-be state before touching the row
    if "title" in update_data:
        _validate_title(update_data["title"])
    if update_data.get("max_grade") is not None:
        update_data["max_grade"] = _validate_max_grade(update_data["max_grade"])
    if "due_date" in update_data and update_data["due_date"] is not None:
        update_data["due_date"] = to_storage_time(update_data["due_date"])
    if "max_file_size_bytes" in update_data:
        _validate_file_size(update_data["max_file_size_bytes"])

    resulting_type = update_data.get("type") or assignment.type
    if "mcq_questions" in update_data:
        questions = patch.mcq_questions or []
        update_data["mcq_questions"] = _dump_questions(questions)
    else:
        questions = [McqQuestion(**q) for q in assignment.mcq_questions or []]
    if resulting_type == AssignmentType.MCQ:
        _validate_question_bank(questions)

    # 2️⃣ apply
    for key, value in update_data.items():
        if value is None and key not in ("description", "instructions", "allowed_file_types"):
            continue
        setattr(assignment, key, value)
    assignment.updated_at = storage_now(clock)

    db.add(assignment)
    commit(db, "update assignment", assignment)
    logger.info(f"Successfully updated assignment {assignment_id}")
    return assignment


def publish_assignment(db: Session, assignment_id: uuid.UUID, clock: Clock = system_clock) -> Assignment:
    assignment = get_assignment(db, assignment_id)
    if assignment.status != AssignmentStatus.DRAFT:
        raise InvalidStateError(
            f"Only draft assignments can be published (current status: {assignment.status.value}).",
            field="status",
        )
    assignment.status = AssignmentStatus.PUBLISHED
    assignment.updated_at = storage_now(clock)
    db.add(assignment)
    commit(db, "publish assignment", assignment)
    logger.info(f"Published assignment {assignment_id}")
    return assignment


def close_assignment(db: Session, assignment_id: uuid.UUID, clock: Clock = system_clock) -> Assignment:
    """published -> closed. There is no way back."""
    assignment = get_assignment(db, assignment_id)
    if assignment.status != AssignmentStatus.PUBLISHED:
        raise InvalidStateError(
            f"Only published assignments can be closed (current status: {assignment.status.value}).",
            field="status",
        )
    assignment.status = AssignmentStatus.CLOSED
    assignment.updated_at = storage_now(clock)
    db.add(assignment)
    commit(db, "close assignment", assignment)
    logger.info(f"Closed assignment {assignment_id}; new submissions will be rejected")
    return assignment


def delete_assignment(db: Session, assignment_id: uuid.UUID, clock: Clock = system_clock) -> Assignment:
    """Tombstone the assignment. Its submissions stay in place and it can be restored."""
    assignment = get_assignment(db, assignment_id)
    logger.info(f"Soft-deleting assignment {assignment_id} - {assignment.title}")
    assignment.deleted_at = storage_now(clock)
    db.add(assignment)
    commit(db, "delete assignment", assignment)
    return assignment


def restore_assignment(db: Session, assignment_id: uuid.UUID, clock: Clock = system_clock) -> Assignment:
    assignment = get_assignment(db, assignment_id, include_deleted=True)
    if not assignment.is_deleted:
        raise InvalidStateError("Assignment is not deleted.", field="assignment_id")
    assignment.deleted_at = None
    assignment.updated_at = storage_now(clock)
    db.add(assignment)
    commit(db, "restore assignment", assignment)
    logger.info(f"Restored assignment {assignment_id}")
    return assignment
