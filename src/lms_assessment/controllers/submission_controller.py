# File: src/lms_assessment/controllers/submission_controller.py

import logging
import uuid
from collections import Counter
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from sqlmodel import Session, select

from ..db.session import commit
from ..models.assignment import Assignment, AssignmentStatus, AssignmentType
from ..models.attachment import SubmissionOwner
from ..models.submission import Submission, SubmissionStatus
from ..schemas.submission import SubmissionCreate, SubmissionSummary
from ..utils import auto_grader
from ..utils.exceptions import (
    AssignmentClosedError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..utils.file import check_file_policy
from ..utils.time import Clock, storage_now, system_clock
from .assignment_controller import get_assignment
from .attachment_controller import detach_all, put_attachment

logger = logging.getLogger(__name__)


def _load_open_assignment(db: Session, assignment_id: uuid.UUID) -> Assignment:
    """The assignment must exist, be published and not be closed."""
    assignment = get_assignment(db, assignment_id)
    if assignment.status == AssignmentStatus.CLOSED:
        logger.warning(f"Submission attempt against closed assignment {assignment_id}")
        raise AssignmentClosedError("This assignment is closed and no longer accepts submissions.", field="assignment_id")
    if assignment.status != AssignmentStatus.PUBLISHED:
        raise InvalidStateError("Assignment has not been published yet.", field="assignment_id")
    return assignment


def _find_row(db: Session, assignment_id: uuid.UUID, student_id: uuid.UUID) -> Optional[Submission]:
    # includes tombstoned rows: the pair owns a single row for good
    return db.exec(
        select(Submission).where(
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id,
        )
    ).first()


def _validate_payload(assignment: Assignment, payload: SubmissionCreate) -> None:
    if assignment.type == AssignmentType.ESSAY:
        if not payload.content or not payload.content.strip():
            raise ValidationError("Essay submissions need content.", field="content")
    elif assignment.type == AssignmentType.FILE_UPLOAD:
        if not payload.attachments:
            raise ValidationError("This assignment requires a file upload.", field="attachments")
    elif assignment.type == AssignmentType.MCQ:
        answers = payload.mcq_answers or []
        if len(answers) != assignment.question_count:
            raise ValidationError(
                f"Expected {assignment.question_count} answers, got {len(answers)}.",
                field="mcq_answers",
            )
    if payload.attachments:
        check_file_policy(assignment, payload.attachments)


def _clear_grading(submission: Submission) -> None:
    submission.grade = None
    submission.feedback = None
    submission.graded_at = None
    submission.graded_by = None
    submission.returned_at = None


def _stamp_submitted(submission: Submission, assignment: Assignment, now: datetime) -> None:
    """
    Transition into `submitted`. `is_late` is decided here, once per
    attempt, and nothing edits it afterwards.
    """
    submission.status = SubmissionStatus.SUBMITTED
    submission.submitted_at = now
    submission.is_late = now > assignment.due_date
    submission.deleted_at = None
    submission.updated_at = now


def _apply_auto_grade(submission: Submission, assignment: Assignment, now: datetime) -> None:
    result = auto_grader.score(submission.mcq_answers, assignment.mcq_questions, assignment.max_grade)
    submission.grade = result.scaled_score
    submission.status = SubmissionStatus.GRADED
    submission.graded_at = now
    submission.graded_by = None
    logger.info(
        f"Auto-graded submission for student {submission.student_id} on assignment {assignment.id}: "
        f"{result.correct_count}/{assignment.question_count} correct, score {result.scaled_score}"
    )


# --- Lifecycle operations ---

def submit(
    db: Session,
    assignment_id: uuid.UUID,
    student_id: uuid.UUID,
    payload: SubmissionCreate,
    clock: Clock = system_clock,
) -> Submission:
    logger.info(f"Submission attempt for assignment {assignment_id} by student {student_id}")

    # 1️⃣ load assignment & validate payload against its policy
    assignment = _load_open_assignment(db, assignment_id)
    _validate_payload(assignment, payload)
    now = storage_now(clock)

    # 2️⃣ reuse the pair's row if there is one
    submission = _find_row(db, assignment_id, student_id)
    if submission:
        if submission.has_been_submitted:
            submission.attempt_number += 1
            logger.info(f"Student {student_id} is re-submitting assignment {assignment_id} (attempt {submission.attempt_number})")
        _clear_grading(submission)
        detach_all(db, SubmissionOwner(submission.id), now)
    else:
        submission = Submission(
            assignment_id=assignment_id,
            student_id=student_id,
            attempt_number=1,
            created_at=now,
        )

    submission.content = payload.content
    submission.mcq_answers = list(payload.mcq_answers) if payload.mcq_answers is not None else None
    _stamp_submitted(submission, assignment, now)

    # 3️⃣ objective work is graded in the same unit of work
    if assignment.type == AssignmentType.MCQ and assignment.auto_grade:
        _apply_auto_grade(submission, assignment, now)

    db.add(submission)
    for attachment in payload.attachments:
        put_attachment(db, SubmissionOwner(submission.id), attachment, uploaded_by=student_id)

    commit(db, "save submission", submission)
    logger.info(
        f"Submission {submission.id} saved: status={submission.status.value}, "
        f"late={submission.is_late}, attempt={submission.attempt_number}"
    )
    return submission


def save_draft(
    db: Session,
    assignment_id: uuid.UUID,
    student_id: uuid.UUID,
    payload: SubmissionCreate,
    clock: Clock = system_clock,
) -> Submission:
    """Keep work in progress. No completeness checks; nothing is timestamped as submitted."""
    assignment = _load_open_assignment(db, assignment_id)
    if payload.attachments:
        check_file_policy(assignment, payload.attachments)
    now = storage_now(clock)

    submission = _find_row(db, assignment_id, student_id)
    if submission and submission.status != SubmissionStatus.DRAFT and not submission.is_deleted:
        raise InvalidStateError(
            f"Submission is already {submission.status.value}; drafts can only be saved before submitting.",
            field="status",
        )
    if submission:
        detach_all(db, SubmissionOwner(submission.id), now)
        _clear_grading(submission)
        submission.deleted_at = None
    else:
        submission = Submission(assignment_id=assignment_id, student_id=student_id, created_at=now)

    submission.content = payload.content
    submission.mcq_answers = list(payload.mcq_answers) if payload.mcq_answers is not None else None
    submission.status = SubmissionStatus.DRAFT
    submission.updated_at = now

    db.add(submission)
    for attachment in payload.attachments:
        put_attachment(db, SubmissionOwner(submission.id), attachment, uploaded_by=student_id)

    commit(db, "save draft submission", submission)
    logger.info(f"Saved draft {submission.id} for student {student_id} on assignment {assignment_id}")
    return submission


def grade(
    db: Session,
    submission_id: uuid.UUID,
    grader_id: uuid.UUID,
    score,
    feedback: Optional[str] = None,
    clock: Clock = system_clock,
) -> Submission:
    """
    Record (or overwrite) a grade. Repeated calls simply replace the previous
    grade, feedback, grader and timestamp.
    """
    submission = get_submission(db, submission_id)
    if submission.status == SubmissionStatus.DRAFT:
        raise InvalidStateError("Draft submissions cannot be graded.", field="status")

    assignment = submission.assignment
    try:
        value = Decimal(str(score))
    except (InvalidOperation, ValueError):
        raise ValidationError("Grade must be a number.", field="grade")
    if not value.is_finite():
        raise ValidationError("Grade must be a finite number.", field="grade")
    if not (Decimal("0") <= value <= Decimal(assignment.max_grade)):
        logger.warning(f"Rejected grade {score} for submission {submission_id}: max is {assignment.max_grade}")
        raise ValidationError(f"Grade must be between 0 and {assignment.max_grade}.", field="grade")

    now = storage_now(clock)
    if submission.status in (SubmissionStatus.GRADED, SubmissionStatus.RETURNED):
        logger.info(f"Re-grading submission {submission_id} (previous grade {submission.grade})")
    submission.grade = auto_grader.round_score(value)
    submission.feedback = feedback
    submission.status = SubmissionStatus.GRADED
    submission.graded_at = now
    submission.graded_by = grader_id
    submission.returned_at = None
    submission.updated_at = now

    db.add(submission)
    commit(db, "grade submission", submission)
    logger.info(f"Submission {submission_id} graded {submission.grade} by {grader_id}")
    return submission


def return_submission(db: Session, submission_id: uuid.UUID, clock: Clock = system_clock) -> Submission:
    """Release a graded submission's results to the student."""
    submission = get_submission(db, submission_id)
    if submission.status != SubmissionStatus.GRADED:
        raise InvalidStateError(
            f"Only graded submissions can be returned (current status: {submission.status.value}).",
            field="status",
        )
    now = storage_now(clock)
    submission.status = SubmissionStatus.RETURNED
    submission.returned_at = now
    submission.updated_at = now
    db.add(submission)
    commit(db, "return submission", submission)
    logger.info(f"Returned submission {submission_id} to student {submission.student_id}")
    return submission


def delete_submission(db: Session, submission_id: uuid.UUID, clock: Clock = system_clock) -> Submission:
    submission = get_submission(db, submission_id)
    now = storage_now(clock)
    logger.info(f"Soft-deleting submission {submission_id}")
    detach_all(db, SubmissionOwner(submission.id), now)
    submission.deleted_at = now
    db.add(submission)
    commit(db, "delete submission", submission)
    return submission


# --- Lookups ---

def get_submission(db: Session, submission_id: uuid.UUID) -> Submission:
    submission = db.get(Submission, submission_id)
    if not submission or submission.is_deleted:
        logger.warning(f"Submission not found: {submission_id}")
        raise NotFoundError("Submission not found", field="submission_id")
    return submission


def get_submission_for_student(db: Session, assignment_id: uuid.UUID, student_id: uuid.UUID) -> Submission:
    submission = _find_row(db, assignment_id, student_id)
    if not submission or submission.is_deleted:
        raise NotFoundError("Submission not found", field="submission_id")
    return submission


def list_submissions_for_assignment(
    db: Session,
    assignment_id: uuid.UUID,
    status: Optional[SubmissionStatus] = None,
) -> List[Submission]:
    get_assignment(db, assignment_id)
    statement = select(Submission).where(
        Submission.assignment_id == assignment_id,
        Submission.deleted_at.is_(None),
    )
    if status:
        statement = statement.where(Submission.status == SubmissionStatus(status))
    submissions = db.exec(statement.order_by(Submission.submitted_at.desc())).all()
    logger.info(f"Found {len(submissions)} submissions for assignment {assignment_id}")
    return list(submissions)


def list_submissions_for_student(
    db: Session,
    student_id: uuid.UUID,
    status: Optional[SubmissionStatus] = None,
) -> List[Submission]:
    statement = (
        select(Submission)
        .join(Assignment)
        .where(
            Submission.student_id == student_id,
            Submission.deleted_at.is_(None),
            Assignment.deleted_at.is_(None),
        )
    )
    if status:
        statement = statement.where(Submission.status == SubmissionStatus(status))
    return list(db.exec(statement.order_by(Assignment.due_date)).all())


def summarize_submissions(db: Session, assignment_id: uuid.UUID) -> SubmissionSummary:
    submissions = list_submissions_for_assignment(db, assignment_id)
    by_status = Counter(submission.status for submission in submissions)
    grades = [Decimal(s.grade) for s in submissions if s.grade is not None]
    average = auto_grader.round_score(sum(grades) / len(grades)) if grades else None
    return SubmissionSummary(
        assignment_id=assignment_id,
        total=len(submissions),
        by_status={status: by_status.get(status, 0) for status in SubmissionStatus},
        late=sum(1 for s in submissions if s.is_late),
        graded=len(grades),
        average_grade=average,
    )
