# tests/test_submission_controller.py

import uuid
from datetime import datetime
from decimal import Decimal

import pytest
from sqlmodel import select

from lms_assessment.controllers.assignment_controller import close_assignment, update_assignment
from lms_assessment.controllers.attachment_controller import list_attachments
from lms_assessment.controllers.submission_controller import (
    delete_submission,
    get_submission,
    get_submission_for_student,
    grade,
    list_submissions_for_assignment,
    list_submissions_for_student,
    return_submission,
    save_draft,
    submit,
    summarize_submissions,
)
from lms_assessment.models.assignment import AssignmentType
from lms_assessment.models.attachment import SubmissionOwner
from lms_assessment.models.submission import Submission, SubmissionStatus
from lms_assessment.schemas.assignment import AssignmentUpdate
from lms_assessment.schemas.attachment import AttachmentCreate
from lms_assessment.schemas.submission import SubmissionCreate
from lms_assessment.utils.exceptions import (
    AssignmentClosedError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

ESSAY = SubmissionCreate(content="The Nile floods every summer.")


def _pdf(name="essay.pdf", size=2048):
    return AttachmentCreate(file_name=name, file_url=f"https://files.example.org/{name}", file_size=size)


def test_on_time_submission(make_assignment, db, clock, student_id):
    assignment = make_assignment()

    submission = submit(db, assignment.id, student_id, ESSAY, clock=clock)

    assert submission.status == SubmissionStatus.SUBMITTED
    assert submission.submitted_at == datetime(2025, 1, 5, 9, 0)
    assert submission.is_late is False
    assert submission.attempt_number == 1
    assert submission.grade is None


def test_lateness_is_fixed_at_submission_time(make_assignment, db, clock, student_id):
    assignment = make_assignment(due_date=datetime(2025, 1, 9, 23, 59))
    clock.set(datetime(2025, 1, 10, 10, 0))

    submission = submit(db, assignment.id, student_id, ESSAY, clock=clock)
    assert submission.is_late is True

    # moving the due date afterwards does not re-evaluate old submissions
    update_assignment(db, assignment.id, AssignmentUpdate(due_date=datetime(2025, 1, 15)), clock=clock)
    db.expire_all()
    assert get_submission(db, submission.id).is_late is True


def test_resubmission_reuses_the_row(make_assignment, db, clock, student_id, teacher_id):
    assignment = make_assignment()
    first = submit(db, assignment.id, student_id, ESSAY, clock=clock)
    grade(db, first.id, teacher_id, Decimal("6"), feedback="Needs sources", clock=clock)

    clock.advance(hours=2)
    second = submit(db, assignment.id, student_id, SubmissionCreate(content="Now with sources."), clock=clock)

    assert second.id == first.id
    assert second.attempt_number == 2
    assert second.status == SubmissionStatus.SUBMITTED
    assert second.content == "Now with sources."
    assert second.grade is None
    assert second.feedback is None
    assert second.graded_by is None
    assert second.submitted_at == datetime(2025, 1, 5, 11, 0)

    rows = db.exec(select(Submission).where(Submission.assignment_id == assignment.id)).all()
    assert len(rows) == 1


def test_mcq_is_auto_graded_on_submit(mcq_assignment, db, clock, student_id):
    submission = submit(db, mcq_assignment.id, student_id, SubmissionCreate(mcq_answers=[0, 1, 2, 3]), clock=clock)

    assert submission.status == SubmissionStatus.GRADED
    assert submission.grade == Decimal("7.50")
    assert submission.graded_by is None
    assert submission.graded_at == datetime(2025, 1, 5, 9, 0)


def test_mcq_without_auto_grade_waits_for_teacher(make_assignment, sample_questions, db, clock, student_id):
    assignment = make_assignment(type=AssignmentType.MCQ, auto_grade=False, mcq_questions=sample_questions)

    submission = submit(db, assignment.id, student_id, SubmissionCreate(mcq_answers=[0, 1, 2, 0]), clock=clock)

    assert submission.status == SubmissionStatus.SUBMITTED
    assert submission.grade is None


def test_mcq_answer_count_must_match(mcq_assignment, db, clock, student_id):
    with pytest.raises(ValidationError) as excinfo:
        submit(db, mcq_assignment.id, student_id, SubmissionCreate(mcq_answers=[0, 1]), clock=clock)
    assert excinfo.value.field == "mcq_answers"


def test_essay_needs_content(make_assignment, db, clock, student_id):
    assignment = make_assignment()
    with pytest.raises(ValidationError) as excinfo:
        submit(db, assignment.id, student_id, SubmissionCreate(content="  "), clock=clock)
    assert excinfo.value.field == "content"


def test_closed_assignment_rejects_submissions(make_assignment, db, clock, student_id):
    assignment = make_assignment()
    close_assignment(db, assignment.id, clock=clock)

    with pytest.raises(AssignmentClosedError) as excinfo:
        submit(db, assignment.id, student_id, ESSAY, clock=clock)
    assert excinfo.value.status_code == 409


def test_unpublished_assignment_rejects_submissions(make_assignment, db, clock, student_id):
    assignment = make_assignment(publish=False)
    with pytest.raises(InvalidStateError):
        submit(db, assignment.id, student_id, ESSAY, clock=clock)


def test_unknown_assignment(db, clock, student_id):
    with pytest.raises(NotFoundError):
        submit(db, uuid.uuid4(), student_id, ESSAY, clock=clock)


def test_file_upload_policy(make_assignment, db, clock, student_id):
    assignment = make_assignment(
        type=AssignmentType.FILE_UPLOAD, allowed_file_types="pdf, docx", max_file_size_bytes=5000
    )

    with pytest.raises(ValidationError):
        submit(db, assignment.id, student_id, SubmissionCreate(), clock=clock)
    with pytest.raises(ValidationError):
        submit(db, assignment.id, student_id, SubmissionCreate(attachments=[_pdf("virus.exe")]), clock=clock)
    with pytest.raises(ValidationError):
        submit(db, assignment.id, student_id, SubmissionCreate(attachments=[_pdf(size=5001)]), clock=clock)

    submission = submit(db, assignment.id, student_id, SubmissionCreate(attachments=[_pdf("Essay.PDF")]), clock=clock)
    attachments = list_attachments(db, SubmissionOwner(submission.id))
    assert [a.file_name for a in attachments] == ["Essay.PDF"]
    assert attachments[0].file_type == "pdf"
    assert attachments[0].uploaded_by == student_id


def test_resubmission_replaces_attachments(make_assignment, db, clock, student_id):
    assignment = make_assignment(type=AssignmentType.FILE_UPLOAD)
    first = submit(db, assignment.id, student_id, SubmissionCreate(attachments=[_pdf("draft.pdf")]), clock=clock)

    submit(db, assignment.id, student_id, SubmissionCreate(attachments=[_pdf("final.pdf")]), clock=clock)

    attachments = list_attachments(db, SubmissionOwner(first.id))
    assert [a.file_name for a in attachments] == ["final.pdf"]


def test_draft_then_submit(make_assignment, db, clock, student_id):
    assignment = make_assignment()

    draft = save_draft(db, assignment.id, student_id, SubmissionCreate(content="half an ess"), clock=clock)
    assert draft.status == SubmissionStatus.DRAFT
    assert draft.submitted_at is None

    submitted = submit(db, assignment.id, student_id, ESSAY, clock=clock)
    assert submitted.id == draft.id
    assert submitted.attempt_number == 1

    with pytest.raises(InvalidStateError):
        save_draft(db, assignment.id, student_id, SubmissionCreate(content="again"), clock=clock)


def test_teacher_grading(make_assignment, db, clock, student_id, teacher_id):
    assignment = make_assignment()
    submission = submit(db, assignment.id, student_id, ESSAY, clock=clock)
    clock.advance(days=1)

    graded = grade(db, submission.id, teacher_id, "8.456", feedback="Well argued", clock=clock)

    assert graded.status == SubmissionStatus.GRADED
    assert graded.grade == Decimal("8.46")
    assert graded.feedback == "Well argued"
    assert graded.graded_by == teacher_id
    assert graded.graded_at == datetime(2025, 1, 6, 9, 0)


def test_grade_must_be_within_max(make_assignment, db, clock, student_id, teacher_id):
    assignment = make_assignment(max_grade=Decimal("20"))
    submission = submit(db, assignment.id, student_id, ESSAY, clock=clock)

    with pytest.raises(ValidationError):
        grade(db, submission.id, teacher_id, Decimal("20.5"), clock=clock)
    with pytest.raises(ValidationError):
        grade(db, submission.id, teacher_id, Decimal("-1"), clock=clock)
    assert grade(db, submission.id, teacher_id, Decimal("20"), clock=clock).grade == Decimal("20.00")


def test_drafts_cannot_be_graded(make_assignment, db, clock, student_id, teacher_id):
    assignment = make_assignment()
    draft = save_draft(db, assignment.id, student_id, ESSAY, clock=clock)
    with pytest.raises(InvalidStateError):
        grade(db, draft.id, teacher_id, 5, clock=clock)


def test_regrading_overwrites(make_assignment, db, clock, student_id, teacher_id):
    assignment = make_assignment()
    submission = submit(db, assignment.id, student_id, ESSAY, clock=clock)
    grade(db, submission.id, teacher_id, 5, feedback="first pass", clock=clock)
    return_submission(db, submission.id, clock=clock)

    other_teacher = uuid.uuid4()
    regraded = grade(db, submission.id, other_teacher, 7, feedback="second pass", clock=clock)

    assert regraded.status == SubmissionStatus.GRADED
    assert regraded.grade == Decimal("7.00")
    assert regraded.feedback == "second pass"
    assert regraded.graded_by == other_teacher
    assert regraded.returned_at is None


def test_return_only_from_graded(make_assignment, db, clock, student_id, teacher_id):
    assignment = make_assignment()
    submission = submit(db, assignment.id, student_id, ESSAY, clock=clock)

    with pytest.raises(InvalidStateError):
        return_submission(db, submission.id, clock=clock)

    grade(db, submission.id, teacher_id, 9, clock=clock)
    returned = return_submission(db, submission.id, clock=clock)
    assert returned.status == SubmissionStatus.RETURNED
    assert returned.returned_at == datetime(2025, 1, 5, 9, 0)

    with pytest.raises(InvalidStateError):
        return_submission(db, submission.id, clock=clock)


def test_deleted_submission_is_revived_on_resubmit(make_assignment, db, clock, student_id):
    assignment = make_assignment()
    submission = submit(db, assignment.id, student_id, ESSAY, clock=clock)

    delete_submission(db, submission.id, clock=clock)
    with pytest.raises(NotFoundError):
        get_submission(db, submission.id)
    with pytest.raises(NotFoundError):
        get_submission_for_student(db, assignment.id, student_id)

    revived = submit(db, assignment.id, student_id, ESSAY, clock=clock)
    assert revived.id == submission.id
    assert revived.deleted_at is None
    assert revived.attempt_number == 2


def test_listings_and_summary(make_assignment, db, clock, teacher_id):
    assignment = make_assignment()
    on_time, late, drafting = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()

    first = submit(db, assignment.id, on_time, ESSAY, clock=clock)
    grade(db, first.id, teacher_id, Decimal("9"), clock=clock)
    save_draft(db, assignment.id, drafting, SubmissionCreate(content="..."), clock=clock)
    clock.set(datetime(2025, 1, 11, 8, 0))
    second = submit(db, assignment.id, late, ESSAY, clock=clock)
    grade(db, second.id, teacher_id, Decimal("6"), clock=clock)

    assert len(list_submissions_for_assignment(db, assignment.id)) == 3
    graded = list_submissions_for_assignment(db, assignment.id, status=SubmissionStatus.GRADED)
    assert {s.student_id for s in graded} == {on_time, late}
    assert [s.id for s in list_submissions_for_student(db, late)] == [second.id]

    summary = summarize_submissions(db, assignment.id)
    assert summary.total == 3
    assert summary.by_status[SubmissionStatus.GRADED] == 2
    assert summary.by_status[SubmissionStatus.DRAFT] == 1
    assert summary.by_status[SubmissionStatus.RETURNED] == 0
    assert summary.late == 1
    assert summary.graded == 2
    assert summary.average_grade == Decimal("7.50")


@pytest.mark.parametrize("score", [float("nan"), "NaN", float("inf"), "-Infinity", "ten"])
def test_non_numeric_grades_are_validation_errors(make_assignment, db, clock, student_id, teacher_id, score):
    assignment = make_assignment()
    submission = submit(db, assignment.id, student_id, ESSAY, clock=clock)

    with pytest.raises(ValidationError) as excinfo:
        grade(db, submission.id, teacher_id, score, clock=clock)

    assert excinfo.value.field == "grade"
    assert get_submission(db, submission.id).status == SubmissionStatus.SUBMITTED
