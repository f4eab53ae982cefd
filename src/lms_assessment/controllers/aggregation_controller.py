# File: src/lms_assessment/controllers/aggregation_controller.py

import logging
import uuid
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select

from ..models.grade import GRADE_RANKS, Grade, Term
from ..schemas.grade import SubjectAverage, SubjectStatistics
from ..utils.auto_grader import round_score
from ..utils.exceptions import ValidationError
from .grade_controller import validate_academic_year

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _live_grades(
    db: Session,
    class_id: uuid.UUID,
    student_id: Optional[uuid.UUID] = None,
    subject_id: Optional[uuid.UUID] = None,
    term: Optional[Term] = None,
    academic_year: Optional[str] = None,
) -> List[Grade]:
    """Active, non-retracted ledger entries of a class, narrowed by whatever is given."""
    statement = select(Grade).where(
        Grade.class_id == class_id,
        Grade.is_active == True,  # noqa: E712
        Grade.deleted_at.is_(None),
    )
    if student_id:
        statement = statement.where(Grade.student_id == student_id)
    if subject_id:
        statement = statement.where(Grade.subject_id == subject_id)
    if term is not None:
        statement = statement.where(Grade.term == Term(term))
    if academic_year is not None:
        statement = statement.where(Grade.academic_year == academic_year)
    return list(db.exec(statement).all())


def _as_term(term) -> Term:
    try:
        return Term(term)
    except ValueError:
        raise ValidationError(f"Unknown term: {term!r}.", field="term")


def _require_scope(term: Term, academic_year: str) -> Term:
    """Averages are always scoped; an empty year must not widen them to every year."""
    validate_academic_year(academic_year)
    return _as_term(term)


def _weighted_mean(grades: Iterable[Grade]) -> Decimal:
    total_weighted = ZERO
    total_weight = ZERO
    for grade in grades:
        total_weighted += grade.weighted_value()
        total_weight += Decimal(grade.weight)
    if total_weight == ZERO:
        return round_score(ZERO)
    return round_score(total_weighted / total_weight)


def average_for_student(
    db: Session,
    student_id: uuid.UUID,
    subject_id: uuid.UUID,
    class_id: uuid.UUID,
    term: Term,
    academic_year: str,
) -> Decimal:
    """
    Weighted average of one student's entries for a subject:
    sum(value * weight) / sum(weight), or 0 when there are none.
    """
    term = _require_scope(term, academic_year)
    grades = _live_grades(db, class_id, student_id=student_id, subject_id=subject_id, term=term, academic_year=academic_year)
    average = _weighted_mean(grades)
    logger.info(
        f"Average for student {student_id}, subject {subject_id} "
        f"({academic_year}, term {Term(term).value}): {average} over {len(grades)} entries"
    )
    return average


def class_average_for_subject(
    db: Session,
    class_id: uuid.UUID,
    subject_id: uuid.UUID,
    term: Term,
    academic_year: str,
) -> Decimal:
    """
    The same weighted formula applied to every entry of the class at once.
    Students with more (or heavier) entries pull harder on the result, so this
    is not the mean of the students' own averages; see
    class_mean_of_student_averages for that.
    """
    term = _require_scope(term, academic_year)
    grades = _live_grades(db, class_id, subject_id=subject_id, term=term, academic_year=academic_year)
    average = _weighted_mean(grades)
    logger.info(f"Class {class_id} weighted average for subject {subject_id}: {average} over {len(grades)} entries")
    return average


def class_mean_of_student_averages(
    db: Session,
    class_id: uuid.UUID,
    subject_id: uuid.UUID,
    term: Term,
    academic_year: str,
) -> Decimal:
    term = _require_scope(term, academic_year)
    grades = _live_grades(db, class_id, subject_id=subject_id, term=term, academic_year=academic_year)
    by_student: Dict[uuid.UUID, List[Grade]] = defaultdict(list)
    for grade in grades:
        by_student[grade.student_id].append(grade)
    if not by_student:
        return round_score(ZERO)

    # unrounded per-student means, rounded once at the end
    student_means = []
    for student_grades in by_student.values():
        total_weight = sum((Decimal(g.weight) for g in student_grades), ZERO)
        total_weighted = sum((g.weighted_value() for g in student_grades), ZERO)
        student_means.append(total_weighted / total_weight)
    mean = round_score(sum(student_means, ZERO) / len(student_means))
    logger.info(f"Class {class_id} mean of {len(student_means)} student averages for subject {subject_id}: {mean}")
    return mean


def term_averages_for_student(
    db: Session,
    student_id: uuid.UUID,
    class_id: uuid.UUID,
    term: Term,
    academic_year: str,
) -> List[SubjectAverage]:
    """One weighted average per subject the student has entries in."""
    term = _require_scope(term, academic_year)
    grades = _live_grades(db, class_id, student_id=student_id, term=term, academic_year=academic_year)
    by_subject: Dict[uuid.UUID, List[Grade]] = defaultdict(list)
    for grade in grades:
        by_subject[grade.subject_id].append(grade)

    averages = [
        SubjectAverage(
            subject_id=subject_id,
            average=_weighted_mean(subject_grades),
            total_weight=sum((Decimal(g.weight) for g in subject_grades), ZERO),
            entries=len(subject_grades),
        )
        for subject_id, subject_grades in by_subject.items()
    ]
    averages.sort(key=lambda a: str(a.subject_id))
    return averages


def grade_statistics(
    db: Session,
    class_id: uuid.UUID,
    subject_id: Optional[uuid.UUID] = None,
    term: Optional[Term] = None,
    academic_year: Optional[str] = None,
) -> List[SubjectStatistics]:
    """Unweighted per-subject statistics of a class, with the rank distribution."""
    if term is not None:
        term = _as_term(term)
    if academic_year is not None:
        validate_academic_year(academic_year)
    grades = _live_grades(db, class_id, subject_id=subject_id, term=term, academic_year=academic_year)
    by_subject: Dict[uuid.UUID, List[Grade]] = defaultdict(list)
    for grade in grades:
        by_subject[grade.subject_id].append(grade)

    statistics = []
    for subject, subject_grades in by_subject.items():
        values = [Decimal(g.grade_value) for g in subject_grades]
        distribution = {rank: 0 for _, rank in GRADE_RANKS}
        distribution["poor"] = 0
        for grade in subject_grades:
            distribution[grade.rank()] += 1
        statistics.append(
            SubjectStatistics(
                subject_id=subject,
                average=round_score(sum(values, ZERO) / len(values)),
                minimum=min(values),
                maximum=max(values),
                entries=len(values),
                passing=sum(1 for g in subject_grades if g.is_passing()),
                distribution=distribution,
            )
        )
    statistics.sort(key=lambda s: str(s.subject_id))
    logger.info(f"Computed grade statistics for {len(statistics)} subject(s) in class {class_id}")
    return statistics
