# tests/conftest.py

import uuid
from datetime import datetime

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from lms_assessment.controllers.assignment_controller import create_assignment, publish_assignment
from lms_assessment.db.session import create_db_and_tables
from lms_assessment.models.assignment import AssignmentType
from lms_assessment.schemas.assignment import AssignmentCreate, McqQuestion
from lms_assessment.utils.time import FixedClock


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def clock():
    # a Sunday morning, a few days before the sample due date
    return FixedClock(datetime(2025, 1, 5, 9, 0))


@pytest.fixture
def teacher_id():
    return uuid.uuid4()


@pytest.fixture
def student_id():
    return uuid.uuid4()


@pytest.fixture
def class_id():
    return uuid.uuid4()


@pytest.fixture
def subject_id():
    return uuid.uuid4()


@pytest.fixture
def sample_questions():
    # answer key [0, 1, 2, 0]
    return [
        McqQuestion(question_text="2 + 2 = ?", options=["4", "5", "22"], correct_option_index=0),
        McqQuestion(question_text="Capital of Egypt?", options=["Giza", "Cairo", "Luxor"], correct_option_index=1),
        McqQuestion(question_text="H2O is?", options=["Salt", "Air", "Water"], correct_option_index=2),
        McqQuestion(question_text="Largest planet?", options=["Jupiter", "Mars"], correct_option_index=0),
    ]


@pytest.fixture
def make_assignment(db, clock, teacher_id, class_id, subject_id):
    """Create (and by default publish) an assignment due 2025-01-09 23:59."""

    def _make(publish=True, **overrides):
        data = {
            "class_id": class_id,
            "subject_id": subject_id,
            "title": "Essay on the Nile",
            "due_date": datetime(2025, 1, 9, 23, 59),
        }
        data.update(overrides)
        assignment = create_assignment(db, AssignmentCreate(**data), created_by=teacher_id, clock=clock)
        if publish:
            assignment = publish_assignment(db, assignment.id, clock=clock)
        return assignment

    return _make


@pytest.fixture
def mcq_assignment(make_assignment, sample_questions):
    return make_assignment(
        title="Quick quiz",
        type=AssignmentType.MCQ,
        auto_grade=True,
        mcq_questions=sample_questions,
    )
