"""initial assessment tables

Revision ID: 0001
Revises:
Create Date: 2025-01-06 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'assignments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('subject_id', sa.Uuid(), nullable=False),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('type', sa.Enum('ESSAY', 'MCQ', 'FILE_UPLOAD', name='assignmenttype'), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('max_grade', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('status', sa.Enum('DRAFT', 'PUBLISHED', 'CLOSED', name='assignmentstatus'), nullable=False),
        sa.Column('auto_grade', sa.Boolean(), nullable=False),
        sa.Column('mcq_questions', sa.JSON(), nullable=True),
        sa.Column('allowed_file_types', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('max_file_size_bytes', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_assignment_class_subject', 'assignments', ['class_id', 'subject_id'])
    for column in ('class_id', 'subject_id', 'created_by', 'type', 'due_date', 'status'):
        op.create_index(op.f(f'ix_assignments_{column}'), 'assignments', [column])

    op.create_table(
        'submissions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('assignment_id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('mcq_answers', sa.JSON(), nullable=True),
        sa.Column('grade', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('DRAFT', 'SUBMITTED', 'GRADED', 'RETURNED', name='submissionstatus'), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=True),
        sa.Column('graded_at', sa.DateTime(), nullable=True),
        sa.Column('graded_by', sa.Uuid(), nullable=True),
        sa.Column('returned_at', sa.DateTime(), nullable=True),
        sa.Column('is_late', sa.Boolean(), nullable=False),
        sa.Column('attempt_number', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['assignment_id'], ['assignments.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('assignment_id', 'student_id', name='unique_assignment_student'),
    )
    for column in ('assignment_id', 'student_id', 'status', 'submitted_at', 'graded_by'):
        op.create_index(op.f(f'ix_submissions_{column}'), 'submissions', [column])

    op.create_table(
        'attachments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_type', sa.Enum('LESSON', 'ASSIGNMENT', 'SUBMISSION', name='ownertype'), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('file_name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('file_url', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=True),
        sa.Column('file_type', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('mime_type', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('uploaded_by', sa.Uuid(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('attachments_owner_index', 'attachments', ['owner_type', 'owner_id'])
    op.create_index(op.f('ix_attachments_file_type'), 'attachments', ['file_type'])
    op.create_index(op.f('ix_attachments_uploaded_by'), 'attachments', ['uploaded_by'])

    op.create_table(
        'grades',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('subject_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('grade_value', sa.Numeric(precision=4, scale=2), nullable=False),
        sa.Column(
            'grade_type',
            sa.Enum('HOMEWORK', 'QUIZ', 'MIDTERM', 'FINAL', 'ASSIGNMENT', 'PARTICIPATION', name='gradetype'),
            nullable=False,
        ),
        sa.Column('weight', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('term', sa.Enum('FIRST', 'SECOND', 'FINAL', name='term'), nullable=False),
        sa.Column('academic_year', sqlmodel.sql.sqltypes.AutoString(length=9), nullable=False),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('recorded_by', sa.Uuid(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_grade_lookup', 'grades', ['student_id', 'subject_id', 'class_id', 'term', 'academic_year'])
    op.create_index('idx_class_subject_term', 'grades', ['class_id', 'subject_id', 'term'])
    op.create_index('idx_student_term_year', 'grades', ['student_id', 'term', 'academic_year'])
    op.create_index(op.f('ix_grades_recorded_by'), 'grades', ['recorded_by'])
    op.create_index(op.f('ix_grades_recorded_at'), 'grades', ['recorded_at'])


def downgrade() -> None:
    op.drop_table('grades')
    op.drop_table('attachments')
    op.drop_table('submissions')
    op.drop_table('assignments')
