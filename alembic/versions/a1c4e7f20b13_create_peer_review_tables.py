"""Create peer review assignment tables

Revision ID: a1c4e7f20b13
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7f20b13'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the course roster tables and the assignment engine's own tables."""
    op.create_table(
        'tasks',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('reviews_per_submission', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'students',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True, unique=True),
    )
    op.create_index('ix_students_name', 'students', ['name'])
    op.create_table(
        'teams',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('task_id', sa.String(), sa.ForeignKey('tasks.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_teams_task_id', 'teams', ['task_id'])
    op.create_table(
        'team_members',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('team_id', sa.String(), sa.ForeignKey('teams.id'), nullable=False),
        sa.Column('student_id', sa.String(), sa.ForeignKey('students.id'), nullable=False),
        sa.UniqueConstraint('team_id', 'student_id', name='uq_team_member'),
    )
    op.create_table(
        'submissions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('task_id', sa.String(), sa.ForeignKey('tasks.id'), nullable=False),
        sa.Column('team_id', sa.String(), sa.ForeignKey('teams.id'), nullable=False),
        sa.Column('artifact_path', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('task_id', 'team_id', name='uq_submission_task_team'),
    )
    op.create_table(
        'assignment_records',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('task_id', sa.String(), sa.ForeignKey('tasks.id'), nullable=False, unique=True),
        sa.Column('mode', sa.String(), nullable=True),
        sa.Column('reviews_per_reviewer', sa.Integer(), nullable=True),
        sa.Column('locked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('assigned_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('assignment_record_id', sa.String(), sa.ForeignKey('assignment_records.id'), nullable=False),
        sa.Column('submission_id', sa.String(), sa.ForeignKey('submissions.id'), nullable=False),
        sa.Column('reviewer_team_id', sa.String(), sa.ForeignKey('teams.id'), nullable=False),
        sa.Column('assigned_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('answers', sa.JSON(), nullable=True),
        sa.Column('grade', sa.Float(), nullable=True),
        sa.Column('comment', sa.String(), nullable=True),
        sa.UniqueConstraint('submission_id', 'reviewer_team_id', name='uq_review_submission_reviewer'),
    )
    op.create_index('ix_reviews_assignment_record_id', 'reviews', ['assignment_record_id'])
    op.create_table(
        'meta_reviews',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('task_id', sa.String(), sa.ForeignKey('tasks.id'), nullable=False),
        sa.Column('submission_id', sa.String(), sa.ForeignKey('submissions.id'), nullable=False),
        sa.Column('review_id', sa.Integer(), sa.ForeignKey('reviews.id'), nullable=False),
        sa.Column('teacher_id', sa.String(), nullable=True),
        sa.Column('quality_grade', sa.Float(), nullable=True),
        sa.Column('observation', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'rubric_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('assignment_record_id', sa.String(), sa.ForeignKey('assignment_records.id'), nullable=False),
        sa.Column('key', sa.String(), nullable=False),
        sa.Column('label', sa.String(), nullable=False),
        sa.Column('kind', sa.String(), nullable=False, server_default='number'),
        sa.Column('weight', sa.Float(), nullable=False, server_default='1'),
        sa.Column('required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('min_score', sa.Float(), nullable=True),
        sa.Column('max_score', sa.Float(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
    )


def downgrade() -> None:
    """Drop every peer review table, children first."""
    op.drop_table('rubric_items')
    op.drop_table('meta_reviews')
    op.drop_index('ix_reviews_assignment_record_id', table_name='reviews')
    op.drop_table('reviews')
    op.drop_table('assignment_records')
    op.drop_table('submissions')
    op.drop_table('team_members')
    op.drop_index('ix_teams_task_id', table_name='teams')
    op.drop_table('teams')
    op.drop_index('ix_students_name', table_name='students')
    op.drop_table('students')
    op.drop_table('tasks')
