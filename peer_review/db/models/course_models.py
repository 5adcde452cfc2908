# /peer-review-backend/peer_review/db/models/course_models.py

"""
This module defines the SQLAlchemy ORM models for the course-side entities the
assignment engine reads: the `Task` being reviewed, the `Student` roster, the
`Team` groups students submit as, and the one `Submission` each team hands in.

These tables are owned by the course collaborators. The assignment engine only
reads them, with one exception: synthetic single-member reviewer teams for
individual-mode assignments are created and removed by the engine itself.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Task(Base):
    """
    SQLAlchemy model representing one gradeable task within a course.

    `reviews_per_submission` is the default review-count policy. A successful
    commit mirrors the applied value back onto it.
    """
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    reviews_per_submission = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    teams = relationship("Team", back_populates="task", cascade="all, delete-orphan")
    submissions = relationship("Submission", back_populates="task", cascade="all, delete-orphan")
    assignment_record = relationship("AssignmentRecord", back_populates="task", uselist=False, cascade="all, delete-orphan")


class Student(Base):
    """A single person who can belong to teams and review other teams' work."""
    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=True)

    memberships = relationship("TeamMember", back_populates="student", cascade="all, delete-orphan")


class Team(Base):
    """
    SQLAlchemy model representing a group of one or more students for a task.

    Teams are scoped to a task. In individual mode the engine also stores each
    reviewing person as a synthetic one-member team whose name starts with the
    task's reserved reviewer prefix.
    """
    id = Column(String, primary_key=True, index=True)
    task_id = Column(String, ForeignKey("tasks.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    task = relationship("Task", back_populates="teams")
    members = relationship("TeamMember", back_populates="team", cascade="all, delete-orphan")
    submission = relationship("Submission", back_populates="team", uselist=False)


class TeamMember(Base):
    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("team_id", "student_id", name="uq_team_member"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(String, ForeignKey("teams.id"), nullable=False, index=True)
    student_id = Column(String, ForeignKey("students.id"), nullable=False, index=True)

    team = relationship("Team", back_populates="members")
    student = relationship("Student", back_populates="memberships")


class Submission(Base):
    """
    The artifact a team hands in for a task; the unit that gets reviewed.
    `artifact_path` is opaque to the assignment engine.
    """
    __table_args__ = (UniqueConstraint("task_id", "team_id", name="uq_submission_task_team"),)

    id = Column(String, primary_key=True, index=True)
    task_id = Column(String, ForeignKey("tasks.id"), nullable=False, index=True)
    team_id = Column(String, ForeignKey("teams.id"), nullable=False, index=True)
    artifact_path = Column(String, nullable=True)
    # Python-side default keeps microsecond resolution, which the engine relies
    # on for a stable "creation order" of submissions.
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    task = relationship("Task", back_populates="submissions")
    team = relationship("Team", back_populates="submission")
    reviews = relationship("Review", back_populates="submission", cascade="all, delete-orphan")
