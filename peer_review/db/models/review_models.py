# /peer-review-backend/peer_review/db/models/review_models.py

"""
This module defines the SQLAlchemy ORM models owned by the assignment engine:
the per-task `AssignmentRecord`, the `Review` rows (one per reviewer/target
pair), the teacher `MetaReview` grading of a review, and the weighted
`RubricItem` criteria used to score a submitted review.
"""

from sqlalchemy import Column, String, Integer, Float, Boolean, JSON, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class AssignmentRecord(Base):
    """
    1:1 with a Task. Holds the mode and review count actually applied and the
    lock flag. The row is never deleted by a reset, only emptied, so the
    historical policy value survives.
    """
    __tablename__ = "assignment_records"

    id = Column(String, primary_key=True, index=True)
    task_id = Column(String, ForeignKey("tasks.id"), nullable=False, unique=True, index=True)
    mode = Column(String, nullable=True)  # 'team' or 'individual'
    reviews_per_reviewer = Column(Integer, nullable=True)
    locked = Column(Boolean, nullable=False, default=False)
    assigned_at = Column(DateTime(timezone=True), nullable=True)

    task = relationship("Task", back_populates="assignment_record")
    reviews = relationship("Review", back_populates="assignment_record", cascade="all, delete-orphan")
    rubric_items = relationship(
        "RubricItem",
        back_populates="assignment_record",
        cascade="all, delete-orphan",
        order_by="RubricItem.position",
    )


class Review(Base):
    """
    A ReviewPair: reviewer team `reviewer_team_id` reviews `submission_id`.
    The review content columns stay empty until the reviewer submits.
    """
    __table_args__ = (UniqueConstraint("submission_id", "reviewer_team_id", name="uq_review_submission_reviewer"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    assignment_record_id = Column(String, ForeignKey("assignment_records.id"), nullable=False, index=True)
    submission_id = Column(String, ForeignKey("submissions.id"), nullable=False, index=True)
    reviewer_team_id = Column(String, ForeignKey("teams.id"), nullable=False, index=True)
    assigned_at = Column(DateTime(timezone=True), nullable=True)

    submitted_at = Column(DateTime(timezone=True), nullable=True)
    answers = Column(JSON, nullable=True)
    grade = Column(Float, nullable=True)
    comment = Column(String, nullable=True)

    assignment_record = relationship("AssignmentRecord", back_populates="reviews")
    submission = relationship("Submission", back_populates="reviews")
    reviewer_team = relationship("Team")
    meta_reviews = relationship("MetaReview", back_populates="review")


class MetaReview(Base):
    """A teacher's quality grade on one submitted review."""
    __tablename__ = "meta_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(String, ForeignKey("tasks.id"), nullable=False, index=True)
    submission_id = Column(String, ForeignKey("submissions.id"), nullable=False)
    review_id = Column(Integer, ForeignKey("reviews.id"), nullable=False, index=True)
    teacher_id = Column(String, nullable=True)
    quality_grade = Column(Float, nullable=True)
    observation = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    review = relationship("Review", back_populates="meta_reviews")


class RubricItem(Base):
    __tablename__ = "rubric_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    assignment_record_id = Column(String, ForeignKey("assignment_records.id"), nullable=False, index=True)
    key = Column(String, nullable=False)
    label = Column(String, nullable=False)
    kind = Column(String, nullable=False, default="number")
    weight = Column(Float, nullable=False, default=1.0)
    required = Column(Boolean, nullable=False, default=False)
    min_score = Column(Float, nullable=True)
    max_score = Column(Float, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    assignment_record = relationship("AssignmentRecord", back_populates="rubric_items")
