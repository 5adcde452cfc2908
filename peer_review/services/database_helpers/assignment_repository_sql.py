# /peer-review-backend/peer_review/services/database_helpers/assignment_repository_sql.py

"""
This module contains the raw SQLAlchemy queries for the AssignmentRecord,
Review and MetaReview tables.

As with the course repository, write methods only flush. The service layer
wraps them in a single transaction so a commit or a reset is all-or-nothing.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from peer_review.db.models.review_models import AssignmentRecord, Review, MetaReview
from peer_review.db.models.course_models import Submission, Team


class AssignmentRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Assignment Record Methods ---

    def get_record_by_task(self, task_id: str, for_update: bool = False) -> Optional[AssignmentRecord]:
        """
        Fetches the task's assignment record. With `for_update` the row is
        locked until the surrounding transaction ends, which serializes
        concurrent commits and resets of the same task on databases that
        support row locks.
        """
        query = self.db.query(AssignmentRecord).filter(AssignmentRecord.task_id == task_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    def add_record(self, record: dict) -> AssignmentRecord:
        new_record = AssignmentRecord(**record)
        self.db.add(new_record)
        self.db.flush()
        return new_record

    def count_reviews(self, assignment_record_id: str) -> int:
        return (
            self.db.query(func.count(Review.id))
            .filter(Review.assignment_record_id == assignment_record_id)
            .scalar()
        ) or 0

    # --- Review Methods ---

    def get_review_by_id(self, review_id: int) -> Optional[Review]:
        return self.db.query(Review).filter(Review.id == review_id).first()

    def upsert_review(
        self,
        assignment_record_id: str,
        submission_id: str,
        reviewer_team_id: str,
        assigned_at: datetime,
    ) -> Review:
        """
        Inserts the (submission, reviewer team) pair, or refreshes the existing
        row in place. A refreshed row loses any review content it carried.
        """
        review = (
            self.db.query(Review)
            .filter(Review.submission_id == submission_id, Review.reviewer_team_id == reviewer_team_id)
            .first()
        )
        if review is None:
            review = Review(
                assignment_record_id=assignment_record_id,
                submission_id=submission_id,
                reviewer_team_id=reviewer_team_id,
            )
            self.db.add(review)
        review.assignment_record_id = assignment_record_id
        review.assigned_at = assigned_at
        review.submitted_at = None
        review.answers = None
        review.grade = None
        review.comment = None
        self.db.flush()
        return review

    def list_reviews_for_submission(self, submission_id: str) -> List[Tuple[Review, Team]]:
        """Every review of one submission with its reviewer team, newest assignment first."""
        return (
            self.db.query(Review, Team)
            .join(Team, Team.id == Review.reviewer_team_id)
            .filter(Review.submission_id == submission_id)
            .order_by(Review.assigned_at.desc(), Review.id.desc())
            .all()
        )

    # --- Meta-Review Methods ---

    def get_meta_review(self, review_id: int) -> Optional[MetaReview]:
        return self.db.query(MetaReview).filter(MetaReview.review_id == review_id).first()

    def add_meta_review(self, record: dict) -> MetaReview:
        new_meta = MetaReview(**record)
        self.db.add(new_meta)
        self.db.flush()
        return new_meta

    def delete_reviews_for_record(self, assignment_record_id: str) -> int:
        deleted = (
            self.db.query(Review)
            .filter(Review.assignment_record_id == assignment_record_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return deleted

    def delete_meta_reviews_for_task(self, task_id: str) -> int:
        deleted = (
            self.db.query(MetaReview)
            .filter(MetaReview.task_id == task_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return deleted

    def get_review_rows(self, assignment_record_id: str) -> List[Tuple[Review, Team, Team]]:
        """
        Returns (review, author team, reviewer team) for every review of the
        record, in author submission order and then review order.
        """
        author_team = aliased(Team)
        reviewer_team = aliased(Team)
        return (
            self.db.query(Review, author_team, reviewer_team)
            .join(Submission, Submission.id == Review.submission_id)
            .join(author_team, author_team.id == Submission.team_id)
            .join(reviewer_team, reviewer_team.id == Review.reviewer_team_id)
            .filter(Review.assignment_record_id == assignment_record_id)
            .order_by(Submission.created_at.asc(), Submission.id.asc(), Review.id.asc())
            .all()
        )
