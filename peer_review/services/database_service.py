# /peer-review-backend/peer_review/services/database_service.py

from contextlib import contextmanager
from datetime import datetime
from typing import List, Dict, Optional, Tuple, Generator, Iterator
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from peer_review.db.database import get_db
from peer_review.db.models.course_models import Task, Team, Student, Submission
from peer_review.db.models.review_models import AssignmentRecord, MetaReview, Review, RubricItem

# --- Repository Imports ---
from .database_helpers.course_repository_sql import CourseRepositorySQL
from .database_helpers.assignment_repository_sql import AssignmentRepositorySQL
from .database_helpers.rubric_repository_sql import RubricRepositorySQL


class DatabaseService:
    """
    Storage context handed to every engine function. It bundles the
    repositories over a single SQLAlchemy session and exposes the transaction
    primitive the commit and reset steps run inside.
    """

    def __init__(self, db_session: Session):
        if db_session is None:
            raise ValueError("A database session is required.")
        self.db_session = db_session
        self.course_repo = CourseRepositorySQL(db_session)
        self.assignment_repo = AssignmentRepositorySQL(db_session)
        self.rubric_repo = RubricRepositorySQL(db_session)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commits the work done inside the block, or rolls all of it back."""
        try:
            yield
            self.db_session.commit()
        except Exception:
            self.db_session.rollback()
            raise

    # --- TASK, TEAM & SUBMISSION METHODS (DELEGATED) ---
    def get_task(self, task_id: str) -> Optional[Task]: return self.course_repo.get_task(task_id)
    def update_task_policy(self, task_id: str, reviews_per_submission: int): self.course_repo.update_task_policy(task_id, reviews_per_submission)
    def get_submissions_with_teams(self, task_id: str) -> List[Tuple[Submission, Team]]: return self.course_repo.get_submissions_with_teams(task_id)
    def get_submission(self, submission_id: str) -> Optional[Submission]: return self.course_repo.get_submission(submission_id)
    def get_team_members(self, team_id: str) -> List[Student]: return self.course_repo.get_team_members(team_id)
    def get_members_by_team(self, team_ids: List[str]) -> Dict[str, List[Student]]: return self.course_repo.get_members_by_team(team_ids)
    def find_team_by_name(self, task_id: str, name: str) -> Optional[Team]: return self.course_repo.find_team_by_name(task_id, name)
    def add_team(self, team_record: Dict) -> Team: return self.course_repo.add_team(team_record)
    def add_team_member_if_missing(self, team_id: str, student_id: str): self.course_repo.add_team_member_if_missing(team_id, student_id)
    def delete_reviewer_only_teams(self, task_id: str, name_prefix: str) -> int: return self.course_repo.delete_reviewer_only_teams(task_id, name_prefix)

    # --- ASSIGNMENT RECORD & REVIEW METHODS (DELEGATED) ---
    def get_assignment_record(self, task_id: str, for_update: bool = False) -> Optional[AssignmentRecord]: return self.assignment_repo.get_record_by_task(task_id, for_update=for_update)
    def add_assignment_record(self, record: Dict) -> AssignmentRecord: return self.assignment_repo.add_record(record)
    def count_reviews(self, assignment_record_id: str) -> int: return self.assignment_repo.count_reviews(assignment_record_id)
    def get_review_by_id(self, review_id: int) -> Optional[Review]: return self.assignment_repo.get_review_by_id(review_id)
    def upsert_review(self, assignment_record_id: str, submission_id: str, reviewer_team_id: str, assigned_at: datetime) -> Review:
        return self.assignment_repo.upsert_review(assignment_record_id, submission_id, reviewer_team_id, assigned_at)
    def list_reviews_for_submission(self, submission_id: str) -> List[Tuple[Review, Team]]: return self.assignment_repo.list_reviews_for_submission(submission_id)
    def delete_reviews_for_record(self, assignment_record_id: str) -> int: return self.assignment_repo.delete_reviews_for_record(assignment_record_id)
    def delete_meta_reviews_for_task(self, task_id: str) -> int: return self.assignment_repo.delete_meta_reviews_for_task(task_id)
    def get_review_rows(self, assignment_record_id: str) -> List[Tuple[Review, Team, Team]]: return self.assignment_repo.get_review_rows(assignment_record_id)

    # --- META-REVIEW METHODS (DELEGATED) ---
    def get_meta_review(self, review_id: int) -> Optional[MetaReview]: return self.assignment_repo.get_meta_review(review_id)
    def add_meta_review(self, record: Dict) -> MetaReview: return self.assignment_repo.add_meta_review(record)

    # --- RUBRIC METHODS (DELEGATED) ---
    def get_rubric_items(self, assignment_record_id: str) -> List[RubricItem]: return self.rubric_repo.get_items(assignment_record_id)
    def replace_rubric_items(self, assignment_record_id: str, records: List[Dict]) -> List[RubricItem]: return self.rubric_repo.replace_items(assignment_record_id, records)


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService instance."""
    yield DatabaseService(db_session=db)
