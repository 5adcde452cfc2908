# /peer-review-backend/peer_review/services/database_helpers/course_repository_sql.py

"""
This module contains the raw SQLAlchemy queries for the Task, Team, Student and
Submission tables. It is the assignment engine's only window onto the course
roster.

Write methods flush but never commit: they are always called inside
`DatabaseService.transaction()`, which owns the commit or rollback.
"""

from typing import List, Dict, Optional, Tuple
from sqlalchemy.orm import Session

from peer_review.db.models.course_models import Task, Team, TeamMember, Student, Submission


class CourseRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Task Methods ---

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.db.query(Task).filter(Task.id == task_id).first()

    def update_task_policy(self, task_id: str, reviews_per_submission: int) -> None:
        task = self.get_task(task_id)
        if task:
            task.reviews_per_submission = reviews_per_submission
            self.db.flush()

    # --- Submission Methods ---

    def get_submissions_with_teams(self, task_id: str) -> List[Tuple[Submission, Team]]:
        """
        Returns every submission of the task joined with its author team, in
        submission creation order. Ties on the timestamp fall back to the id so
        the order is always reproducible.
        """
        return (
            self.db.query(Submission, Team)
            .join(Team, Team.id == Submission.team_id)
            .filter(Submission.task_id == task_id)
            .order_by(Submission.created_at.asc(), Submission.id.asc())
            .all()
        )

    def get_submission(self, submission_id: str) -> Optional[Submission]:
        return self.db.query(Submission).filter(Submission.id == submission_id).first()

    # --- Team & Membership Methods ---

    def get_team_members(self, team_id: str) -> List[Student]:
        """Members of one team, ordered by name."""
        return (
            self.db.query(Student)
            .join(TeamMember, TeamMember.student_id == Student.id)
            .filter(TeamMember.team_id == team_id)
            .order_by(Student.name.asc(), Student.id.asc())
            .all()
        )

    def get_members_by_team(self, team_ids: List[str]) -> Dict[str, List[Student]]:
        """Batch version of `get_team_members`; every requested team gets a key."""
        members: Dict[str, List[Student]] = {team_id: [] for team_id in team_ids}
        if not team_ids:
            return members
        rows = (
            self.db.query(TeamMember.team_id, Student)
            .join(Student, Student.id == TeamMember.student_id)
            .filter(TeamMember.team_id.in_(team_ids))
            .order_by(Student.name.asc(), Student.id.asc())
            .all()
        )
        for team_id, student in rows:
            members[team_id].append(student)
        return members

    def find_team_by_name(self, task_id: str, name: str) -> Optional[Team]:
        return self.db.query(Team).filter(Team.task_id == task_id, Team.name == name).first()

    def add_team(self, record: Dict) -> Team:
        new_team = Team(**record)
        self.db.add(new_team)
        self.db.flush()
        return new_team

    def add_team_member_if_missing(self, team_id: str, student_id: str) -> None:
        """Adds the membership unless it already exists."""
        exists = (
            self.db.query(TeamMember.id)
            .filter(TeamMember.team_id == team_id, TeamMember.student_id == student_id)
            .first()
        )
        if not exists:
            self.db.add(TeamMember(team_id=team_id, student_id=student_id))
            self.db.flush()

    def delete_reviewer_only_teams(self, task_id: str, name_prefix: str) -> int:
        """
        Deletes the task's teams whose name starts with `name_prefix` and that
        hold no submission. Returns the number of teams removed.
        """
        candidates = (
            self.db.query(Team)
            .outerjoin(Submission, Submission.team_id == Team.id)
            .filter(
                Team.task_id == task_id,
                Team.name.startswith(name_prefix, autoescape=True),
                Submission.id.is_(None),
            )
            .all()
        )
        for team in candidates:
            # The membership rows go with the team through the cascade.
            self.db.delete(team)
        self.db.flush()
        return len(candidates)
