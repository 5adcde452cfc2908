# /peer-review-backend/peer_review/services/assignment_helpers/persistence.py

"""
Write-side helpers for a confirmed plan. None of these functions commit; the
assignment service runs them inside one `DatabaseService.transaction()`.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from ..database_service import DatabaseService
from ...config import reviewer_team_prefix
from ...db.models.review_models import AssignmentRecord
from ...models.assignment_model import PreviewPlan, ReviewerType


def ensure_assignment_record(db: DatabaseService, task_id: str, for_update: bool = False) -> AssignmentRecord:
    """Returns the task's assignment record, creating an empty one if absent."""
    record = db.get_assignment_record(task_id, for_update=for_update)
    if record is None:
        record = db.add_assignment_record({
            "id": f"asg_{uuid.uuid4().hex[:12]}",
            "task_id": task_id,
            "locked": False,
        })
    return record


def reviewer_team_name(task_id: str, person_id: str, label: Optional[str] = None) -> str:
    base_name = (label or "").strip() or f"User {person_id}"
    return f"{reviewer_team_prefix(task_id)} {base_name} #{person_id}"


def ensure_reviewer_team(db: DatabaseService, task_id: str, person_id: str, label: Optional[str] = None) -> str:
    """
    Find-or-create the synthetic one-person team an individual reviewer
    reviews under. Safe to call repeatedly for the same person.
    """
    name = reviewer_team_name(task_id, person_id, label)
    team = db.find_team_by_name(task_id, name)
    if team is None:
        team = db.add_team({"id": f"team_{uuid.uuid4().hex[:12]}", "task_id": task_id, "name": name})
    db.add_team_member_if_missing(team.id, person_id)
    return team.id


def persist_plan(db: DatabaseService, plan: PreviewPlan) -> AssignmentRecord:
    """Upserts every pair of the plan and locks the task's assignment record."""
    record = ensure_assignment_record(db, plan.taskId, for_update=True)
    assigned_at = datetime.now(timezone.utc)
    reviewer_teams: Dict[str, str] = {}

    for pair in plan.pairs:
        if pair.reviewerType == ReviewerType.USER:
            if pair.reviewerId not in reviewer_teams:
                reviewer_teams[pair.reviewerId] = ensure_reviewer_team(
                    db, plan.taskId, pair.reviewerId, pair.reviewerName,
                )
            reviewer_team_id = reviewer_teams[pair.reviewerId]
        else:
            reviewer_team_id = pair.reviewerId
        db.upsert_review(record.id, pair.targetSubmissionId, reviewer_team_id, assigned_at)

    applied = plan.appliedReviewsPerReviewer or plan.requestedReviewsPerReviewer or 1
    record.mode = plan.mode.value
    record.reviews_per_reviewer = applied
    record.locked = True
    record.assigned_at = assigned_at
    db.update_task_policy(plan.taskId, applied)
    return record


def clear_assignment(db: DatabaseService, task_id: str) -> AssignmentRecord:
    """
    Removes every trace of a committed assignment for the task: meta-reviews,
    reviews and the synthetic reviewer teams. Submissions, rosters and the
    rubric stay as they are. The record itself is kept and unlocked.
    """
    record = ensure_assignment_record(db, task_id, for_update=True)
    db.delete_meta_reviews_for_task(task_id)
    db.delete_reviews_for_record(record.id)
    db.delete_reviewer_only_teams(task_id, reviewer_team_prefix(task_id))
    record.locked = False
    record.assigned_at = None
    return record
