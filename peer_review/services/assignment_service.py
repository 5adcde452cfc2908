# /peer-review-backend/peer_review/services/assignment_service.py

"""
This service module is the entry point of the peer-review assignment engine.

It orchestrates the lower-level helpers in `assignment_helpers`: the context
loader, the two pairing strategies and the write-side persistence helpers.
Building a plan never writes; committing and resetting each run as a single
transaction on the `DatabaseService` handed in by the caller.
"""

import logging
import math
from typing import Dict, Optional

from .database_service import DatabaseService
from ..config import DEFAULT_REVIEWS_PER_REVIEWER, reviewer_team_prefix
from ..db.models.review_models import AssignmentRecord
from ..models.assignment_model import (
    AssignmentMap, AssignmentMode, AssignmentState, MapEntry, MapReviewer, Person, PreviewPlan, TeamRef,
)
from .assignment_helpers import persistence
from .assignment_helpers.context_loader import load_context
from .assignment_helpers.errors import AssignmentLockedError, NoPairsError, TaskNotFoundError
from .assignment_helpers.individual_strategy import build_individual_plan
from .assignment_helpers.seeded_random import build_seeded_random, generate_seed
from .assignment_helpers.team_strategy import build_team_plan

logger = logging.getLogger(__name__)


def normalize_requested_reviews(value) -> int:
    """Floors the requested count to an integer of at least 1."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(number):
        return 1
    return max(1, math.floor(number))


# --- Plan Builder ---

def build_plan(
    db: DatabaseService,
    task_id: str,
    mode: AssignmentMode = AssignmentMode.TEAM,
    requested_reviews_per_reviewer=DEFAULT_REVIEWS_PER_REVIEWER,
    seed: Optional[str] = None,
) -> PreviewPlan:
    """
    Computes a preview of who reviews whom. Raises TaskNotFoundError for an
    unknown task; infeasible or clamped requests come back as warnings on the
    plan instead. Passing the returned seed back reproduces the same plan.
    """
    if db.get_task(task_id) is None:
        raise TaskNotFoundError(task_id)

    mode = AssignmentMode(mode)
    requested = normalize_requested_reviews(requested_reviews_per_reviewer)
    seed_to_use = seed or generate_seed()
    context = load_context(db, task_id)
    random_fn = build_seeded_random(seed_to_use)

    if mode == AssignmentMode.INDIVIDUAL:
        result = build_individual_plan(context, requested, random_fn)
    else:
        result = build_team_plan(context, requested, random_fn)

    plan = PreviewPlan(
        taskId=task_id,
        mode=mode,
        seed=seed_to_use,
        requestedReviewsPerReviewer=requested,
        totalSubmissions=len(context.teamIds),
        **result.model_dump(),
    )
    logger.info(
        "Built %s plan for task %s (seed=%s, requested=%d, applied=%d, pairs=%d)",
        mode.value, task_id, seed_to_use, requested, plan.appliedReviewsPerReviewer, len(plan.pairs),
    )
    return plan


# --- Lock State ---

def _state_from_record(db: DatabaseService, task_id: str, record: AssignmentRecord) -> AssignmentState:
    total_reviews = db.count_reviews(record.id)
    return AssignmentState(
        taskId=task_id,
        assignmentRecordId=record.id,
        mode=AssignmentMode(record.mode) if record.mode else None,
        reviewsPerReviewer=record.reviews_per_reviewer,
        locked=bool(record.locked) or total_reviews > 0,
        assignedAt=record.assigned_at,
        totalReviews=total_reviews,
    )


def get_assignment_state(db: DatabaseService, task_id: str) -> AssignmentState:
    """
    Current assignment state of the task. A task counts as locked when its
    record is flagged or any review already exists. The record is created
    here on first access.
    """
    if db.get_task(task_id) is None:
        raise TaskNotFoundError(task_id)
    with db.transaction():
        record = persistence.ensure_assignment_record(db, task_id)
    return _state_from_record(db, task_id, record)


def ensure_assignment_unlocked(db: DatabaseService, task_id: str) -> AssignmentState:
    """The caller-side guard that must pass before `commit_plan` is called."""
    state = get_assignment_state(db, task_id)
    if state.locked:
        raise AssignmentLockedError(task_id)
    return state


# --- Commit & Reset ---

def commit_plan(db: DatabaseService, plan: PreviewPlan) -> AssignmentState:
    """
    Persists a previewed plan and locks the task. Committing the same pairs
    again refreshes the existing rows and clears any review content on them.
    This function does not check the lock; see `commit_plan_if_unlocked`.
    """
    return _commit(db, plan, check_lock=False)


def commit_plan_if_unlocked(db: DatabaseService, plan: PreviewPlan) -> AssignmentState:
    """
    Same as `commit_plan`, but re-reads the lock inside the write transaction,
    holding the record row, and raises AssignmentLockedError if the task was
    assigned in the meantime. Two confirms of one task can never both land.
    """
    return _commit(db, plan, check_lock=True)


def _commit(db: DatabaseService, plan: PreviewPlan, check_lock: bool) -> AssignmentState:
    if not plan.pairs:
        raise NoPairsError()

    with db.transaction():
        if db.get_task(plan.taskId) is None:
            raise TaskNotFoundError(plan.taskId)
        if check_lock:
            record = persistence.ensure_assignment_record(db, plan.taskId, for_update=True)
            if record.locked or db.count_reviews(record.id) > 0:
                raise AssignmentLockedError(plan.taskId)
        record = persistence.persist_plan(db, plan)

    logger.info(
        "Committed %d review pairs for task %s (mode=%s, reviews per reviewer=%s)",
        len(plan.pairs), plan.taskId, plan.mode.value, record.reviews_per_reviewer,
    )
    return _state_from_record(db, plan.taskId, record)


def reset_assignment(db: DatabaseService, task_id: str) -> AssignmentState:
    """Undoes a committed assignment so the task can be assigned again."""
    if db.get_task(task_id) is None:
        raise TaskNotFoundError(task_id)

    with db.transaction():
        record = persistence.clear_assignment(db, task_id)

    logger.info("Reset assignment for task %s", task_id)
    return _state_from_record(db, task_id, record)


# --- Read-only Map ---

def fetch_current_map(db: DatabaseService, task_id: str) -> AssignmentMap:
    """Committed reviews grouped by author team, with reviewer display names."""
    if db.get_task(task_id) is None:
        raise TaskNotFoundError(task_id)

    record = db.get_assignment_record(task_id)
    if record is None:
        return AssignmentMap(taskId=task_id)

    prefix = reviewer_team_prefix(task_id)
    members_cache: Dict[str, list] = {}
    entries: Dict[str, MapEntry] = {}

    for review, author_team, reviewer_team in db.get_review_rows(record.id):
        if reviewer_team.id not in members_cache:
            members_cache[reviewer_team.id] = [
                Person.model_validate(student) for student in db.get_team_members(reviewer_team.id)
            ]
        members = members_cache[reviewer_team.id]

        is_individual = (reviewer_team.name or "").startswith(prefix)
        if is_individual:
            reviewer_name = (members[0].name if members else None) or reviewer_team.name or f"Reviewer {reviewer_team.id}"
        else:
            reviewer_name = reviewer_team.name or f"Team {reviewer_team.id}"

        entry = entries.get(author_team.id)
        if entry is None:
            entry = MapEntry(
                authorTeam=TeamRef(id=author_team.id, name=author_team.name),
                submissionIds=[review.submission_id],
            )
            entries[author_team.id] = entry
        entry.reviewers.append(MapReviewer(
            id=reviewer_team.id,
            name=reviewer_name,
            reviewId=review.id,
            isIndividual=is_individual,
            members=members,
        ))

    return AssignmentMap(taskId=task_id, pairs=list(entries.values()))
