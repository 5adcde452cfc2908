# /peer-review-backend/peer_review/services/rubric_service.py

"""
Rubric handling for the review workflow that runs after assignment: saving a
task's weighted criteria, scoring the answers a reviewer submits against them,
and aggregating submitted review grades per author team.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd

from .database_service import DatabaseService
from .assignment_helpers import persistence
from .assignment_helpers.context_loader import load_context
from .assignment_helpers.errors import ReviewNotFoundError, RubricValidationError, TaskNotFoundError
from ..config import RUBRIC_SCORE_MAX, RUBRIC_SCORE_MIN
from ..models import rubric_model

logger = logging.getLogger(__name__)


# --- Rubric CRUD ---

def _normalize_rubric_items(items: List[rubric_model.RubricItemIn]) -> List[Dict]:
    records = []
    for index, item in enumerate(items):
        position = index + 1
        key = (item.key or "").strip() or f"item_{position}"
        label = (item.label or "").strip() or f"Criterion {position}"
        weight = item.weight if item.weight and item.weight > 0 else 1.0
        records.append({
            "key": key,
            "label": label,
            "kind": item.kind or "number",
            "weight": float(weight),
            "required": bool(item.required),
            "min_score": item.minScore,
            "max_score": item.maxScore,
            "position": position,
        })
    return records


def replace_rubric(db: DatabaseService, task_id: str, items: List[rubric_model.RubricItemIn]) -> List[rubric_model.RubricItem]:
    if db.get_task(task_id) is None:
        raise TaskNotFoundError(task_id)
    if not items:
        raise RubricValidationError("At least one rubric item is required.")

    records = _normalize_rubric_items(items)
    keys = [record["key"] for record in records]
    if len(set(keys)) != len(keys):
        raise RubricValidationError("Rubric item keys must be unique.")

    with db.transaction():
        record = persistence.ensure_assignment_record(db, task_id)
        saved = db.replace_rubric_items(record.id, records)
    return [rubric_model.RubricItem.model_validate(item) for item in saved]


def get_rubric(db: DatabaseService, task_id: str) -> List[rubric_model.RubricItem]:
    if db.get_task(task_id) is None:
        raise TaskNotFoundError(task_id)
    record = db.get_assignment_record(task_id)
    if record is None:
        return []
    return [rubric_model.RubricItem.model_validate(item) for item in db.get_rubric_items(record.id)]


# --- Scoring ---

def _checked_number(raw: Any, subject: str, low: float, high: float) -> float:
    """Converts `raw` to a finite float within `[low, high]` or raises RubricValidationError."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise RubricValidationError(f"{subject} must be a number.")
    if not math.isfinite(value):
        raise RubricValidationError(f"{subject} must be a finite number.")
    if value < low or value > high:
        raise RubricValidationError(f"{subject} must be between {low:g} and {high:g}.")
    return value


def calculate_rubric_score(
    items: List[rubric_model.RubricItem],
    answers: Optional[Dict[str, Any]],
    fallback_grade: Optional[float] = None,
) -> rubric_model.RubricScore:
    """
    Validates the answers against the rubric and computes the weighted mean of
    the numeric answers. Raises RubricValidationError on a missing required
    answer or an out-of-range value.
    """
    answers = answers or {}
    if not items:
        if fallback_grade is None:
            raise RubricValidationError("The task has no rubric; a numeric grade is required.")
        grade = _checked_number(fallback_grade, "The grade", RUBRIC_SCORE_MIN, RUBRIC_SCORE_MAX)
        return rubric_model.RubricScore(normalizedScores={}, finalGrade=round(grade, 2))

    normalized: Dict[str, Any] = {}
    weighted_total = 0.0
    weight_sum = 0.0

    for item in items:
        raw = answers.get(item.key)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            if item.required:
                raise RubricValidationError(f"The rubric item '{item.label}' is required.")
            continue

        if item.kind != "number":
            normalized[item.key] = str(raw).strip()
            continue

        low = item.minScore if item.minScore is not None else RUBRIC_SCORE_MIN
        high = item.maxScore if item.maxScore is not None else RUBRIC_SCORE_MAX
        value = _checked_number(raw, f"The answer for '{item.label}'", low, high)

        normalized[item.key] = value
        weighted_total += value * item.weight
        weight_sum += item.weight

    final_grade = round(weighted_total / weight_sum, 2) if weight_sum else None
    return rubric_model.RubricScore(normalizedScores=normalized, finalGrade=final_grade)


def submit_review(
    db: DatabaseService,
    review_id: int,
    submission: rubric_model.ReviewSubmission,
) -> rubric_model.ReviewOut:
    """Scores and stores a reviewer's answers on an assigned review."""
    review = db.get_review_by_id(review_id)
    if review is None:
        raise ReviewNotFoundError(review_id)

    items = [rubric_model.RubricItem.model_validate(item) for item in db.get_rubric_items(review.assignment_record_id)]
    score = calculate_rubric_score(items, submission.answers, fallback_grade=submission.grade)

    with db.transaction():
        review.answers = score.normalizedScores
        review.grade = score.finalGrade
        review.comment = (submission.comment or "").strip() or None
        review.submitted_at = datetime.now(timezone.utc)

    logger.info("Review %s submitted with grade %s", review_id, score.finalGrade)
    return rubric_model.ReviewOut.model_validate(review)


# --- Aggregation ---

def summarize_grades(db: DatabaseService, task_id: str) -> rubric_model.GradeSummary:
    """Mean submitted review grade per author team."""
    context = load_context(db, task_id)
    summary = rubric_model.GradeSummary(taskId=task_id)
    if not context.teamIds:
        return summary

    record = db.get_assignment_record(task_id)
    rows = []
    if record is not None:
        rows = [
            {"team_id": author_team.id, "grade": review.grade}
            for review, author_team, _ in db.get_review_rows(record.id)
            if review.submitted_at is not None and review.grade is not None
        ]

    stats = {}
    grades_df = pd.DataFrame(rows, columns=["team_id", "grade"])
    if not grades_df.empty:
        stats = grades_df.groupby("team_id")["grade"].agg(["mean", "count"]).to_dict("index")

    for team_id in context.teamIds:
        team_stats = stats.get(team_id)
        summary.teams.append(rubric_model.TeamGrade(
            teamId=team_id,
            teamName=context.teamName.get(team_id),
            submissionId=context.submissionOfTeam[team_id],
            averageGrade=round(float(team_stats["mean"]), 2) if team_stats else None,
            reviewCount=int(team_stats["count"]) if team_stats else 0,
        ))
    return summary
