# /peer-review-backend/peer_review/services/review_service.py

"""
Read and grading side of committed reviews: the list of reviews a submission
received, and the teacher's meta-review grading the quality of one review.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List

from .database_service import DatabaseService
from .assignment_helpers.errors import ReviewNotFoundError, SubmissionNotFoundError
from ..db.models.review_models import MetaReview
from ..models import review_model
from ..models.assignment_model import Person

logger = logging.getLogger(__name__)


def list_reviews_for_submission(db: DatabaseService, submission_id: str) -> List[review_model.ReviewListItem]:
    if db.get_submission(submission_id) is None:
        raise SubmissionNotFoundError(submission_id)

    members_cache: Dict[str, List[Person]] = {}
    reviews = []
    for review, reviewer_team in db.list_reviews_for_submission(submission_id):
        if reviewer_team.id not in members_cache:
            members_cache[reviewer_team.id] = [
                Person.model_validate(student) for student in db.get_team_members(reviewer_team.id)
            ]
        reviews.append(review_model.ReviewListItem(
            id=review.id,
            submissionId=review.submission_id,
            reviewerTeam=review_model.ReviewerTeam(
                id=reviewer_team.id,
                name=reviewer_team.name,
                members=members_cache[reviewer_team.id],
            ),
            assignedAt=review.assigned_at,
            submittedAt=review.submitted_at,
            answers=review.answers,
            grade=review.grade,
            comment=review.comment,
        ))
    return reviews


def _meta_review_out(meta: MetaReview) -> review_model.MetaReview:
    return review_model.MetaReview(
        id=meta.id,
        qualityGrade=meta.quality_grade,
        observation=meta.observation,
        teacherId=meta.teacher_id,
        createdAt=meta.created_at,
    )


def get_meta_review(db: DatabaseService, review_id: int) -> review_model.MetaReviewResponse:
    if db.get_review_by_id(review_id) is None:
        raise ReviewNotFoundError(review_id)
    meta = db.get_meta_review(review_id)
    return review_model.MetaReviewResponse(reviewId=review_id, meta=_meta_review_out(meta) if meta else None)


def record_meta_review(
    db: DatabaseService,
    review_id: int,
    meta_in: review_model.MetaReviewIn,
) -> review_model.MetaReviewResponse:
    """
    Creates or overwrites the single meta-review of a review. Overwriting
    refreshes the timestamp and keeps the teacher who first graded it unless a
    new one is given.
    """
    review = db.get_review_by_id(review_id)
    if review is None:
        raise ReviewNotFoundError(review_id)

    observation = (meta_in.observation or "").strip() or None
    now = datetime.now(timezone.utc)

    with db.transaction():
        meta = db.get_meta_review(review_id)
        if meta is None:
            meta = db.add_meta_review({
                "task_id": review.submission.task_id,
                "submission_id": review.submission_id,
                "review_id": review_id,
                "teacher_id": meta_in.teacherId,
                "quality_grade": meta_in.qualityGrade,
                "observation": observation,
                "created_at": now,
            })
        else:
            meta.quality_grade = meta_in.qualityGrade
            meta.observation = observation
            meta.created_at = now
            if meta_in.teacherId:
                meta.teacher_id = meta_in.teacherId

    logger.info("Meta-review recorded for review %s (quality=%s)", review_id, meta_in.qualityGrade)
    return review_model.MetaReviewResponse(reviewId=review_id, meta=_meta_review_out(meta))
