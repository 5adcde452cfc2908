# /tests/test_review_service.py

import pytest
from pydantic import ValidationError

from peer_review.db.models.review_models import MetaReview, Review
from peer_review.models.assignment_model import AssignmentMode
from peer_review.models.review_model import MetaReviewIn
from peer_review.models.rubric_model import ReviewSubmission
from peer_review.services import assignment_service, review_service, rubric_service
from peer_review.services.assignment_helpers.errors import ReviewNotFoundError, SubmissionNotFoundError


@pytest.fixture
def committed_task(db_service, four_team_task):
    plan = assignment_service.build_plan(db_service, four_team_task, AssignmentMode.TEAM, 2, seed="list")
    assignment_service.commit_plan(db_service, plan)
    return four_team_task


# --- Review listing ---

def test_list_reviews_for_submission(db_service, db_session, committed_task):
    expected_reviewers = {
        r.reviewer_team_id for r in db_session.query(Review).filter(Review.submission_id == "sub_A").all()
    }

    reviews = review_service.list_reviews_for_submission(db_service, "sub_A")

    assert len(reviews) == 2
    assert {r.reviewerTeam.id for r in reviews} == expected_reviewers
    for review in reviews:
        assert review.submissionId == "sub_A"
        assert review.reviewerTeam.name == f"Team {review.reviewerTeam.id}"
        assert len(review.reviewerTeam.members) == 2
        assert review.submittedAt is None and review.grade is None


def test_list_reviews_shows_submitted_content(db_service, db_session, committed_task):
    review = db_session.query(Review).filter(Review.submission_id == "sub_B").first()
    rubric_service.submit_review(db_service, review.id, ReviewSubmission(grade=6.5, comment="Clear"))

    listed = {r.id: r for r in review_service.list_reviews_for_submission(db_service, "sub_B")}
    assert listed[review.id].grade == 6.5
    assert listed[review.id].comment == "Clear"
    assert listed[review.id].submittedAt is not None


def test_list_reviews_before_assignment_is_empty(db_service, four_team_task):
    assert review_service.list_reviews_for_submission(db_service, "sub_A") == []


def test_list_reviews_unknown_submission(db_service):
    with pytest.raises(SubmissionNotFoundError):
        review_service.list_reviews_for_submission(db_service, "sub_missing")


# --- Meta-reviews ---

def test_meta_review_is_empty_until_recorded(db_service, db_session, committed_task):
    review_id = db_session.query(Review.id).first()[0]
    response = review_service.get_meta_review(db_service, review_id)
    assert response.reviewId == review_id
    assert response.meta is None


def test_record_meta_review_then_update_it(db_service, db_session, committed_task):
    review = db_session.query(Review).first()
    first = review_service.record_meta_review(
        db_service, review.id, MetaReviewIn(qualityGrade=8, observation="  Thorough ", teacherId="prof_1"),
    )
    assert first.meta.qualityGrade == 8.0
    assert first.meta.observation == "Thorough"
    assert first.meta.teacherId == "prof_1"

    second = review_service.record_meta_review(db_service, review.id, MetaReviewIn(qualityGrade=5, observation=""))
    assert second.meta.id == first.meta.id
    assert second.meta.qualityGrade == 5.0
    assert second.meta.observation is None
    assert second.meta.teacherId == "prof_1"

    stored = db_session.query(MetaReview).all()
    assert len(stored) == 1
    assert stored[0].task_id == committed_task
    assert stored[0].submission_id == review.submission_id
    assert review_service.get_meta_review(db_service, review.id).meta.qualityGrade == 5.0


def test_meta_review_unknown_review(db_service):
    with pytest.raises(ReviewNotFoundError):
        review_service.get_meta_review(db_service, 999)
    with pytest.raises(ReviewNotFoundError):
        review_service.record_meta_review(db_service, 999, MetaReviewIn(qualityGrade=5))


@pytest.mark.parametrize("grade", [-1, 11, float("nan")])
def test_meta_review_grade_is_bounded(grade):
    with pytest.raises(ValidationError):
        MetaReviewIn(qualityGrade=grade)


def test_reset_removes_recorded_meta_reviews(db_service, db_session, committed_task):
    review = db_session.query(Review).first()
    review_service.record_meta_review(db_service, review.id, MetaReviewIn(qualityGrade=7))

    assignment_service.reset_assignment(db_service, committed_task)
    assert db_session.query(MetaReview).count() == 0
