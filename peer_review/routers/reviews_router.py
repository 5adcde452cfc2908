# /peer-review-backend/peer_review/routers/reviews_router.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..models import review_model, rubric_model
from ..services import review_service, rubric_service
from ..services.database_service import DatabaseService, get_db_service
from ..services.assignment_helpers.errors import ReviewNotFoundError, RubricValidationError, SubmissionNotFoundError

router = APIRouter()


@router.get("", response_model=List[review_model.ReviewListItem], summary="List the Reviews of a Submission")
def list_reviews(submissionId: str = Query(..., min_length=1), db: DatabaseService = Depends(get_db_service)):
    try:
        return review_service.list_reviews_for_submission(db, submissionId)
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{review_id}/submit", response_model=rubric_model.ReviewOut, summary="Submit a Review Against the Rubric")
def submit_review(review_id: int, submission: rubric_model.ReviewSubmission, db: DatabaseService = Depends(get_db_service)):
    try:
        return rubric_service.submit_review(db, review_id, submission)
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except RubricValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# --- META-REVIEW SUB-RESOURCE ---

@router.get("/{review_id}/meta", response_model=review_model.MetaReviewResponse, summary="Get the Teacher's Meta-Review")
def get_meta_review(review_id: int, db: DatabaseService = Depends(get_db_service)):
    try:
        return review_service.get_meta_review(db, review_id)
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{review_id}/meta", response_model=review_model.MetaReviewResponse, summary="Record or Update a Meta-Review")
def record_meta_review(review_id: int, meta_in: review_model.MetaReviewIn, db: DatabaseService = Depends(get_db_service)):
    try:
        return review_service.record_meta_review(db, review_id, meta_in)
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
