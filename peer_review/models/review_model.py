# /peer-review-backend/peer_review/models/review_model.py

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from ..config import RUBRIC_SCORE_MAX, RUBRIC_SCORE_MIN
from .assignment_model import Person


# --- Review Listing ---

class ReviewerTeam(BaseModel):
    id: str
    name: Optional[str] = None
    members: List[Person] = Field(default_factory=list)

class ReviewListItem(BaseModel):
    """One review of a submission, as shown to the author team and the teacher."""
    id: int
    submissionId: str
    reviewerTeam: ReviewerTeam
    assignedAt: Optional[datetime] = None
    submittedAt: Optional[datetime] = None
    answers: Optional[Dict[str, Any]] = None
    grade: Optional[float] = None
    comment: Optional[str] = None


# --- Meta-Review ---

class MetaReviewIn(BaseModel):
    qualityGrade: Optional[float] = Field(
        default=None,
        ge=RUBRIC_SCORE_MIN,
        le=RUBRIC_SCORE_MAX,
        allow_inf_nan=False,
        description="The teacher's grade for the quality of the review.",
    )
    observation: Optional[str] = None
    teacherId: Optional[str] = None

class MetaReview(BaseModel):
    id: int
    qualityGrade: Optional[float] = None
    observation: Optional[str] = None
    teacherId: Optional[str] = None
    createdAt: Optional[datetime] = None

class MetaReviewResponse(BaseModel):
    reviewId: int
    meta: Optional[MetaReview] = None
