# /peer-review-backend/peer_review/models/rubric_model.py

from pydantic import BaseModel, Field, ConfigDict, AliasChoices
from typing import Optional, List, Dict, Any
from datetime import datetime


class RubricItemIn(BaseModel):
    """
    One criterion as sent by the rubric editor. Missing keys and labels are
    filled in from the item's position when the rubric is saved.
    """
    key: Optional[str] = None
    label: Optional[str] = None
    kind: str = Field(default="number")
    weight: Optional[float] = Field(default=1.0)
    required: bool = Field(default=False)
    minScore: Optional[float] = None
    maxScore: Optional[float] = None

class RubricUpdate(BaseModel):
    items: List[RubricItemIn] = Field(..., min_length=1)

class RubricItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    key: str
    label: str
    kind: str
    weight: float
    required: bool
    minScore: Optional[float] = Field(default=None, validation_alias=AliasChoices("minScore", "min_score"))
    maxScore: Optional[float] = Field(default=None, validation_alias=AliasChoices("maxScore", "max_score"))
    position: int

class RubricScore(BaseModel):
    normalizedScores: Dict[str, Any]
    finalGrade: Optional[float] = None


# --- Review Submission ---

class ReviewSubmission(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)
    comment: Optional[str] = None
    grade: Optional[float] = Field(default=None, description="Used only when the task has no rubric.")

class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    submission_id: str
    reviewer_team_id: str
    assigned_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    answers: Optional[Dict[str, Any]] = None
    grade: Optional[float] = None
    comment: Optional[str] = None


# --- Grade Summary ---

class TeamGrade(BaseModel):
    teamId: str
    teamName: Optional[str] = None
    submissionId: str
    averageGrade: Optional[float] = None
    reviewCount: int = 0

class GradeSummary(BaseModel):
    taskId: str
    teams: List[TeamGrade] = Field(default_factory=list)
