# /peer-review-backend/peer_review/models/assignment_model.py

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum

from ..config import DEFAULT_REVIEWS_PER_REVIEWER

# --- Core Enumerations ---
class AssignmentMode(str, Enum):
    TEAM = "team"
    INDIVIDUAL = "individual"

class ReviewerType(str, Enum):
    TEAM = "team"
    USER = "user"

class WarningKind(str, Enum):
    TOO_FEW_TEAMS = "TooFewTeams"
    CLAMPED_REQUEST = "ClampedRequest"
    NO_REVIEWERS = "NoReviewers"
    INSUFFICIENT_CAPACITY = "InsufficientCapacity"


# --- Engine Input ---

class Person(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    email: Optional[str] = None

class AssignmentContext(BaseModel):
    """
    Read-only snapshot of a task that the pairing strategies work from.
    `teamIds` has one entry per team with a submission, in submission
    creation order.
    """
    taskId: str
    teamIds: List[str] = Field(default_factory=list)
    teamName: Dict[str, str] = Field(default_factory=dict)
    submissionOfTeam: Dict[str, str] = Field(default_factory=dict)
    membersOfTeam: Dict[str, List[Person]] = Field(default_factory=dict)


# --- Preview Plan ---

class PlanWarning(BaseModel):
    kind: WarningKind
    message: str

class TargetRef(BaseModel):
    teamId: str
    teamName: Optional[str] = None
    submissionId: str

class ReviewerRef(BaseModel):
    id: str
    type: ReviewerType
    name: Optional[str] = None
    teamId: Optional[str] = None
    teamName: Optional[str] = None
    members: List[Person] = Field(default_factory=list)

class ReviewerPreview(ReviewerRef):
    """Reviewer-centric view: one reviewer and the submissions it will review."""
    targets: List[TargetRef] = Field(default_factory=list)

class ReviewedPreview(BaseModel):
    """Target-centric view: one author team and who will review it."""
    teamId: str
    teamName: Optional[str] = None
    submissionId: str
    members: List[Person] = Field(default_factory=list)
    reviewers: List[ReviewerRef] = Field(default_factory=list)

class PlanPair(BaseModel):
    """
    One reviewer/target pair. In individual mode `reviewerId` is the person's
    id; it is resolved to a synthetic reviewer team only at commit time.
    """
    reviewerType: ReviewerType
    reviewerId: str
    reviewerName: Optional[str] = None
    reviewerHomeTeamId: str
    targetTeamId: str
    targetSubmissionId: str

class StrategyResult(BaseModel):
    appliedReviewsPerReviewer: int = 0
    warnings: List[PlanWarning] = Field(default_factory=list)
    reviewers: List[ReviewerPreview] = Field(default_factory=list)
    reviewed: List[ReviewedPreview] = Field(default_factory=list)
    pairs: List[PlanPair] = Field(default_factory=list)
    totalReviewers: int = 0

class PreviewPlan(StrategyResult):
    taskId: str
    mode: AssignmentMode
    seed: str
    requestedReviewsPerReviewer: int
    totalSubmissions: int = 0


# --- Persisted State ---

class AssignmentState(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    taskId: str
    assignmentRecordId: str
    mode: Optional[AssignmentMode] = None
    reviewsPerReviewer: Optional[int] = None
    locked: bool = False
    assignedAt: Optional[datetime] = None
    totalReviews: int = 0


# --- Current Assignment Map ---

class TeamRef(BaseModel):
    id: str
    name: Optional[str] = None

class MapReviewer(BaseModel):
    id: str
    name: str
    reviewId: int
    isIndividual: bool = False
    members: List[Person] = Field(default_factory=list)

class MapEntry(BaseModel):
    authorTeam: TeamRef
    submissionIds: List[str]
    reviewers: List[MapReviewer] = Field(default_factory=list)

class AssignmentMap(BaseModel):
    taskId: str
    pairs: List[MapEntry] = Field(default_factory=list)


# --- API Contract Models ---

class AssignRequest(BaseModel):
    mode: AssignmentMode = AssignmentMode.TEAM
    reviewsPerReviewer: int = Field(default=DEFAULT_REVIEWS_PER_REVIEWER, ge=1, description="Reviews each reviewer should perform.")
    seed: Optional[str] = Field(default=None, description="Reuse a previous seed to reproduce a preview.")
    confirm: bool = Field(default=False, description="Persist and lock the generated plan.")

    @field_validator('seed')
    @classmethod
    def blank_seed_means_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v

class AssignResponse(PreviewPlan):
    persisted: bool = False
    assignmentState: Optional[AssignmentState] = None
