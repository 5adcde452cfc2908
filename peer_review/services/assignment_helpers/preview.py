# /peer-review-backend/peer_review/services/assignment_helpers/preview.py

"""
Builders for the two human-readable views of a plan. Both are derived from the
same pairs: one grouped by reviewer, one grouped by the team being reviewed.
"""

from typing import Dict, List

from ...models.assignment_model import (
    AssignmentContext, PlanWarning, ReviewedPreview, ReviewerRef, StrategyResult, TargetRef, WarningKind,
)


def target_refs(context: AssignmentContext, team_ids: List[str]) -> List[TargetRef]:
    return [
        TargetRef(
            teamId=team_id,
            teamName=context.teamName.get(team_id),
            submissionId=context.submissionOfTeam[team_id],
        )
        for team_id in team_ids
    ]


def add_reviewer_to_target(
    reviewed: Dict[str, ReviewedPreview],
    context: AssignmentContext,
    target_team_id: str,
    reviewer: ReviewerRef,
) -> None:
    """Appends `reviewer` to the target's entry, creating the entry on first use."""
    entry = reviewed.get(target_team_id)
    if entry is None:
        entry = ReviewedPreview(
            teamId=target_team_id,
            teamName=context.teamName.get(target_team_id),
            submissionId=context.submissionOfTeam[target_team_id],
            members=context.membersOfTeam.get(target_team_id, []),
        )
        reviewed[target_team_id] = entry
    entry.reviewers.append(reviewer)


def infeasible(kind: WarningKind, message: str, warnings: List[PlanWarning], total_reviewers: int = 0) -> StrategyResult:
    """An empty, zero-applied result carrying the reason it could not be built."""
    warnings.append(PlanWarning(kind=kind, message=message))
    return StrategyResult(appliedReviewsPerReviewer=0, warnings=warnings, totalReviewers=total_reviewers)


TOO_FEW_TEAMS_MESSAGE = "At least two teams with a submission are needed to assign reviews."
