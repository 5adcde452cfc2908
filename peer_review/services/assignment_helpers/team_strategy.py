# /peer-review-backend/peer_review/services/assignment_helpers/team_strategy.py

"""
Team mode: every team with a submission reviews `k` other teams.

Teams are placed on a random cycle and each one reviews the next `k` teams
along it. Every team therefore reviews exactly `k` others and is reviewed by
exactly `k` others, and nobody lands on itself.
"""

import logging
from typing import Callable, Dict, List

from ...models.assignment_model import (
    AssignmentContext, PlanPair, PlanWarning, ReviewedPreview, ReviewerPreview, ReviewerRef,
    ReviewerType, StrategyResult, WarningKind,
)
from .preview import add_reviewer_to_target, infeasible, target_refs, TOO_FEW_TEAMS_MESSAGE
from .seeded_random import shuffle_items

logger = logging.getLogger(__name__)


def build_team_plan(context: AssignmentContext, requested: int, random_fn: Callable[[], float]) -> StrategyResult:
    warnings: List[PlanWarning] = []
    team_count = len(context.teamIds)
    if team_count < 2:
        return infeasible(WarningKind.TOO_FEW_TEAMS, TOO_FEW_TEAMS_MESSAGE, warnings)

    max_per_reviewer = team_count - 1
    applied = min(requested, max_per_reviewer)
    if applied < requested:
        warnings.append(PlanWarning(
            kind=WarningKind.CLAMPED_REQUEST,
            message=f"There are only {max_per_reviewer} other teams to review. Reduced to {applied}.",
        ))
        logger.warning("Task %s: team-mode request of %d clamped to %d", context.taskId, requested, applied)

    if applied < 1:
        return infeasible(
            WarningKind.INSUFFICIENT_CAPACITY,
            "More teams are needed to assign at least one review per reviewer.",
            warnings,
        )

    shuffled = shuffle_items(context.teamIds, random_fn)
    reviewed: Dict[str, ReviewedPreview] = {}
    reviewers: List[ReviewerPreview] = []
    pairs: List[PlanPair] = []

    for index, reviewer_team_id in enumerate(shuffled):
        reviewer_name = context.teamName.get(reviewer_team_id)
        reviewer_members = context.membersOfTeam.get(reviewer_team_id, [])
        targets: List[str] = []

        for offset in range(1, team_count):
            if len(targets) >= applied:
                break
            target_team_id = shuffled[(index + offset) % team_count]
            if target_team_id == reviewer_team_id or target_team_id in targets:
                continue
            targets.append(target_team_id)

            add_reviewer_to_target(reviewed, context, target_team_id, ReviewerRef(
                id=reviewer_team_id, type=ReviewerType.TEAM, name=reviewer_name, members=reviewer_members,
            ))
            pairs.append(PlanPair(
                reviewerType=ReviewerType.TEAM,
                reviewerId=reviewer_team_id,
                reviewerName=reviewer_name,
                reviewerHomeTeamId=reviewer_team_id,
                targetTeamId=target_team_id,
                targetSubmissionId=context.submissionOfTeam[target_team_id],
            ))

        reviewers.append(ReviewerPreview(
            id=reviewer_team_id,
            type=ReviewerType.TEAM,
            name=reviewer_name,
            members=reviewer_members,
            targets=target_refs(context, targets),
        ))

    return StrategyResult(
        appliedReviewsPerReviewer=applied,
        warnings=warnings,
        reviewers=reviewers,
        reviewed=list(reviewed.values()),
        pairs=pairs,
        totalReviewers=team_count,
    )
