# /peer-review-backend/peer_review/services/assignment_helpers/individual_strategy.py

"""
Individual mode: every person in a submitting team reviews `k` submissions of
teams other than their own.

People and teams are shuffled independently, and each person starts walking the
team cycle at an offset that depends on both their own team's position and
their place in the person order. This keeps members of one team from all being
sent to the same few targets.
"""

import logging
from typing import Callable, Dict, List

from pydantic import BaseModel

from ...models.assignment_model import (
    AssignmentContext, Person, PlanPair, PlanWarning, ReviewedPreview, ReviewerPreview, ReviewerRef,
    ReviewerType, StrategyResult, WarningKind,
)
from .preview import add_reviewer_to_target, infeasible, target_refs, TOO_FEW_TEAMS_MESSAGE
from .seeded_random import shuffle_items

logger = logging.getLogger(__name__)


class IndividualReviewer(BaseModel):
    person: Person
    teamId: str
    teamName: str = ""

    @property
    def label(self) -> str:
        return self.person.name or f"User {self.person.id}"


def list_individual_reviewers(context: AssignmentContext) -> List[IndividualReviewer]:
    """
    One entry per person belonging to a submitting team, ordered by person id.
    A person listed in several teams is kept once, under the first of those
    teams in submission order.
    """
    team_position = {team_id: index for index, team_id in enumerate(context.teamIds)}
    candidates = [
        (person.id, team_position[team_id], person, team_id)
        for team_id in context.teamIds
        for person in context.membersOfTeam.get(team_id, [])
    ]
    candidates.sort(key=lambda row: (row[0], row[1]))

    seen = set()
    reviewers: List[IndividualReviewer] = []
    for person_id, _, person, team_id in candidates:
        if person_id in seen:
            continue
        seen.add(person_id)
        reviewers.append(IndividualReviewer(
            person=person, teamId=team_id, teamName=context.teamName.get(team_id, ""),
        ))
    return reviewers


def min_people_outside_own_team(context: AssignmentContext, reviewers: List[IndividualReviewer]) -> int:
    """Smallest number of reviewers outside a reviewer's own team, over all reviewers."""
    total_people = len(reviewers)
    return min(
        max(0, total_people - len(context.membersOfTeam.get(reviewer.teamId, [])))
        for reviewer in reviewers
    )


def max_reviews_per_person(context: AssignmentContext, reviewers: List[IndividualReviewer]) -> int:
    """
    Conservative capacity bound: nobody can review more than `teams - 1` teams,
    and the plan uses the smallest "people outside my team" count across all
    reviewers so the same k works for everyone.
    """
    return min(len(context.teamIds) - 1, min_people_outside_own_team(context, reviewers))


def build_individual_plan(context: AssignmentContext, requested: int, random_fn: Callable[[], float]) -> StrategyResult:
    warnings: List[PlanWarning] = []
    team_count = len(context.teamIds)
    if team_count < 2:
        return infeasible(WarningKind.TOO_FEW_TEAMS, TOO_FEW_TEAMS_MESSAGE, warnings)

    reviewers = list_individual_reviewers(context)
    if not reviewers:
        return infeasible(
            WarningKind.NO_REVIEWERS, "There are no people in the teams that submitted.", warnings,
        )

    max_possible = max_reviews_per_person(context, reviewers)
    applied = min(requested, max_possible)
    if applied < 1:
        return infeasible(
            WarningKind.INSUFFICIENT_CAPACITY,
            "There are not enough distinct teams to assign at least one review per person.",
            warnings,
            total_reviewers=len(reviewers),
        )
    if applied < requested:
        warnings.append(PlanWarning(
            kind=WarningKind.CLAMPED_REQUEST,
            message=(
                f"Each person can review at most {max_possible} distinct teams "
                f"(the fewest people outside any reviewer's team is {min_people_outside_own_team(context, reviewers)}). "
                f"Reduced to {applied}."
            ),
        ))
        logger.warning("Task %s: individual-mode request of %d clamped to %d", context.taskId, requested, applied)

    # Two independent shuffles, consumed in this order from the same source.
    shuffled_reviewers = shuffle_items(reviewers, random_fn)
    target_order = shuffle_items(context.teamIds, random_fn)
    reviewed: Dict[str, ReviewedPreview] = {}
    reviewer_previews: List[ReviewerPreview] = []
    pairs: List[PlanPair] = []

    for index, reviewer in enumerate(shuffled_reviewers):
        start = (target_order.index(reviewer.teamId) + 1 + index) % team_count
        targets: List[str] = []
        step = 0
        while len(targets) < applied and step < team_count * 2:
            candidate = target_order[(start + step) % team_count]
            step += 1
            if candidate == reviewer.teamId or candidate in targets:
                continue
            targets.append(candidate)

        label = reviewer.label
        members = [Person(id=reviewer.person.id, name=label, email=reviewer.person.email)]
        reviewer_previews.append(ReviewerPreview(
            id=reviewer.person.id,
            type=ReviewerType.USER,
            name=label,
            teamId=reviewer.teamId,
            teamName=reviewer.teamName,
            members=members,
            targets=target_refs(context, targets),
        ))

        for target_team_id in targets:
            add_reviewer_to_target(reviewed, context, target_team_id, ReviewerRef(
                id=reviewer.person.id,
                type=ReviewerType.USER,
                name=label,
                teamId=reviewer.teamId,
                teamName=reviewer.teamName,
                members=members,
            ))
            pairs.append(PlanPair(
                reviewerType=ReviewerType.USER,
                reviewerId=reviewer.person.id,
                reviewerName=label,
                reviewerHomeTeamId=reviewer.teamId,
                targetTeamId=target_team_id,
                targetSubmissionId=context.submissionOfTeam[target_team_id],
            ))

    return StrategyResult(
        appliedReviewsPerReviewer=applied,
        warnings=warnings,
        reviewers=reviewer_previews,
        reviewed=list(reviewed.values()),
        pairs=pairs,
        totalReviewers=len(reviewers),
    )
