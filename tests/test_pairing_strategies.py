# /tests/test_pairing_strategies.py

import pytest
from collections import Counter, defaultdict

from peer_review.models.assignment_model import AssignmentContext, Person, ReviewerType, WarningKind
from peer_review.services.assignment_helpers.individual_strategy import (
    build_individual_plan, list_individual_reviewers, max_reviews_per_person, min_people_outside_own_team,
)
from peer_review.services.assignment_helpers.seeded_random import SeededRandom
from peer_review.services.assignment_helpers.team_strategy import build_team_plan


def make_context(rosters):
    """Builds a context where every roster key is a team that has submitted."""
    return AssignmentContext(
        taskId="task_test",
        teamIds=list(rosters),
        teamName={team_id: f"Team {team_id}" for team_id in rosters},
        submissionOfTeam={team_id: f"sub_{team_id}" for team_id in rosters},
        membersOfTeam={
            team_id: [Person(id=pid, name=f"Student {pid}") for pid in people]
            for team_id, people in rosters.items()
        },
    )


def team_roster(count):
    return {f"T{i}": [f"p{i}"] for i in range(count)}


# --- Team Mode ---

@pytest.mark.parametrize("team_count", [2, 3, 4, 5, 7])
@pytest.mark.parametrize("seed", ["fixed-seed-1", "another", "42"])
def test_team_plan_is_regular_and_self_avoiding(team_count, seed):
    context = make_context(team_roster(team_count))
    for k in range(1, team_count):
        result = build_team_plan(context, k, SeededRandom(seed))
        assert result.appliedReviewsPerReviewer == k
        assert result.warnings == []

        out_degree = Counter(p.reviewerId for p in result.pairs)
        in_degree = Counter(p.targetTeamId for p in result.pairs)
        assert all(out_degree[t] == k for t in context.teamIds)
        assert all(in_degree[t] == k for t in context.teamIds)
        assert all(p.reviewerId != p.targetTeamId for p in result.pairs)
        assert len({(p.reviewerId, p.targetTeamId) for p in result.pairs}) == len(result.pairs)


def test_team_plan_scenario_four_teams_two_reviews():
    context = make_context({"A": ["a"], "B": ["b"], "C": ["c"], "D": ["d"]})
    result = build_team_plan(context, 2, SeededRandom("fixed-seed-1"))

    assert len(result.pairs) == 8
    targets_by_reviewer = defaultdict(set)
    for pair in result.pairs:
        assert pair.reviewerType == ReviewerType.TEAM
        assert pair.targetSubmissionId == f"sub_{pair.targetTeamId}"
        targets_by_reviewer[pair.reviewerId].add(pair.targetTeamId)
    assert all(len(targets) == 2 for targets in targets_by_reviewer.values())
    assert all(team not in targets for team, targets in targets_by_reviewer.items())


def test_team_plan_clamps_to_team_count_minus_one():
    context = make_context(team_roster(4))
    result = build_team_plan(context, 4, SeededRandom("clamp"))
    assert result.appliedReviewsPerReviewer == 3
    assert [w.kind for w in result.warnings] == [WarningKind.CLAMPED_REQUEST]
    assert len(result.pairs) == 12


def test_team_plan_with_two_teams_is_mutual():
    context = make_context(team_roster(2))
    result = build_team_plan(context, 3, SeededRandom("pair"))
    assert result.appliedReviewsPerReviewer == 1
    assert {(p.reviewerId, p.targetTeamId) for p in result.pairs} == {("T0", "T1"), ("T1", "T0")}


def test_team_plan_needs_two_teams():
    context = make_context(team_roster(1))
    result = build_team_plan(context, 1, SeededRandom("alone"))
    assert result.appliedReviewsPerReviewer == 0
    assert result.pairs == []
    assert result.warnings[0].kind == WarningKind.TOO_FEW_TEAMS


def test_team_plan_is_deterministic_for_a_seed():
    context = make_context(team_roster(6))
    first = build_team_plan(context, 2, SeededRandom("same"))
    second = build_team_plan(context, 2, SeededRandom("same"))
    assert first.model_dump() == second.model_dump()


def test_team_plan_views_match_pairs():
    context = make_context(team_roster(5))
    result = build_team_plan(context, 2, SeededRandom("views"))

    from_reviewers = {(r.id, t.teamId) for r in result.reviewers for t in r.targets}
    from_reviewed = {(ref.id, entry.teamId) for entry in result.reviewed for ref in entry.reviewers}
    from_pairs = {(p.reviewerId, p.targetTeamId) for p in result.pairs}
    assert from_reviewers == from_pairs == from_reviewed
    assert len(result.reviewers) == 5


# --- Individual Mode ---

def test_individual_scenario_uneven_teams():
    context = make_context({"A": ["a1", "a2", "a3"], "B": ["b1"], "C": ["c1"], "D": ["d1"]})
    result = build_individual_plan(context, 3, SeededRandom("uneven"))

    # min(teams - 1 = 3, smallest outside count = 6 - 3 = 3)
    assert result.appliedReviewsPerReviewer == 3
    assert result.totalReviewers == 6
    home_team = {pid: team for team, people in {"A": ["a1", "a2", "a3"], "B": ["b1"], "C": ["c1"], "D": ["d1"]}.items() for pid in people}

    targets_by_person = defaultdict(list)
    for pair in result.pairs:
        assert pair.reviewerType == ReviewerType.USER
        assert pair.reviewerHomeTeamId == home_team[pair.reviewerId]
        targets_by_person[pair.reviewerId].append(pair.targetTeamId)

    assert set(targets_by_person) == set(home_team)
    for person_id, targets in targets_by_person.items():
        assert len(targets) == 3
        assert len(set(targets)) == 3
        assert home_team[person_id] not in targets


def test_individual_plan_clamps_to_capacity():
    context = make_context({"A": ["a1", "a2", "a3"], "B": ["b1"], "C": ["c1"], "D": ["d1"]})
    result = build_individual_plan(context, 5, SeededRandom("clamp"))
    assert result.appliedReviewsPerReviewer == 3
    assert result.warnings[0].kind == WarningKind.CLAMPED_REQUEST
    assert "outside any reviewer's team is 3)" in result.warnings[0].message


def test_individual_capacity_uses_smallest_outside_count():
    # A has 4 of 6 people, so A's members only have 2 people outside their team.
    context = make_context({"A": ["a1", "a2", "a3", "a4"], "B": ["b1"], "C": ["c1"], "D": []})
    reviewers = list_individual_reviewers(context)
    assert min_people_outside_own_team(context, reviewers) == 2
    assert max_reviews_per_person(context, reviewers) == 2

    result = build_individual_plan(context, 3, SeededRandom("cap"))
    assert result.appliedReviewsPerReviewer == 2
    assert "is 2)" in result.warnings[0].message
    assert all(len([p for p in result.pairs if p.reviewerId == r.person.id]) == 2 for r in reviewers)


def test_individual_plan_needs_two_teams():
    result = build_individual_plan(make_context({"A": ["a1", "a2"]}), 1, SeededRandom("x"))
    assert result.pairs == []
    assert result.warnings[0].kind == WarningKind.TOO_FEW_TEAMS


def test_individual_plan_without_people_reports_no_reviewers():
    result = build_individual_plan(make_context({"A": [], "B": []}), 1, SeededRandom("x"))
    assert result.pairs == []
    assert result.warnings[0].kind == WarningKind.NO_REVIEWERS


def test_individual_plan_without_capacity_is_infeasible():
    # Nobody is outside team A, so no one can be given a review.
    result = build_individual_plan(make_context({"A": ["a1", "a2"], "B": []}), 1, SeededRandom("x"))
    assert result.pairs == []
    assert result.appliedReviewsPerReviewer == 0
    assert result.warnings[0].kind == WarningKind.INSUFFICIENT_CAPACITY
    assert result.totalReviewers == 2


def test_person_in_two_teams_is_listed_once_under_first_team():
    context = make_context({"A": ["shared", "a1"], "B": ["shared", "b1"], "C": ["c1"]})
    reviewers = list_individual_reviewers(context)
    assert [r.person.id for r in reviewers] == ["a1", "b1", "c1", "shared"]
    assert next(r for r in reviewers if r.person.id == "shared").teamId == "A"


def test_individual_plan_is_deterministic_for_a_seed():
    context = make_context({"A": ["a1", "a2"], "B": ["b1", "b2"], "C": ["c1"], "D": ["d1", "d2"]})
    first = build_individual_plan(context, 2, SeededRandom("repeat"))
    second = build_individual_plan(context, 2, SeededRandom("repeat"))
    assert [p.model_dump() for p in first.pairs] == [p.model_dump() for p in second.pairs]


def test_individual_preview_uses_person_as_reviewer():
    context = make_context({"A": ["a1"], "B": ["b1"], "C": ["c1"]})
    result = build_individual_plan(context, 1, SeededRandom("preview"))
    for reviewer in result.reviewers:
        assert reviewer.type == ReviewerType.USER
        assert [m.id for m in reviewer.members] == [reviewer.id]
        assert reviewer.teamId not in [t.teamId for t in reviewer.targets]
