# /peer-review-backend/peer_review/services/assignment_helpers/context_loader.py

from typing import Dict, List

from ..database_service import DatabaseService
from ...models.assignment_model import AssignmentContext, Person
from .errors import TaskNotFoundError


def load_context(db: DatabaseService, task_id: str) -> AssignmentContext:
    """
    Reads the submissions of a task together with their author teams and
    rosters. Pure read; teams without a submission are left out entirely.
    """
    if db.get_task(task_id) is None:
        raise TaskNotFoundError(task_id)

    team_ids: List[str] = []
    team_name: Dict[str, str] = {}
    submission_of_team: Dict[str, str] = {}

    for submission, team in db.get_submissions_with_teams(task_id):
        # A team owns at most one submission per task, but guard the order
        # anyway so a duplicate row can never shift the team list.
        if team.id in submission_of_team:
            continue
        team_ids.append(team.id)
        team_name[team.id] = team.name
        submission_of_team[team.id] = submission.id

    members = db.get_members_by_team(team_ids)
    members_of_team = {
        team_id: [Person.model_validate(student) for student in members.get(team_id, [])]
        for team_id in team_ids
    }

    return AssignmentContext(
        taskId=task_id,
        teamIds=team_ids,
        teamName=team_name,
        submissionOfTeam=submission_of_team,
        membersOfTeam=members_of_team,
    )
