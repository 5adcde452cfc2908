# /tests/conftest.py

import pytest
from typing import Dict, List, Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from peer_review.db.base import Base
from peer_review.db.models.course_models import Task, Student, Team, TeamMember, Submission
from peer_review.services.database_service import DatabaseService


@pytest.fixture
def db_session():
    """
    A fresh in-memory SQLite database per test. StaticPool keeps the single
    connection alive so every session sees the same tables.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def db_service(db_session):
    return DatabaseService(db_session=db_session)


def _seed_task(
    session,
    task_id: str,
    rosters: Dict[str, List[str]],
    submitting: Optional[List[str]] = None,
) -> None:
    """
    Creates a task with one team per `rosters` key. Each roster value lists
    student ids; students are named after their id. Teams listed in
    `submitting` (all teams by default) get one submission each, created in
    the order given.
    """
    session.add(Task(id=task_id, title=f"Task {task_id}", reviews_per_submission=1))
    for team_id, student_ids in rosters.items():
        session.add(Team(id=team_id, task_id=task_id, name=f"Team {team_id}"))
        for student_id in student_ids:
            if session.get(Student, student_id) is None:
                session.add(Student(id=student_id, name=f"Student {student_id}", email=f"{student_id}@example.edu"))
            session.flush()
            session.add(TeamMember(team_id=team_id, student_id=student_id))
    session.flush()
    for team_id in (submitting if submitting is not None else list(rosters)):
        session.add(Submission(id=f"sub_{team_id}", task_id=task_id, team_id=team_id))
        session.flush()
    session.commit()


@pytest.fixture
def seed_task(db_session):
    """Exposes the seeding helper to tests that need a custom roster."""
    def _seed(task_id, rosters, submitting=None):
        _seed_task(db_session, task_id, rosters, submitting)
        return task_id
    return _seed


@pytest.fixture
def four_team_task(db_session):
    """Teams A-D with two students each, every team has submitted."""
    _seed_task(db_session, "task_4", {
        "A": ["a1", "a2"],
        "B": ["b1", "b2"],
        "C": ["c1", "c2"],
        "D": ["d1", "d2"],
    })
    return "task_4"


@pytest.fixture
def uneven_task(db_session):
    """Team A has three people, B, C and D one each."""
    _seed_task(db_session, "task_uneven", {
        "A": ["a1", "a2", "a3"],
        "B": ["b1"],
        "C": ["c1"],
        "D": ["d1"],
    })
    return "task_uneven"


@pytest.fixture
def single_team_task(db_session):
    _seed_task(db_session, "task_1", {"A": ["a1", "a2"]})
    return "task_1"
