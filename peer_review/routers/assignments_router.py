# /peer-review-backend/peer_review/routers/assignments_router.py

"""
API endpoints for peer-review assignment of a task: preview and confirm an
assignment, inspect or reset it, and manage the task's rubric and grades.

The router owns the lock check. It calls `ensure_assignment_unlocked` before
building a plan, and confirms through `commit_plan_if_unlocked`, which checks
the lock again inside the write transaction.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..models import assignment_model, rubric_model
from ..services import assignment_service, rubric_service
from ..services.database_service import DatabaseService, get_db_service
from ..services.assignment_helpers.errors import (
    AssignmentLockedError, NoPairsError, RubricValidationError, TaskNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# --- ASSIGNMENT ENDPOINTS (/api/assignments/{task_id}) ---

@router.post("/{task_id}/assign", response_model=assignment_model.AssignResponse, summary="Preview or Confirm a Review Assignment")
def assign_reviews(task_id: str, request: assignment_model.AssignRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        assignment_service.ensure_assignment_unlocked(db, task_id)
        plan = assignment_service.build_plan(
            db,
            task_id,
            mode=request.mode,
            requested_reviews_per_reviewer=request.reviewsPerReviewer,
            seed=request.seed,
        )
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except AssignmentLockedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception:
        logger.exception("Error while building the assignment plan for task %s", task_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="The assignment could not be generated.")

    if not plan.pairs or plan.appliedReviewsPerReviewer < 1:
        detail = plan.warnings[0].message if plan.warnings else "Check that at least two teams have submitted."
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

    assignment_state = None
    if request.confirm:
        try:
            assignment_state = assignment_service.commit_plan_if_unlocked(db, plan)
        except NoPairsError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except AssignmentLockedError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
        except Exception:
            logger.exception("Error while saving the assignment for task %s", task_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="The assignment could not be saved.")

    return assignment_model.AssignResponse(
        **plan.model_dump(),
        persisted=request.confirm,
        assignmentState=assignment_state,
    )


@router.post("/{task_id}/reset", response_model=assignment_model.AssignmentState, summary="Reset a Locked Assignment")
def reset_assignment(task_id: str, db: DatabaseService = Depends(get_db_service)):
    try:
        return assignment_service.reset_assignment(db, task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{task_id}/assignment-state", response_model=assignment_model.AssignmentState, summary="Get the Assignment Lock State")
def get_assignment_state(task_id: str, db: DatabaseService = Depends(get_db_service)):
    try:
        return assignment_service.get_assignment_state(db, task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{task_id}/assignment-map", response_model=assignment_model.AssignmentMap, summary="Get the Committed Review Map")
def get_assignment_map(task_id: str, db: DatabaseService = Depends(get_db_service)):
    try:
        return assignment_service.fetch_current_map(db, task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# --- RUBRIC & GRADES SUB-RESOURCES ---

@router.get("/{task_id}/rubric", response_model=List[rubric_model.RubricItem], summary="Get the Task Rubric")
def get_rubric(task_id: str, db: DatabaseService = Depends(get_db_service)):
    try:
        return rubric_service.get_rubric(db, task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/{task_id}/rubric", response_model=List[rubric_model.RubricItem], summary="Replace the Task Rubric")
def replace_rubric(task_id: str, rubric_update: rubric_model.RubricUpdate, db: DatabaseService = Depends(get_db_service)):
    try:
        return rubric_service.replace_rubric(db, task_id, rubric_update.items)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except RubricValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{task_id}/grades", response_model=rubric_model.GradeSummary, summary="Get Review Grades per Team")
def get_grades(task_id: str, db: DatabaseService = Depends(get_db_service)):
    try:
        return rubric_service.summarize_grades(db, task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
