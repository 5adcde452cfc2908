# /peer-review-backend/peer_review/services/assignment_helpers/errors.py

"""Exceptions raised by the assignment engine and mapped to HTTP by the router."""


class AssignmentError(Exception):
    """Base class for every assignment engine failure."""


class TaskNotFoundError(AssignmentError, LookupError):
    def __init__(self, task_id: str):
        super().__init__(f"Task with ID {task_id} not found.")
        self.task_id = task_id


class NoPairsError(AssignmentError, ValueError):
    """Raised when a commit is attempted with a plan that holds no pairs."""

    def __init__(self, message: str = "There are no review pairs to save."):
        super().__init__(message)


class AssignmentLockedError(AssignmentError):
    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} already has reviews assigned. Reset it before assigning again.")
        self.task_id = task_id


class RubricValidationError(AssignmentError, ValueError):
    """The answers submitted for a review do not satisfy the task's rubric."""


class ReviewNotFoundError(AssignmentError, LookupError):
    def __init__(self, review_id: int):
        super().__init__(f"Review with ID {review_id} not found.")
        self.review_id = review_id


class SubmissionNotFoundError(AssignmentError, LookupError):
    def __init__(self, submission_id: str):
        super().__init__(f"Submission with ID {submission_id} not found.")
        self.submission_id = submission_id
