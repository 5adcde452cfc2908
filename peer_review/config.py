# /peer-review-backend/peer_review/config.py

"""Environment-driven settings shared by the services and the app factory."""

import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma separated list; "*" allows every origin.
CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

DEFAULT_REVIEWS_PER_REVIEWER = int(os.getenv("DEFAULT_REVIEWS_PER_REVIEWER", "1"))

# Default bounds for a numeric rubric answer when the item sets none.
RUBRIC_SCORE_MIN = float(os.getenv("RUBRIC_SCORE_MIN", "0"))
RUBRIC_SCORE_MAX = float(os.getenv("RUBRIC_SCORE_MAX", "10"))

# Synthetic one-person reviewer teams are named "[REV <task id>] <name> #<student id>".
REVIEWER_TEAM_PREFIX_TEMPLATE = "[REV {task_id}]"


def reviewer_team_prefix(task_id: str) -> str:
    return REVIEWER_TEAM_PREFIX_TEMPLATE.format(task_id=task_id)
